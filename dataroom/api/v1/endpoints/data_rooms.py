"""Data room API: thin routes delegating to DataRoomService and FolderService (tree)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from dataroom.api.v1.dependencies import (
    CurrentUser,
    get_data_room_service,
    get_data_room_service_write,
    get_folder_service,
)
from dataroom.application.dtos.data_room import DataRoomDetail
from dataroom.application.use_cases.data_rooms import DataRoomService
from dataroom.application.use_cases.folders import FolderService
from dataroom.core.config import get_settings
from dataroom.core.limiter import limit_writes
from dataroom.schemas.common import ApiResponse, Pagination
from dataroom.schemas.data_room import (
    DataRoomCreateRequest,
    DataRoomDetailResponse,
    DataRoomResponse,
    DataRoomUpdateRequest,
)
from dataroom.schemas.folder import FolderResponse, FolderTreeNodeResponse

router = APIRouter()

DEFAULT_ROOM_PAGE_SIZE = 10


def _detail_response(detail: DataRoomDetail) -> DataRoomDetailResponse:
    base = DataRoomResponse.model_validate(detail.data_room).model_dump()
    return DataRoomDetailResponse(
        **base,
        root_folders=[FolderResponse.model_validate(f) for f in detail.root_folders],
        total_folders=detail.total_folders,
    )


@router.post("", response_model=ApiResponse[DataRoomResponse], status_code=201)
@limit_writes
async def create_data_room(
    request: Request,
    body: DataRoomCreateRequest,
    current_user: CurrentUser,
    service: Annotated[DataRoomService, Depends(get_data_room_service_write)],
):
    room = await service.create(current_user.id, body.name, body.description)
    return ApiResponse(
        data=DataRoomResponse.model_validate(room),
        message="Data room created successfully",
    )


@router.get("", response_model=ApiResponse[list[DataRoomResponse]])
async def list_data_rooms(
    current_user: CurrentUser,
    service: Annotated[DataRoomService, Depends(get_data_room_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_ROOM_PAGE_SIZE,
):
    """List the caller's data rooms, most recently updated first."""
    limit = min(limit, get_settings().max_page_size)
    result = await service.list(current_user.id, page=page, limit=limit)
    return ApiResponse(
        data=[DataRoomResponse.model_validate(r) for r in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.get("/{data_room_id}", response_model=ApiResponse[DataRoomDetailResponse])
async def get_data_room(
    data_room_id: str,
    current_user: CurrentUser,
    service: Annotated[DataRoomService, Depends(get_data_room_service)],
):
    detail = await service.get(current_user.id, data_room_id)
    return ApiResponse(data=_detail_response(detail))


@router.patch("/{data_room_id}", response_model=ApiResponse[DataRoomResponse])
@limit_writes
async def update_data_room(
    request: Request,
    data_room_id: str,
    body: DataRoomUpdateRequest,
    current_user: CurrentUser,
    service: Annotated[DataRoomService, Depends(get_data_room_service_write)],
):
    room = await service.update(
        current_user.id, data_room_id, name=body.name, description=body.description
    )
    return ApiResponse(
        data=DataRoomResponse.model_validate(room),
        message="Data room updated successfully",
    )


@router.delete("/{data_room_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_data_room(
    request: Request,
    data_room_id: str,
    current_user: CurrentUser,
    service: Annotated[DataRoomService, Depends(get_data_room_service_write)],
):
    """Delete the room with all its folders and files."""
    await service.delete(current_user.id, data_room_id)
    return ApiResponse(data=None, message="Data room deleted successfully")


@router.get("/{data_room_id}/tree", response_model=ApiResponse[list[FolderTreeNodeResponse]])
async def get_data_room_tree(
    data_room_id: str,
    current_user: CurrentUser,
    service: Annotated[FolderService, Depends(get_folder_service)],
):
    """Nested folder tree of the room (for sidebar navigation)."""
    nodes = await service.tree(current_user.id, data_room_id)
    return ApiResponse(data=[FolderTreeNodeResponse.model_validate(n) for n in nodes])
