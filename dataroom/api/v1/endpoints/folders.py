"""Folder API: thin routes delegating to FolderService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from dataroom.api.v1.dependencies import (
    CurrentUser,
    get_folder_service,
    get_folder_service_write,
)
from dataroom.application.dtos.folder import FolderContents
from dataroom.application.use_cases.folders import FolderService
from dataroom.core.limiter import limit_writes
from dataroom.domain.enums import SortField, SortOrder
from dataroom.schemas.common import ApiResponse
from dataroom.schemas.file import FileResponse
from dataroom.schemas.folder import (
    BreadcrumbItemResponse,
    BreadcrumbResponse,
    DataRoomRef,
    FolderContentsResponse,
    FolderCreateRequest,
    FolderMoveRequest,
    FolderRenameRequest,
    FolderResponse,
)

router = APIRouter()

ReadService = Annotated[FolderService, Depends(get_folder_service)]
WriteService = Annotated[FolderService, Depends(get_folder_service_write)]


def _contents_response(contents: FolderContents) -> FolderContentsResponse:
    return FolderContentsResponse(
        folder=FolderResponse.model_validate(contents.folder),
        children=[FolderResponse.model_validate(c) for c in contents.children],
        files=[FileResponse.model_validate(f) for f in contents.files],
    )


@router.post("", response_model=ApiResponse[FolderResponse], status_code=201)
@limit_writes
async def create_folder(
    request: Request,
    body: FolderCreateRequest,
    current_user: CurrentUser,
    service: WriteService,
):
    """Create a folder at the room's root level (parentId omitted) or under a parent."""
    folder = await service.create(
        current_user.id, body.name, body.data_room_id, body.parent_id
    )
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        message="Folder created successfully",
    )


@router.get("/{folder_id}", response_model=ApiResponse[FolderResponse])
async def get_folder(folder_id: str, current_user: CurrentUser, service: ReadService):
    folder = await service.get(current_user.id, folder_id)
    return ApiResponse(data=FolderResponse.model_validate(folder))


@router.patch("/{folder_id}", response_model=ApiResponse[FolderResponse])
@limit_writes
async def rename_folder(
    request: Request,
    folder_id: str,
    body: FolderRenameRequest,
    current_user: CurrentUser,
    service: WriteService,
):
    folder = await service.rename(current_user.id, folder_id, body.name)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        message="Folder renamed successfully",
    )


@router.delete("/{folder_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_folder(
    request: Request,
    folder_id: str,
    current_user: CurrentUser,
    service: WriteService,
):
    """Delete the folder, its subfolders and their files."""
    await service.delete(current_user.id, folder_id)
    return ApiResponse(data=None, message="Folder deleted successfully")


@router.get("/{folder_id}/contents", response_model=ApiResponse[FolderContentsResponse])
async def get_folder_contents(
    folder_id: str,
    current_user: CurrentUser,
    service: ReadService,
    include_files: Annotated[bool, Query(alias="includeFiles")] = True,
    sort: SortField = SortField.NAME,
    order: SortOrder = SortOrder.ASC,
):
    """Immediate child folders and files, sorted by name, createdAt or size."""
    contents = await service.contents(
        current_user.id,
        folder_id,
        include_files=include_files,
        sort=sort,
        order=order,
    )
    return ApiResponse(data=_contents_response(contents))


@router.get("/{folder_id}/breadcrumb", response_model=ApiResponse[BreadcrumbResponse])
async def get_folder_breadcrumb(
    folder_id: str, current_user: CurrentUser, service: ReadService
):
    crumb = await service.breadcrumb(current_user.id, folder_id)
    return ApiResponse(
        data=BreadcrumbResponse(
            data_room=DataRoomRef(id=crumb.data_room_id, name=crumb.data_room_name),
            path=[BreadcrumbItemResponse(id=i.id, name=i.name) for i in crumb.items],
        )
    )


@router.post("/{folder_id}/move", response_model=ApiResponse[FolderResponse])
@limit_writes
async def move_folder(
    request: Request,
    folder_id: str,
    body: FolderMoveRequest,
    current_user: CurrentUser,
    service: WriteService,
):
    folder = await service.move(current_user.id, folder_id, body.parent_id)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        message="Folder moved successfully",
    )


@router.post(
    "/{folder_id}/duplicate", response_model=ApiResponse[FolderResponse], status_code=201
)
@limit_writes
async def duplicate_folder(
    request: Request,
    folder_id: str,
    current_user: CurrentUser,
    service: WriteService,
):
    folder = await service.duplicate(current_user.id, folder_id)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        message="Folder duplicated successfully",
    )
