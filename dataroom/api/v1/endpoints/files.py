"""File API: upload, listing, search, rename, duplicate, delete and download links."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from dataroom.api.v1.dependencies import (
    CurrentUser,
    get_file_service,
    get_file_service_write,
    get_file_upload_service,
)
from dataroom.application.dtos.common import Page
from dataroom.application.dtos.file import FileResult, FileSearchFilters
from dataroom.application.use_cases.files import FileService, FileUploadService
from dataroom.core.config import get_settings
from dataroom.core.limiter import limit_upload, limit_writes
from dataroom.schemas.common import ApiResponse, Pagination
from dataroom.schemas.file import DownloadUrlResponse, FileRenameRequest, FileResponse

router = APIRouter()

ReadService = Annotated[FileService, Depends(get_file_service)]
WriteService = Annotated[FileService, Depends(get_file_service_write)]


def _clamp_limit(limit: int | None) -> int:
    settings = get_settings()
    return min(limit or settings.default_page_size, settings.max_page_size)


def _page_response(page: Page[FileResult]) -> ApiResponse[list[FileResponse]]:
    return ApiResponse(
        data=[FileResponse.model_validate(f) for f in page.items],
        pagination=Pagination(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
        ),
    )


@router.post("/upload", response_model=ApiResponse[FileResponse], status_code=201)
@limit_upload
async def upload_file(
    request: Request,
    current_user: CurrentUser,
    service: Annotated[FileUploadService, Depends(get_file_upload_service)],
    file: Annotated[UploadFile, File(...)],
    folder_id: Annotated[str, Form(alias="folderId")],
    name: Annotated[str | None, Form()] = None,
):
    """Upload a file into a folder. name overrides the uploaded filename."""
    try:
        result = await service.upload(
            file.file,
            name or file.filename,
            file.content_type,
            folder_id,
            current_user.id,
        )
    finally:
        await file.close()
    return ApiResponse(
        data=FileResponse.model_validate(result),
        message="File uploaded successfully",
    )


@router.get("", response_model=ApiResponse[list[FileResponse]])
async def list_files(
    current_user: CurrentUser,
    service: ReadService,
    folder_id: Annotated[str | None, Query(alias="folderId")] = None,
    data_room_id: Annotated[str | None, Query(alias="dataRoomId")] = None,
    mime_type: Annotated[str | None, Query(alias="mimeType")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
):
    """Files in one folder or one whole room (exactly one of folderId / dataRoomId)."""
    result = await service.list(
        current_user.id,
        folder_id=folder_id,
        data_room_id=data_room_id,
        mime_type=mime_type,
        page=page,
        limit=_clamp_limit(limit),
    )
    return _page_response(result)


@router.get("/search", response_model=ApiResponse[list[FileResponse]])
async def search_files(
    current_user: CurrentUser,
    service: ReadService,
    query: Annotated[str, Query(min_length=1, max_length=255)],
    data_room_id: Annotated[str | None, Query(alias="dataRoomId")] = None,
    folder_id: Annotated[str | None, Query(alias="folderId")] = None,
    mime_type: Annotated[str | None, Query(alias="mimeType")] = None,
    file_type: Annotated[str | None, Query(alias="fileType")] = None,
    date_from: Annotated[datetime | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[datetime | None, Query(alias="dateTo")] = None,
    size_min: Annotated[int | None, Query(alias="sizeMin", ge=0)] = None,
    size_max: Annotated[int | None, Query(alias="sizeMax", ge=0)] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
):
    """Case-insensitive name search across the caller's rooms. fileType is an alias of mimeType."""
    filters = FileSearchFilters(
        query=query,
        data_room_id=data_room_id,
        folder_id=folder_id,
        mime_type=mime_type or file_type,
        date_from=date_from,
        date_to=date_to,
        size_min=size_min,
        size_max=size_max,
    )
    result = await service.search(
        current_user.id, filters, page=page, limit=_clamp_limit(limit)
    )
    return _page_response(result)


@router.get("/{file_id}", response_model=ApiResponse[FileResponse])
async def get_file(file_id: str, current_user: CurrentUser, service: ReadService):
    result = await service.get(current_user.id, file_id)
    return ApiResponse(data=FileResponse.model_validate(result))


@router.get("/{file_id}/download-url", response_model=ApiResponse[DownloadUrlResponse])
async def get_download_url(
    file_id: str,
    current_user: CurrentUser,
    service: ReadService,
    expires_in: Annotated[int, Query(alias="expiresIn")] = 3600,
):
    """Temporary URL for downloading the file content."""
    link = await service.download_url(current_user.id, file_id, expires_in)
    return ApiResponse(data=DownloadUrlResponse(url=link.url, expires_in=link.expires_in))


@router.patch("/{file_id}", response_model=ApiResponse[FileResponse])
@limit_writes
async def rename_file(
    request: Request,
    file_id: str,
    body: FileRenameRequest,
    current_user: CurrentUser,
    service: WriteService,
):
    result = await service.rename(current_user.id, file_id, body.name)
    return ApiResponse(
        data=FileResponse.model_validate(result),
        message="File renamed successfully",
    )


@router.post(
    "/{file_id}/duplicate", response_model=ApiResponse[FileResponse], status_code=201
)
@limit_writes
async def duplicate_file(
    request: Request,
    file_id: str,
    current_user: CurrentUser,
    service: WriteService,
):
    """Copy the file record next to the original; both share one storage object."""
    result = await service.duplicate(current_user.id, file_id)
    return ApiResponse(
        data=FileResponse.model_validate(result),
        message="File duplicated successfully",
    )


@router.delete("/{file_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_file(
    request: Request,
    file_id: str,
    current_user: CurrentUser,
    service: WriteService,
):
    await service.delete(current_user.id, file_id)
    return ApiResponse(data=None, message="File deleted successfully")
