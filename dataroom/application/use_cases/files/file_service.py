"""File use cases: get, download URL, list, search, rename, duplicate, delete."""

from __future__ import annotations

import logging
from datetime import timedelta

from dataroom.application.dtos.common import Page
from dataroom.application.dtos.file import (
    DownloadUrl,
    FileCreate,
    FileResult,
    FileSearchFilters,
)
from dataroom.application.interfaces.repositories import IFileRepository
from dataroom.application.interfaces.services import IStorageService
from dataroom.application.services.ownership_resolver import OwnershipResolver
from dataroom.application.services.storage_cleanup import StorageCleanup
from dataroom.application.use_cases.common import page_offset, require_name
from dataroom.domain.exceptions import ConflictException, ValidationException
from dataroom.domain.value_objects import FILE_NAME_MAX, EntityName
from dataroom.shared.utils.datetime import ensure_utc
from dataroom.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

_SCOPE = "this folder"
DEFAULT_URL_TTL_SECONDS = 3600
MAX_URL_TTL_SECONDS = 7 * 24 * 3600


class FileService:
    """File metadata operations inside data rooms the caller owns."""

    def __init__(
        self,
        file_repo: IFileRepository,
        storage: IStorageService,
        resolver: OwnershipResolver,
        cleanup: StorageCleanup,
    ) -> None:
        self.file_repo = file_repo
        self.storage = storage
        self.resolver = resolver
        self.cleanup = cleanup

    async def get(self, user_id: str, file_id: str) -> FileResult:
        return await self.resolver.require_file(user_id, file_id)

    async def download_url(
        self, user_id: str, file_id: str, expires_in: int = DEFAULT_URL_TTL_SECONDS
    ) -> DownloadUrl:
        if not 1 <= expires_in <= MAX_URL_TTL_SECONDS:
            raise ValidationException(
                f"expiresIn must be between 1 and {MAX_URL_TTL_SECONDS} seconds",
                field="expiresIn",
            )
        file = await self.resolver.require_file(user_id, file_id)
        url = await self.storage.generate_download_url(
            file.storage_ref, timedelta(seconds=expires_in), filename=file.name
        )
        return DownloadUrl(url=url, expires_in=expires_in)

    async def list(
        self,
        user_id: str,
        *,
        folder_id: str | None = None,
        data_room_id: str | None = None,
        mime_type: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[FileResult]:
        """Files in exactly one scope (a folder or a whole room), case-insensitive name order."""
        if (folder_id is None) == (data_room_id is None):
            raise ValidationException(
                "Provide exactly one of folderId or dataRoomId", field="folderId"
            )
        skip = page_offset(page, limit)
        if folder_id is not None:
            await self.resolver.require_folder(user_id, folder_id)
        else:
            await self.resolver.require_data_room(user_id, data_room_id)
        items = await self.file_repo.list_scoped(
            folder_id=folder_id,
            data_room_id=data_room_id,
            mime_type=mime_type,
            skip=skip,
            limit=limit,
        )
        total = await self.file_repo.count_scoped(
            folder_id=folder_id, data_room_id=data_room_id, mime_type=mime_type
        )
        return Page(items=items, total=total, page=page, limit=limit)

    async def search(
        self,
        user_id: str,
        filters: FileSearchFilters,
        page: int = 1,
        limit: int = 20,
    ) -> Page[FileResult]:
        """Case-insensitive name search across the caller's rooms, optionally narrowed."""
        query = filters.query.strip()
        if not query:
            raise ValidationException("Search query is required", field="query")
        if (
            filters.size_min is not None
            and filters.size_max is not None
            and filters.size_min > filters.size_max
        ):
            raise ValidationException("sizeMin must not exceed sizeMax", field="sizeMin")
        date_from = ensure_utc(filters.date_from)
        date_to = ensure_utc(filters.date_to)
        if date_from is not None and date_to is not None and date_from > date_to:
            raise ValidationException("dateFrom must not be after dateTo", field="dateFrom")
        skip = page_offset(page, limit)
        if filters.data_room_id is not None:
            await self.resolver.require_data_room(user_id, filters.data_room_id)
        if filters.folder_id is not None:
            await self.resolver.require_folder(user_id, filters.folder_id)
        criteria = FileSearchFilters(
            query=query,
            data_room_id=filters.data_room_id,
            folder_id=filters.folder_id,
            mime_type=filters.mime_type,
            date_from=date_from,
            date_to=date_to,
            size_min=filters.size_min,
            size_max=filters.size_max,
        )
        items = await self.file_repo.search(user_id, criteria, skip=skip, limit=limit)
        total = await self.file_repo.count_search(user_id, criteria)
        return Page(items=items, total=total, page=page, limit=limit)

    async def rename(self, user_id: str, file_id: str, name: str) -> FileResult:
        """Rename; the sibling check is exact and excludes the file itself."""
        file = await self.resolver.require_file(user_id, file_id)
        new_name = require_name(name, FILE_NAME_MAX).value
        if new_name == file.name:
            return file
        if await self.file_repo.exists_in_folder(
            file.folder_id, new_name, exclude_id=file.id
        ):
            raise ConflictException("file", new_name, _SCOPE)
        return await self.file_repo.rename(file.id, new_name)

    async def duplicate(self, user_id: str, file_id: str) -> FileResult:
        """Create '<name> (Copy)' in the same folder, sharing the original's storage object."""
        file = await self.resolver.require_file(user_id, file_id)
        copy_name = EntityName(file.name, FILE_NAME_MAX).copy_name().value
        if await self.file_repo.exists_in_folder(file.folder_id, copy_name):
            raise ConflictException("file", copy_name, _SCOPE)
        copy = await self.file_repo.create_file(
            FileCreate(
                id=generate_cuid(),
                name=copy_name,
                mime_type=file.mime_type,
                file_size=file.file_size,
                checksum=file.checksum,
                storage_ref=file.storage_ref,
                folder_id=file.folder_id,
                data_room_id=file.data_room_id,
                owner_id=user_id,
            )
        )
        logger.info("File %s duplicated as %s by %s", file.id, copy.id, user_id)
        return copy

    async def delete(self, user_id: str, file_id: str) -> None:
        """Delete the row; the storage object goes only when no other row references it."""
        file = await self.resolver.require_file(user_id, file_id)
        await self.file_repo.delete_by_id(file.id)
        released = await self.cleanup.release_unreferenced({file.storage_ref})
        logger.info(
            "File %s deleted by %s (storage %s)",
            file.id,
            user_id,
            "released" if released else "kept",
        )
