"""Data room, folder and file service dependencies (composition root).

Read routes get services bound to a plain session (get_db); write routes
get services bound to a transactional session (get_db_transactional) so
every mutation in a request commits or rolls back together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.application.interfaces.services import IStorageService
from dataroom.application.services import (
    BreadcrumbBuilder,
    OwnershipResolver,
    StorageCleanup,
)
from dataroom.application.use_cases.data_rooms import DataRoomService
from dataroom.application.use_cases.files import FileService, FileUploadService
from dataroom.application.use_cases.folders import FolderService
from dataroom.core.config import get_settings
from dataroom.infrastructure.persistence.database import get_db, get_db_transactional
from dataroom.infrastructure.persistence.repositories import (
    DataRoomRepository,
    FileRepository,
    FolderRepository,
)

from .storage import get_storage_service


@dataclass(frozen=True)
class _Hierarchy:
    """Repositories and shared services bound to one session."""

    data_rooms: DataRoomRepository
    folders: FolderRepository
    files: FileRepository
    resolver: OwnershipResolver
    breadcrumbs: BreadcrumbBuilder
    cleanup: StorageCleanup
    max_depth: int


def _hierarchy(db: AsyncSession, storage: IStorageService) -> _Hierarchy:
    max_depth = get_settings().max_folder_depth
    data_rooms = DataRoomRepository(db)
    folders = FolderRepository(db)
    files = FileRepository(db)
    return _Hierarchy(
        data_rooms=data_rooms,
        folders=folders,
        files=files,
        resolver=OwnershipResolver(data_rooms, folders, files, max_depth=max_depth),
        breadcrumbs=BreadcrumbBuilder(folders, max_depth=max_depth),
        cleanup=StorageCleanup(storage, files),
        max_depth=max_depth,
    )


def _data_room_service(h: _Hierarchy) -> DataRoomService:
    return DataRoomService(h.data_rooms, h.folders, h.files, h.resolver, h.cleanup)


def _folder_service(h: _Hierarchy) -> FolderService:
    return FolderService(
        h.folders, h.files, h.resolver, h.breadcrumbs, h.cleanup, max_depth=h.max_depth
    )


def _file_service(h: _Hierarchy, storage: IStorageService) -> FileService:
    return FileService(h.files, storage, h.resolver, h.cleanup)


async def get_data_room_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> DataRoomService:
    return _data_room_service(_hierarchy(db, storage))


async def get_data_room_service_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> DataRoomService:
    return _data_room_service(_hierarchy(db, storage))


async def get_folder_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> FolderService:
    return _folder_service(_hierarchy(db, storage))


async def get_folder_service_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> FolderService:
    return _folder_service(_hierarchy(db, storage))


async def get_file_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> FileService:
    return _file_service(_hierarchy(db, storage), storage)


async def get_file_service_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> FileService:
    return _file_service(_hierarchy(db, storage), storage)


async def get_file_upload_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    storage: Annotated[IStorageService, Depends(get_storage_service)],
) -> FileUploadService:
    """Upload coordinator with the configured size limit and MIME allow-list."""
    settings = get_settings()
    h = _hierarchy(db, storage)
    return FileUploadService(
        storage,
        h.files,
        h.resolver,
        h.cleanup,
        max_upload_size=settings.max_upload_size,
        allowed_mime_types=settings.allowed_mime_type_set,
    )
