"""File repository. Returns application DTOs.

Also answers the storage reference-count questions used when rows are
deleted: several file rows may point at one storage object after a
duplicate, and the object may only be released once none do.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.application.dtos.file import FileCreate, FileResult, FileSearchFilters
from dataroom.domain.enums import SortField, SortOrder
from dataroom.domain.exceptions import ConflictException, ResourceNotFoundException
from dataroom.infrastructure.persistence.models.data_room import DataRoom
from dataroom.infrastructure.persistence.models.file import File
from dataroom.infrastructure.persistence.repositories.base import BaseRepository


def _create_to_file(d: FileCreate) -> File:
    """Map FileCreate (write-model) to ORM File for persistence."""
    return File(
        id=d.id,
        name=d.name,
        mime_type=d.mime_type,
        file_size=d.file_size,
        checksum=d.checksum,
        storage_ref=d.storage_ref,
        folder_id=d.folder_id,
        data_room_id=d.data_room_id,
        owner_id=d.owner_id,
    )


def _file_to_result(f: File) -> FileResult:
    """Map ORM File to application FileResult."""
    return FileResult(
        id=f.id,
        name=f.name,
        mime_type=f.mime_type,
        file_size=f.file_size,
        checksum=f.checksum,
        storage_ref=f.storage_ref,
        folder_id=f.folder_id,
        data_room_id=f.data_room_id,
        owner_id=f.owner_id,
        created_at=f.created_at,
        updated_at=f.updated_at,
    )


def _order_by(sort: SortField, order: SortOrder) -> list[Any]:
    if sort == SortField.CREATED_AT:
        key: Any = File.created_at
    elif sort == SortField.SIZE:
        key = File.file_size
    else:
        key = func.lower(File.name)
    key = key.desc() if order == SortOrder.DESC else key.asc()
    return [key, File.id]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _scope_filter(
    folder_id: str | None, data_room_id: str | None, mime_type: str | None
) -> list[Any]:
    conditions: list[Any] = []
    if folder_id is not None:
        conditions.append(File.folder_id == folder_id)
    if data_room_id is not None:
        conditions.append(File.data_room_id == data_room_id)
    if mime_type:
        conditions.append(File.mime_type == mime_type)
    return conditions


def _search_filter(owner_id: str, f: FileSearchFilters) -> list[Any]:
    """Owner scoping goes through the room, not the uploader column."""
    owned_rooms = select(DataRoom.id).where(DataRoom.owner_id == owner_id)
    conditions: list[Any] = [
        File.data_room_id.in_(owned_rooms),
        File.name.ilike(f"%{_escape_like(f.query)}%", escape="\\"),
    ]
    conditions.extend(_scope_filter(f.folder_id, f.data_room_id, f.mime_type))
    if f.date_from is not None:
        conditions.append(File.created_at >= f.date_from)
    if f.date_to is not None:
        conditions.append(File.created_at <= f.date_to)
    if f.size_min is not None:
        conditions.append(File.file_size >= f.size_min)
    if f.size_max is not None:
        conditions.append(File.file_size <= f.size_max)
    return conditions


class FileRepository(BaseRepository[File]):
    """File repository. Name is unique (case-sensitive) per folder."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, File)

    def _conflict(self, obj: File) -> ConflictException:
        return ConflictException("file", obj.name, "this folder")

    def _missing_reference(self, obj: File) -> ResourceNotFoundException:
        return ResourceNotFoundException("folder", obj.folder_id)

    async def get_by_id(self, file_id: str) -> FileResult | None:
        row = await self._get_orm(file_id)
        return _file_to_result(row) if row else None

    async def exists_in_folder(
        self, folder_id: str, name: str, exclude_id: str | None = None
    ) -> bool:
        stmt = select(File.id).where(File.folder_id == folder_id, File.name == name)
        if exclude_id is not None:
            stmt = stmt.where(File.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def create_file(self, data: FileCreate) -> FileResult:
        created = await self.create(_create_to_file(data))
        return _file_to_result(created)

    async def create_files(self, data: list[FileCreate]) -> int:
        if not data:
            return 0
        rows = [_create_to_file(d) for d in data]
        self.db.add_all(rows)
        await self._flush_translated(rows[0])
        return len(rows)

    async def rename(self, file_id: str, name: str) -> FileResult:
        orm = await self._get_orm(file_id)
        if orm is None:
            raise ResourceNotFoundException("file", file_id)
        orm.name = name
        updated = await self.update(orm)
        return _file_to_result(updated)

    async def list_by_folder(
        self,
        folder_id: str,
        sort: SortField = SortField.NAME,
        order: SortOrder = SortOrder.ASC,
    ) -> list[FileResult]:
        result = await self.db.execute(
            select(File)
            .where(File.folder_id == folder_id)
            .order_by(*_order_by(sort, order))
        )
        return [_file_to_result(f) for f in result.scalars().all()]

    async def list_by_folders(self, folder_ids: list[str]) -> list[FileResult]:
        if not folder_ids:
            return []
        result = await self.db.execute(
            select(File).where(File.folder_id.in_(folder_ids)).order_by(File.id)
        )
        return [_file_to_result(f) for f in result.scalars().all()]

    async def list_scoped(
        self,
        *,
        folder_id: str | None = None,
        data_room_id: str | None = None,
        mime_type: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[FileResult]:
        result = await self.db.execute(
            select(File)
            .where(*_scope_filter(folder_id, data_room_id, mime_type))
            .order_by(*_order_by(SortField.NAME, SortOrder.ASC))
            .offset(skip)
            .limit(limit)
        )
        return [_file_to_result(f) for f in result.scalars().all()]

    async def count_scoped(
        self,
        *,
        folder_id: str | None = None,
        data_room_id: str | None = None,
        mime_type: str | None = None,
    ) -> int:
        result = await self.db.execute(
            select(func.count(File.id)).where(
                *_scope_filter(folder_id, data_room_id, mime_type)
            )
        )
        return result.scalar() or 0

    async def search(
        self, owner_id: str, filters: FileSearchFilters, skip: int = 0, limit: int = 20
    ) -> list[FileResult]:
        result = await self.db.execute(
            select(File)
            .where(*_search_filter(owner_id, filters))
            .order_by(*_order_by(SortField.NAME, SortOrder.ASC))
            .offset(skip)
            .limit(limit)
        )
        return [_file_to_result(f) for f in result.scalars().all()]

    async def count_search(self, owner_id: str, filters: FileSearchFilters) -> int:
        result = await self.db.execute(
            select(func.count(File.id)).where(*_search_filter(owner_id, filters))
        )
        return result.scalar() or 0

    async def storage_refs_for_room(self, data_room_id: str) -> set[str]:
        result = await self.db.execute(
            select(File.storage_ref).where(File.data_room_id == data_room_id).distinct()
        )
        return set(result.scalars().all())

    async def storage_refs_for_folders(self, folder_ids: list[str]) -> set[str]:
        if not folder_ids:
            return set()
        result = await self.db.execute(
            select(File.storage_ref).where(File.folder_id.in_(folder_ids)).distinct()
        )
        return set(result.scalars().all())

    async def unreferenced_storage_refs(self, storage_refs: set[str]) -> set[str]:
        if not storage_refs:
            return set()
        result = await self.db.execute(
            select(File.storage_ref)
            .where(File.storage_ref.in_(list(storage_refs)))
            .distinct()
        )
        return storage_refs - set(result.scalars().all())
