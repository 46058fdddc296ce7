"""Folder repository. Returns application DTOs.

Sibling scope: folders with the same parent_id, or root folders
(parent_id NULL) of the same data room.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from dataroom.application.dtos.folder import FolderCreate, FolderResult
from dataroom.domain.enums import SortField, SortOrder
from dataroom.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from dataroom.infrastructure.persistence.models.data_room import DataRoom
from dataroom.infrastructure.persistence.models.file import File
from dataroom.infrastructure.persistence.models.folder import Folder
from dataroom.infrastructure.persistence.repositories.base import BaseRepository

_Child = aliased(Folder)


def _folder_to_result(
    f: Folder, child_count: int = 0, file_count: int = 0
) -> FolderResult:
    """Map ORM Folder to application FolderResult."""
    return FolderResult(
        id=f.id,
        name=f.name,
        data_room_id=f.data_room_id,
        parent_id=f.parent_id,
        owner_id=f.owner_id,
        created_at=f.created_at,
        updated_at=f.updated_at,
        child_count=child_count,
        file_count=file_count,
    )


def _child_count() -> Any:
    return (
        select(func.count(_Child.id))
        .where(_Child.parent_id == Folder.id)
        .correlate(Folder)
        .scalar_subquery()
    )


def _file_count() -> Any:
    return (
        select(func.count(File.id))
        .where(File.folder_id == Folder.id)
        .correlate(Folder)
        .scalar_subquery()
    )


def _order_by(sort: SortField, order: SortOrder) -> list[Any]:
    """Folders have no size; SIZE falls back to name order."""
    if sort == SortField.CREATED_AT:
        key: Any = Folder.created_at
    else:
        key = func.lower(Folder.name)
    key = key.desc() if order == SortOrder.DESC else key.asc()
    return [key, Folder.id]


def _sibling_filter(data_room_id: str, parent_id: str | None) -> list[Any]:
    if parent_id is None:
        return [Folder.data_room_id == data_room_id, Folder.parent_id.is_(None)]
    return [Folder.parent_id == parent_id]


class FolderRepository(BaseRepository[Folder]):
    """Folder repository. Tree is stored as parent pointers."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Folder)

    def _conflict(self, obj: Folder) -> ConflictException:
        return ConflictException("folder", obj.name, "this location")

    def _missing_reference(self, obj: Folder) -> ResourceNotFoundException:
        if obj.parent_id is not None:
            return ResourceNotFoundException("folder", obj.parent_id)
        return ResourceNotFoundException("data_room", obj.data_room_id)

    def _invalid(self, obj: Folder) -> ValidationException:
        return ValidationException("A folder cannot be its own parent", field="parentId")

    async def get_by_id(self, folder_id: str) -> FolderResult | None:
        row = await self._get_orm(folder_id)
        return _folder_to_result(row) if row else None

    async def get_with_counts(self, folder_id: str) -> FolderResult | None:
        result = await self.db.execute(
            select(Folder, _child_count(), _file_count()).where(Folder.id == folder_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        folder, children, files = row
        return _folder_to_result(folder, children or 0, files or 0)

    async def exists_sibling(
        self,
        data_room_id: str,
        parent_id: str | None,
        name: str,
        exclude_id: str | None = None,
    ) -> bool:
        stmt = select(Folder.id).where(
            *_sibling_filter(data_room_id, parent_id), Folder.name == name
        )
        if exclude_id is not None:
            stmt = stmt.where(Folder.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def create_folder(self, data: FolderCreate) -> FolderResult:
        orm = Folder(
            name=data.name,
            data_room_id=data.data_room_id,
            parent_id=data.parent_id,
            owner_id=data.owner_id,
        )
        if data.id is not None:
            orm.id = data.id
        created = await self.create(orm)
        return _folder_to_result(created)

    async def lock_room_hierarchy(self, data_room_id: str) -> None:
        """Row-lock the data room until the transaction ends.

        Concurrent moves in one room queue behind each other, so each sees
        the parent pointers the previous one committed. Cached rows are
        expired so later reads in this session go back to the store.
        SQLite ignores FOR UPDATE and allows one writer at a time anyway.
        """
        await self.db.execute(
            select(DataRoom.id).where(DataRoom.id == data_room_id).with_for_update()
        )
        self.db.expire_all()

    async def _require_orm(self, folder_id: str) -> Folder:
        orm = await self._get_orm(folder_id)
        if orm is None:
            raise ResourceNotFoundException("folder", folder_id)
        return orm

    async def rename(self, folder_id: str, name: str) -> FolderResult:
        orm = await self._require_orm(folder_id)
        orm.name = name
        updated = await self.update(orm)
        return _folder_to_result(updated)

    async def move(self, folder_id: str, parent_id: str | None) -> FolderResult:
        orm = await self._require_orm(folder_id)
        orm.parent_id = parent_id
        updated = await self.update(orm)
        return _folder_to_result(updated)

    async def list_children(
        self,
        data_room_id: str,
        parent_id: str | None,
        sort: SortField = SortField.NAME,
        order: SortOrder = SortOrder.ASC,
    ) -> list[FolderResult]:
        stmt = (
            select(Folder, _child_count(), _file_count())
            .where(*_sibling_filter(data_room_id, parent_id))
            .order_by(*_order_by(sort, order))
        )
        result = await self.db.execute(stmt)
        return [
            _folder_to_result(folder, children or 0, files or 0)
            for folder, children, files in result.all()
        ]

    async def list_by_room(self, data_room_id: str) -> list[FolderResult]:
        result = await self.db.execute(
            select(Folder)
            .where(Folder.data_room_id == data_room_id)
            .order_by(func.lower(Folder.name), Folder.id)
        )
        return [_folder_to_result(f) for f in result.scalars().all()]

    async def count_by_room(self, data_room_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Folder.id)).where(Folder.data_room_id == data_room_id)
        )
        return result.scalar() or 0
