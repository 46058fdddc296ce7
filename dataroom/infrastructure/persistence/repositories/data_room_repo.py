"""Data room repository. Returns application DTOs."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.application.dtos.data_room import DataRoomCreate, DataRoomResult
from dataroom.domain.exceptions import ConflictException, ResourceNotFoundException
from dataroom.infrastructure.persistence.models.data_room import DataRoom
from dataroom.infrastructure.persistence.models.file import File
from dataroom.infrastructure.persistence.models.folder import Folder
from dataroom.infrastructure.persistence.repositories.base import BaseRepository


def _room_to_result(
    r: DataRoom, folder_count: int = 0, file_count: int = 0
) -> DataRoomResult:
    """Map ORM DataRoom to application DataRoomResult."""
    return DataRoomResult(
        id=r.id,
        name=r.name,
        description=r.description,
        owner_id=r.owner_id,
        created_at=r.created_at,
        updated_at=r.updated_at,
        folder_count=folder_count,
        file_count=file_count,
    )


def _folder_count() -> Any:
    return (
        select(func.count(Folder.id))
        .where(Folder.data_room_id == DataRoom.id)
        .correlate(DataRoom)
        .scalar_subquery()
    )


def _file_count() -> Any:
    return (
        select(func.count(File.id))
        .where(File.data_room_id == DataRoom.id)
        .correlate(DataRoom)
        .scalar_subquery()
    )


class DataRoomRepository(BaseRepository[DataRoom]):
    """Data room repository. Name is unique per owner."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DataRoom)

    def _conflict(self, obj: DataRoom) -> ConflictException:
        return ConflictException("data_room", obj.name, "your data rooms")

    def _missing_reference(self, obj: DataRoom) -> ResourceNotFoundException:
        return ResourceNotFoundException("user", obj.owner_id)

    async def get_by_id(self, data_room_id: str) -> DataRoomResult | None:
        row = await self._get_orm(data_room_id)
        return _room_to_result(row) if row else None

    async def exists_with_name(
        self, owner_id: str, name: str, exclude_id: str | None = None
    ) -> bool:
        stmt = select(DataRoom.id).where(
            DataRoom.owner_id == owner_id, DataRoom.name == name
        )
        if exclude_id is not None:
            stmt = stmt.where(DataRoom.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def create_data_room(self, data: DataRoomCreate) -> DataRoomResult:
        orm = DataRoom(
            owner_id=data.owner_id, name=data.name, description=data.description
        )
        created = await self.create(orm)
        return _room_to_result(created)

    async def update_data_room(
        self, data_room_id: str, name: str, description: str | None
    ) -> DataRoomResult:
        orm = await self._get_orm(data_room_id)
        if orm is None:
            raise ResourceNotFoundException("data_room", data_room_id)
        orm.name = name
        orm.description = description
        updated = await self.update(orm)
        return _room_to_result(updated)

    async def list_by_owner(
        self, owner_id: str, skip: int = 0, limit: int = 20
    ) -> list[DataRoomResult]:
        """Return owner's rooms newest-updated first, with folder and file counts."""
        stmt = (
            select(DataRoom, _folder_count(), _file_count())
            .where(DataRoom.owner_id == owner_id)
            .order_by(DataRoom.updated_at.desc(), DataRoom.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [
            _room_to_result(room, folders or 0, files or 0)
            for room, folders, files in result.all()
        ]

    async def count_by_owner(self, owner_id: str) -> int:
        result = await self.db.execute(
            select(func.count(DataRoom.id)).where(DataRoom.owner_id == owner_id)
        )
        return result.scalar() or 0
