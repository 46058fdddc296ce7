"""Data room use cases: create, get, list, update, delete."""

from __future__ import annotations

import logging

from dataroom.application.dtos.common import Page
from dataroom.application.dtos.data_room import (
    DataRoomCreate,
    DataRoomDetail,
    DataRoomResult,
)
from dataroom.application.interfaces.repositories import (
    IDataRoomRepository,
    IFileRepository,
    IFolderRepository,
)
from dataroom.application.services.ownership_resolver import OwnershipResolver
from dataroom.application.services.storage_cleanup import StorageCleanup
from dataroom.application.use_cases.common import page_offset, require_name
from dataroom.domain.exceptions import ConflictException, ValidationException
from dataroom.domain.value_objects import DATA_ROOM_NAME_MAX, DESCRIPTION_MAX

logger = logging.getLogger(__name__)


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    value = description.strip()
    if len(value) > DESCRIPTION_MAX:
        raise ValidationException(
            f"Description must be at most {DESCRIPTION_MAX} characters",
            field="description",
        )
    return value or None


class DataRoomService:
    """Data rooms owned by the caller. Names are unique per owner."""

    def __init__(
        self,
        data_room_repo: IDataRoomRepository,
        folder_repo: IFolderRepository,
        file_repo: IFileRepository,
        resolver: OwnershipResolver,
        cleanup: StorageCleanup,
    ) -> None:
        self.data_room_repo = data_room_repo
        self.folder_repo = folder_repo
        self.file_repo = file_repo
        self.resolver = resolver
        self.cleanup = cleanup

    async def create(
        self, user_id: str, name: str, description: str | None = None
    ) -> DataRoomResult:
        room_name = require_name(name, DATA_ROOM_NAME_MAX).value
        desc = _clean_description(description)
        if await self.data_room_repo.exists_with_name(user_id, room_name):
            raise ConflictException("data_room", room_name, "your data rooms")
        room = await self.data_room_repo.create_data_room(
            DataRoomCreate(owner_id=user_id, name=room_name, description=desc)
        )
        logger.info("Data room %s created by %s", room.id, user_id)
        return room

    async def get(self, user_id: str, data_room_id: str) -> DataRoomDetail:
        """Return the room with its root folders (with counts) and its total folder count."""
        room = await self.resolver.require_data_room(user_id, data_room_id)
        roots = await self.folder_repo.list_children(room.id, None)
        total = await self.folder_repo.count_by_room(room.id)
        return DataRoomDetail(data_room=room, root_folders=roots, total_folders=total)

    async def list(self, user_id: str, page: int = 1, limit: int = 10) -> Page[DataRoomResult]:
        skip = page_offset(page, limit)
        items = await self.data_room_repo.list_by_owner(user_id, skip=skip, limit=limit)
        total = await self.data_room_repo.count_by_owner(user_id)
        return Page(items=items, total=total, page=page, limit=limit)

    async def update(
        self,
        user_id: str,
        data_room_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> DataRoomResult:
        """Update name and/or description. None leaves a field unchanged; '' clears the description."""
        room = await self.resolver.require_data_room(user_id, data_room_id)
        new_name = room.name
        if name is not None:
            new_name = require_name(name, DATA_ROOM_NAME_MAX).value
            if new_name != room.name and await self.data_room_repo.exists_with_name(
                user_id, new_name, exclude_id=room.id
            ):
                raise ConflictException("data_room", new_name, "your data rooms")
        new_description = (
            room.description if description is None else _clean_description(description)
        )
        if new_name == room.name and new_description == room.description:
            return room
        return await self.data_room_repo.update_data_room(room.id, new_name, new_description)

    async def delete(self, user_id: str, data_room_id: str) -> None:
        """Delete the room and everything in it, then release unreferenced storage objects."""
        room = await self.resolver.require_data_room(user_id, data_room_id)
        refs = await self.file_repo.storage_refs_for_room(room.id)
        await self.data_room_repo.delete_by_id(room.id)
        released = await self.cleanup.release_unreferenced(refs)
        logger.info(
            "Data room %s deleted by %s (%d storage object(s) released)",
            room.id,
            user_id,
            released,
        )
