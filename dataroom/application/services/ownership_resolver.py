"""Ownership chain resolver: authorizes access by tracing an entity up to its data room.

There is no sharing model. A user may act on a data room they own and on
every folder and file whose ancestry reaches that room. The walk follows
parent pointers and is bounded by a visited set and max_depth, so a
corrupted hierarchy denies access instead of looping.
"""

from __future__ import annotations

import logging

from dataroom.application.dtos.data_room import DataRoomResult
from dataroom.application.dtos.file import FileResult
from dataroom.application.dtos.folder import FolderResult
from dataroom.application.interfaces.repositories import (
    IDataRoomRepository,
    IFileRepository,
    IFolderRepository,
)
from dataroom.domain.enums import EntityKind
from dataroom.domain.exceptions import ResourceNotFoundException

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


class OwnershipResolver:
    """Fail-closed ownership checks for data rooms, folders and files.

    authorize() answers yes/no and never raises for missing or corrupted
    data. The require_* helpers raise ResourceNotFoundException on denial
    (callers cannot distinguish "absent" from "not yours") and return the
    loaded entity so services do not read it twice.
    """

    def __init__(
        self,
        data_room_repo: IDataRoomRepository,
        folder_repo: IFolderRepository,
        file_repo: IFileRepository,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.data_room_repo = data_room_repo
        self.folder_repo = folder_repo
        self.file_repo = file_repo
        self.max_depth = max_depth

    async def authorize(self, user_id: str, entity_id: str, kind: EntityKind) -> bool:
        """Return True iff user_id owns the data room at the root of entity_id's chain."""
        if kind == EntityKind.DATA_ROOM:
            return await self._owned_room(user_id, entity_id) is not None
        if kind == EntityKind.FOLDER:
            return await self._owned_folder(user_id, entity_id) is not None
        if kind == EntityKind.FILE:
            return await self._owned_file(user_id, entity_id) is not None
        return False

    async def require(self, user_id: str, entity_id: str, kind: EntityKind) -> None:
        """Raise ResourceNotFoundException unless authorize() is True."""
        if not await self.authorize(user_id, entity_id, kind):
            raise ResourceNotFoundException(kind.value, entity_id)

    async def require_data_room(self, user_id: str, data_room_id: str) -> DataRoomResult:
        room = await self._owned_room(user_id, data_room_id)
        if room is None:
            raise ResourceNotFoundException(EntityKind.DATA_ROOM.value, data_room_id)
        return room

    async def require_folder(self, user_id: str, folder_id: str) -> FolderResult:
        folder = await self._owned_folder(user_id, folder_id)
        if folder is None:
            raise ResourceNotFoundException(EntityKind.FOLDER.value, folder_id)
        return folder

    async def require_file(self, user_id: str, file_id: str) -> FileResult:
        file = await self._owned_file(user_id, file_id)
        if file is None:
            raise ResourceNotFoundException(EntityKind.FILE.value, file_id)
        return file

    async def _owned_room(self, user_id: str, data_room_id: str) -> DataRoomResult | None:
        room = await self.data_room_repo.get_by_id(data_room_id)
        if room is None or room.owner_id != user_id:
            return None
        return room

    async def _owned_folder(self, user_id: str, folder_id: str) -> FolderResult | None:
        folder = await self.folder_repo.get_by_id(folder_id)
        if folder is None:
            return None
        if not await self._chain_is_consistent(folder):
            return None
        if await self._owned_room(user_id, folder.data_room_id) is None:
            return None
        return folder

    async def _owned_file(self, user_id: str, file_id: str) -> FileResult | None:
        file = await self.file_repo.get_by_id(file_id)
        if file is None:
            return None
        folder = await self._owned_folder(user_id, file.folder_id)
        if folder is None:
            return None
        if folder.data_room_id != file.data_room_id:
            logger.warning(
                "Ownership denied: file %s room %s differs from folder %s room %s",
                file.id,
                file.data_room_id,
                folder.id,
                folder.data_room_id,
            )
            return None
        return file

    async def _chain_is_consistent(self, folder: FolderResult) -> bool:
        """Walk parent pointers to a root folder, checking room membership and termination."""
        visited = {folder.id}
        current = folder
        depth = 0
        while current.parent_id is not None:
            depth += 1
            if depth >= self.max_depth:
                logger.warning(
                    "Ownership denied: folder %s exceeds max depth %d",
                    folder.id,
                    self.max_depth,
                )
                return False
            if current.parent_id in visited:
                logger.warning(
                    "Ownership denied: cycle at folder %s in ancestry of %s",
                    current.parent_id,
                    folder.id,
                )
                return False
            parent = await self.folder_repo.get_by_id(current.parent_id)
            if parent is None:
                logger.warning(
                    "Ownership denied: folder %s has dangling parent %s",
                    current.id,
                    current.parent_id,
                )
                return False
            if parent.data_room_id != folder.data_room_id:
                logger.warning(
                    "Ownership denied: ancestor %s of folder %s belongs to another room",
                    parent.id,
                    folder.id,
                )
                return False
            visited.add(parent.id)
            current = parent
        return True
