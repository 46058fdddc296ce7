"""Plain DTO builders for unit tests."""

from datetime import datetime, timezone

from dataroom.application.dtos.data_room import DataRoomResult
from dataroom.application.dtos.file import FileResult
from dataroom.application.dtos.folder import FolderResult

T0 = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def room(id: str = "r1", owner_id: str = "u1", name: str = "Room") -> DataRoomResult:
    return DataRoomResult(
        id=id, name=name, description=None, owner_id=owner_id, created_at=T0, updated_at=T0
    )


def folder(
    id: str,
    parent_id: str | None = None,
    data_room_id: str = "r1",
    name: str | None = None,
    owner_id: str = "u1",
) -> FolderResult:
    return FolderResult(
        id=id,
        name=name or id.upper(),
        data_room_id=data_room_id,
        parent_id=parent_id,
        owner_id=owner_id,
        created_at=T0,
        updated_at=T0,
    )


def file(
    id: str = "f1",
    folder_id: str = "a",
    data_room_id: str = "r1",
    name: str = "report.pdf",
    storage_ref: str = "rooms/r1/files/f1/report.pdf",
) -> FileResult:
    return FileResult(
        id=id,
        name=name,
        mime_type="application/pdf",
        file_size=42,
        checksum="c" * 64,
        storage_ref=storage_ref,
        folder_id=folder_id,
        data_room_id=data_room_id,
        owner_id="u1",
        created_at=T0,
        updated_at=T0,
    )


def folder_lookup(*folders: FolderResult):
    """side_effect for folder_repo.get_by_id backed by the given folders."""
    by_id = {f.id: f for f in folders}

    async def get_by_id(folder_id: str):
        return by_id.get(folder_id)

    return get_by_id
