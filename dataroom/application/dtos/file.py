"""DTOs for file use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FileCreate:
    """Input for creating a file record (write-model). Use case builds this; repo persists and returns FileResult."""

    id: str
    name: str
    mime_type: str
    file_size: int
    checksum: str
    storage_ref: str
    folder_id: str
    data_room_id: str
    owner_id: str


@dataclass(frozen=True)
class FileResult:
    """File read-model (result of get_by_id, create, rename, listings)."""

    id: str
    name: str
    mime_type: str
    file_size: int
    checksum: str
    storage_ref: str
    folder_id: str
    data_room_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class FileSearchFilters:
    """Search criteria. query is a case-insensitive substring of the file name."""

    query: str
    data_room_id: str | None = None
    folder_id: str | None = None
    mime_type: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    size_min: int | None = None
    size_max: int | None = None


@dataclass(frozen=True)
class DownloadUrl:
    url: str
    expires_in: int
