"""DTOs for data room use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from dataroom.application.dtos.folder import FolderResult


@dataclass(frozen=True)
class DataRoomCreate:
    """Input for creating a data room record (write-model)."""

    owner_id: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class DataRoomResult:
    """Data room read-model. Counts are populated by listing queries only."""

    id: str
    name: str
    description: str | None
    owner_id: str
    created_at: datetime
    updated_at: datetime
    folder_count: int = 0
    file_count: int = 0


@dataclass(frozen=True)
class DataRoomDetail:
    """Data room with its root folders (with counts) and total folder count."""

    data_room: DataRoomResult
    root_folders: list[FolderResult] = field(default_factory=list)
    total_folders: int = 0
