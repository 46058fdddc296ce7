"""DTOs for folder use cases: folder read-models, contents, breadcrumb and tree."""

from dataclasses import dataclass, field
from datetime import datetime

from dataroom.application.dtos.file import FileResult


@dataclass(frozen=True)
class FolderCreate:
    """Input for creating a folder record (write-model)."""

    name: str
    data_room_id: str
    parent_id: str | None
    owner_id: str
    id: str | None = None


@dataclass(frozen=True)
class FolderResult:
    """Folder read-model. child_count/file_count count immediate children only."""

    id: str
    name: str
    data_room_id: str
    parent_id: str | None
    owner_id: str
    created_at: datetime
    updated_at: datetime
    child_count: int = 0
    file_count: int = 0


@dataclass(frozen=True)
class FolderContents:
    """A folder with its immediate child folders and files."""

    folder: FolderResult
    children: list[FolderResult] = field(default_factory=list)
    files: list[FileResult] = field(default_factory=list)


@dataclass(frozen=True)
class BreadcrumbItem:
    id: str
    name: str


@dataclass(frozen=True)
class Breadcrumb:
    """Path from the room's root level down to a folder (inclusive)."""

    data_room_id: str
    data_room_name: str
    items: list[BreadcrumbItem] = field(default_factory=list)


@dataclass
class FolderTreeNode:
    """Nested folder node built from a flat listing."""

    id: str
    name: str
    parent_id: str | None
    children: list["FolderTreeNode"] = field(default_factory=list)
