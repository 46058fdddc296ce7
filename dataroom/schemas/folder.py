"""Folder API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from dataroom.schemas.common import CamelModel
from dataroom.schemas.file import FileResponse


class FolderCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    data_room_id: str = Field(..., min_length=1)
    parent_id: str | None = None


class FolderRenameRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class FolderMoveRequest(CamelModel):
    """parentId null moves the folder to the room's root level."""

    parent_id: str | None = None


class FolderResponse(CamelModel):
    id: str
    name: str
    data_room_id: str
    parent_id: str | None = None
    owner_id: str
    created_at: datetime
    updated_at: datetime
    child_count: int = 0
    file_count: int = 0


class FolderContentsResponse(CamelModel):
    folder: FolderResponse
    children: list[FolderResponse] = Field(default_factory=list)
    files: list[FileResponse] = Field(default_factory=list)


class BreadcrumbItemResponse(CamelModel):
    id: str
    name: str


class DataRoomRef(CamelModel):
    id: str
    name: str


class BreadcrumbResponse(CamelModel):
    """Room plus the ordered path root -> folder (inclusive)."""

    data_room: DataRoomRef
    path: list[BreadcrumbItemResponse] = Field(default_factory=list)


class FolderTreeNodeResponse(CamelModel):
    id: str
    name: str
    parent_id: str | None = None
    children: list[FolderTreeNodeResponse] = Field(default_factory=list)


FolderTreeNodeResponse.model_rebuild()
