"""Data room API schemas."""

from datetime import datetime

from pydantic import Field

from dataroom.schemas.common import CamelModel
from dataroom.schemas.folder import FolderResponse


class DataRoomCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class DataRoomUpdateRequest(CamelModel):
    """Partial update; omitted fields are unchanged, an empty description clears it."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class DataRoomResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    owner_id: str
    created_at: datetime
    updated_at: datetime
    folder_count: int = 0
    file_count: int = 0


class DataRoomDetailResponse(DataRoomResponse):
    """Room with its root folders (with counts) and total folder count."""

    root_folders: list[FolderResponse] = Field(default_factory=list)
    total_folders: int = 0
