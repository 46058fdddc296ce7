"""File API schemas. storage_ref is internal and never exposed."""

from datetime import datetime

from pydantic import Field

from dataroom.schemas.common import CamelModel


class FileResponse(CamelModel):
    id: str
    name: str
    mime_type: str
    file_size: int
    checksum: str
    folder_id: str
    data_room_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class FileRenameRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)


class DownloadUrlResponse(CamelModel):
    url: str
    expires_in: int = Field(..., description="Seconds until the URL expires")
