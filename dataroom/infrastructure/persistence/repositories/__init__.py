"""SQLAlchemy repositories implementing the application ports."""

from dataroom.infrastructure.persistence.repositories.base import BaseRepository
from dataroom.infrastructure.persistence.repositories.data_room_repo import (
    DataRoomRepository,
)
from dataroom.infrastructure.persistence.repositories.file_repo import FileRepository
from dataroom.infrastructure.persistence.repositories.folder_repo import (
    FolderRepository,
)
from dataroom.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "DataRoomRepository",
    "FileRepository",
    "FolderRepository",
    "UserRepository",
]
