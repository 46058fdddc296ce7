"""Application ports: repository and collaborator protocols."""

from dataroom.application.interfaces.repositories import (
    IDataRoomRepository,
    IFileRepository,
    IFolderRepository,
    IUserRepository,
)
from dataroom.application.interfaces.services import (
    IIdentityVerifier,
    IStorageService,
    ITokenService,
)

__all__ = [
    "IDataRoomRepository",
    "IFileRepository",
    "IFolderRepository",
    "IIdentityVerifier",
    "IStorageService",
    "ITokenService",
    "IUserRepository",
]
