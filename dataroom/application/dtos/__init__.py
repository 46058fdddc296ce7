"""Application DTOs (no ORM dependency)."""

from dataroom.application.dtos.common import Page
from dataroom.application.dtos.data_room import (
    DataRoomCreate,
    DataRoomDetail,
    DataRoomResult,
)
from dataroom.application.dtos.file import (
    DownloadUrl,
    FileCreate,
    FileResult,
    FileSearchFilters,
)
from dataroom.application.dtos.folder import (
    Breadcrumb,
    BreadcrumbItem,
    FolderContents,
    FolderCreate,
    FolderResult,
    FolderTreeNode,
)
from dataroom.application.dtos.user import AuthResult, UserResult, VerifiedIdentity

__all__ = [
    "AuthResult",
    "Breadcrumb",
    "BreadcrumbItem",
    "DataRoomCreate",
    "DataRoomDetail",
    "DataRoomResult",
    "DownloadUrl",
    "FileCreate",
    "FileResult",
    "FileSearchFilters",
    "FolderContents",
    "FolderCreate",
    "FolderResult",
    "FolderTreeNode",
    "Page",
    "UserResult",
    "VerifiedIdentity",
]
