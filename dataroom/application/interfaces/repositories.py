"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from dataroom.domain.enums import SortField, SortOrder

if TYPE_CHECKING:
    from dataroom.application.dtos.data_room import DataRoomCreate, DataRoomResult
    from dataroom.application.dtos.file import FileCreate, FileResult, FileSearchFilters
    from dataroom.application.dtos.folder import FolderCreate, FolderResult
    from dataroom.application.dtos.user import UserResult, VerifiedIdentity


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""

    async def get_by_email(self, email: str) -> UserResult | None:
        """Return user by (case-insensitive) email."""

    async def get_or_create_from_identity(
        self, identity: VerifiedIdentity, provider: str
    ) -> UserResult:
        """Find user by email or create one on first successful sign-in."""

    async def create_password_user(
        self, email: str, password: str, name: str | None = None
    ) -> UserResult:
        """Create a password user; raise ConflictException if the email is taken."""

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        """Return the active user when the password matches; None otherwise."""


# Data room repository interface
class IDataRoomRepository(Protocol):
    """Protocol for data room repository (DIP)."""

    async def get_by_id(self, data_room_id: str) -> DataRoomResult | None:
        """Return data room by ID (no counts)."""

    async def exists_with_name(
        self, owner_id: str, name: str, exclude_id: str | None = None
    ) -> bool:
        """Return True if the owner already has a room with this name."""

    async def create_data_room(self, data: DataRoomCreate) -> DataRoomResult:
        """Insert a room; raise ConflictException on unique violation."""

    async def update_data_room(
        self, data_room_id: str, name: str, description: str | None
    ) -> DataRoomResult:
        """Overwrite name and description; raise ConflictException on unique violation."""

    async def delete_by_id(self, data_room_id: str) -> bool:
        """Delete the room (store cascades folders/files). Return False if absent."""

    async def list_by_owner(
        self, owner_id: str, skip: int = 0, limit: int = 20
    ) -> list[DataRoomResult]:
        """Return owner's rooms newest-updated first, with folder and file counts."""

    async def count_by_owner(self, owner_id: str) -> int:
        """Return number of rooms owned by the user."""


# Folder repository interface
class IFolderRepository(Protocol):
    """Protocol for folder repository (DIP)."""

    async def get_by_id(self, folder_id: str) -> FolderResult | None:
        """Return folder by ID (counts left at zero)."""

    async def get_with_counts(self, folder_id: str) -> FolderResult | None:
        """Return folder by ID with immediate child and file counts."""

    async def exists_sibling(
        self,
        data_room_id: str,
        parent_id: str | None,
        name: str,
        exclude_id: str | None = None,
    ) -> bool:
        """Return True if a sibling (same parent, or same room at root) has this name."""

    async def create_folder(self, data: FolderCreate) -> FolderResult:
        """Insert a folder; raise ConflictException on unique violation."""

    async def rename(self, folder_id: str, name: str) -> FolderResult:
        """Rename a folder; raise ConflictException on unique violation."""

    async def lock_room_hierarchy(self, data_room_id: str) -> None:
        """Hold a lock on the room until commit so hierarchy changes run one at a time."""

    async def move(self, folder_id: str, parent_id: str | None) -> FolderResult:
        """Re-parent a folder; raise ConflictException on unique violation."""

    async def delete_by_id(self, folder_id: str) -> bool:
        """Delete the folder (store cascades the subtree). Return False if absent."""

    async def list_children(
        self,
        data_room_id: str,
        parent_id: str | None,
        sort: SortField = SortField.NAME,
        order: SortOrder = SortOrder.ASC,
    ) -> list[FolderResult]:
        """Return immediate child folders (root folders when parent_id is None), with counts."""

    async def list_by_room(self, data_room_id: str) -> list[FolderResult]:
        """Return every folder in the room (flat, no counts)."""

    async def count_by_room(self, data_room_id: str) -> int:
        """Return number of folders in the room."""


# File repository interface
class IFileRepository(Protocol):
    """Protocol for file repository (DIP)."""

    async def get_by_id(self, file_id: str) -> FileResult | None:
        """Return file by ID."""

    async def exists_in_folder(
        self, folder_id: str, name: str, exclude_id: str | None = None
    ) -> bool:
        """Return True if the folder already holds a file with exactly this name."""

    async def create_file(self, data: FileCreate) -> FileResult:
        """Insert a file row; raise ConflictException on unique violation."""

    async def create_files(self, data: list[FileCreate]) -> int:
        """Bulk insert file rows (subtree duplication). Return number inserted."""

    async def rename(self, file_id: str, name: str) -> FileResult:
        """Rename a file; raise ConflictException on unique violation."""

    async def delete_by_id(self, file_id: str) -> bool:
        """Delete the file row. Return False if absent."""

    async def list_by_folder(
        self,
        folder_id: str,
        sort: SortField = SortField.NAME,
        order: SortOrder = SortOrder.ASC,
    ) -> list[FileResult]:
        """Return every file directly inside the folder."""

    async def list_by_folders(self, folder_ids: list[str]) -> list[FileResult]:
        """Return files inside any of the given folders."""

    async def list_scoped(
        self,
        *,
        folder_id: str | None = None,
        data_room_id: str | None = None,
        mime_type: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[FileResult]:
        """Return files in a folder or a room, case-insensitive name order."""

    async def count_scoped(
        self,
        *,
        folder_id: str | None = None,
        data_room_id: str | None = None,
        mime_type: str | None = None,
    ) -> int:
        """Return number of files matched by list_scoped."""

    async def search(
        self, owner_id: str, filters: FileSearchFilters, skip: int = 0, limit: int = 20
    ) -> list[FileResult]:
        """Return files in rooms owned by owner_id matching the filters."""

    async def count_search(self, owner_id: str, filters: FileSearchFilters) -> int:
        """Return number of files matched by search."""

    async def storage_refs_for_room(self, data_room_id: str) -> set[str]:
        """Return distinct storage refs of every file in the room."""

    async def storage_refs_for_folders(self, folder_ids: list[str]) -> set[str]:
        """Return distinct storage refs of files inside the given folders."""

    async def unreferenced_storage_refs(self, storage_refs: set[str]) -> set[str]:
        """Return the subset of storage_refs that no file row references any more."""
