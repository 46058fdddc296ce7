"""Storage exceptions raised by object storage adapters.

Defined in the application layer so use cases can handle them without
importing infrastructure. They extend DataRoomException so presentation can
map them to HTTP responses consistently (upstream failure, except not-found).
"""

from dataroom.domain.exceptions import DataRoomException


class StorageException(DataRoomException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """Object not found in storage."""

    def __init__(self, storage_ref: str) -> None:
        super().__init__(
            "Stored object not found",
            "STORAGE_NOT_FOUND",
            {"storage_ref": storage_ref},
        )


class StorageUploadError(StorageException):
    """Object upload failed."""

    def __init__(self, storage_ref: str, reason: str) -> None:
        super().__init__(
            "Failed to store file",
            "STORAGE_UPLOAD_ERROR",
            {"storage_ref": storage_ref, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """Object download or URL generation failed."""

    def __init__(self, storage_ref: str, reason: str) -> None:
        super().__init__(
            "Failed to read stored file",
            "STORAGE_DOWNLOAD_ERROR",
            {"storage_ref": storage_ref, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Object deletion failed."""

    def __init__(self, storage_ref: str, reason: str) -> None:
        super().__init__(
            "Failed to delete stored file",
            "STORAGE_DELETE_ERROR",
            {"storage_ref": storage_ref, "reason": reason},
        )


class StorageChecksumMismatchError(StorageException):
    """Written bytes do not hash to the expected checksum."""

    def __init__(self, storage_ref: str, expected: str, actual: str) -> None:
        super().__init__(
            "Stored file checksum mismatch",
            "STORAGE_CHECKSUM_ERROR",
            {"storage_ref": storage_ref, "expected": expected, "actual": actual},
        )


class StorageAlreadyExistsError(StorageException):
    """Object already exists with a different checksum."""

    def __init__(self, storage_ref: str) -> None:
        super().__init__(
            "Stored object already exists",
            "STORAGE_EXISTS_ERROR",
            {"storage_ref": storage_ref},
        )


class StoragePermissionError(StorageException):
    """Storage key resolves outside the storage root."""

    def __init__(self, storage_ref: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation}",
            "STORAGE_PERMISSION_ERROR",
            {"storage_ref": storage_ref, "operation": operation},
        )
