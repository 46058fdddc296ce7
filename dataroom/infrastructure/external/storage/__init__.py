"""Object storage backends (local filesystem, S3-compatible)."""

from dataroom.infrastructure.external.storage.factory import create_storage_service
from dataroom.infrastructure.external.storage.local_storage import LocalStorageService

__all__ = ["LocalStorageService", "create_storage_service"]
