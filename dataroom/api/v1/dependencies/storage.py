"""Storage dependency (composition root). Override in tests via app.dependency_overrides."""

from dataroom.application.interfaces.services import IStorageService
from dataroom.infrastructure.external.storage.factory import create_storage_service


def get_storage_service() -> IStorageService:
    """Storage backend selected by STORAGE_BACKEND."""
    return create_storage_service()
