"""Presentation-layer dependency injection (composition root).

Routes depend only on these providers, never on infrastructure directly.
"""

from .auth import (
    CurrentUser,
    get_auth_service,
    get_current_user,
    get_identity_verifier,
    get_token_service,
)
from .hierarchy import (
    get_data_room_service,
    get_data_room_service_write,
    get_file_service,
    get_file_service_write,
    get_file_upload_service,
    get_folder_service,
    get_folder_service_write,
)
from .storage import get_storage_service

__all__ = [
    "CurrentUser",
    "get_auth_service",
    "get_current_user",
    "get_data_room_service",
    "get_data_room_service_write",
    "get_file_service",
    "get_file_service_write",
    "get_file_upload_service",
    "get_folder_service",
    "get_folder_service_write",
    "get_identity_verifier",
    "get_storage_service",
    "get_token_service",
]
