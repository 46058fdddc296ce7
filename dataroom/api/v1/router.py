"""API v1 router: mounts all endpoint routers under their prefixes."""

from typing import Any

from fastapi import APIRouter

from dataroom.api.v1.endpoints import auth, data_rooms, files, folders, health, storage
from dataroom.schemas.common import ErrorResponse

_AUTH_ERRORS: dict[int | str, dict[str, Any]] = {
    401: {"description": "Missing, malformed or expired bearer token", "model": ErrorResponse},
}
_RESOURCE_ERRORS: dict[int | str, dict[str, Any]] = {
    **_AUTH_ERRORS,
    400: {"description": "Invalid input", "model": ErrorResponse},
    404: {"description": "Not found or not owned by the caller", "model": ErrorResponse},
    409: {"description": "Name already taken in its sibling scope", "model": ErrorResponse},
}

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["auth"],
    responses={
        **_AUTH_ERRORS,
        409: {"description": "Email already registered", "model": ErrorResponse},
        502: {"description": "Identity provider unavailable", "model": ErrorResponse},
    },
)
api_router.include_router(
    data_rooms.router, prefix="/data-rooms", tags=["data-rooms"], responses=_RESOURCE_ERRORS
)
api_router.include_router(
    folders.router, prefix="/folders", tags=["folders"], responses=_RESOURCE_ERRORS
)
api_router.include_router(
    files.router,
    prefix="/files",
    tags=["files"],
    responses={
        **_RESOURCE_ERRORS,
        413: {"description": "Upload larger than MAX_UPLOAD_SIZE", "model": ErrorResponse},
        502: {"description": "Storage backend failure", "model": ErrorResponse},
    },
)
api_router.include_router(
    storage.router,
    prefix="/storage",
    tags=["storage"],
    responses={404: {"description": "Unknown or expired token", "model": ErrorResponse}},
)
