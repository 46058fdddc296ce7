"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the failure envelope {"success": false, "error", "message", "details"?}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from dataroom.application.exceptions import StorageException, StorageNotFoundError
from dataroom.core.config import get_settings
from dataroom.domain.exceptions import (
    AuthenticationException,
    DataRoomException,
    HierarchyCycleException,
    IdentityProviderException,
)

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "CONFLICT": 409,
    "VALIDATION_ERROR": 400,
    "SERVICE_UNAVAILABLE": 503,
}

_HTTP_ERROR_CODES: dict[int, str] = {
    401: "AUTHENTICATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
}


def _error(
    status: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": error_code, "message": message}
    if details:
        content["details"] = details
    return JSONResponse(
        status_code=status, content=jsonable_encoder(content), headers=headers
    )


def _data_room_exception_handler(
    request: Request, exc: DataRoomException
) -> JSONResponse:
    """Return JSON from DataRoomException.to_dict() with appropriate status code."""
    if isinstance(exc, AuthenticationException):
        return JSONResponse(
            status_code=401,
            content=exc.to_dict(),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, HierarchyCycleException):
        logger.error(
            "Folder hierarchy integrity failure: folder_id=%s reason=%s",
            exc.details.get("folder_id"),
            exc.details.get("reason"),
        )
        return _error(500, "INTERNAL_ERROR", "Internal server error")
    if isinstance(exc, IdentityProviderException):
        logger.warning("Identity provider failure: %s", exc.details.get("reason"))
        details = exc.details if get_settings().debug else None
        return _error(502, exc.error_code, exc.message, details)
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _storage_exception_handler(request: Request, exc: StorageException) -> JSONResponse:
    """Missing objects are 404; any other storage failure is a 502 without internals."""
    if isinstance(exc, StorageNotFoundError):
        return _error(404, "RESOURCE_NOT_FOUND", "File content not found")
    logger.error("Storage failure (%s): %s", exc.error_code, exc.details)
    details = exc.details if get_settings().debug else None
    return _error(502, "STORAGE_ERROR", "Storage backend error", details)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return _error(422, "VALIDATION_ERROR", "Request validation failed", exc.errors())


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return the envelope for Starlette HTTP exceptions (status + detail)."""
    return _error(
        exc.status_code,
        _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _rate_limit_exception_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    return _error(429, "RATE_LIMITED", f"Rate limit exceeded: {exc.detail}")


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return _error(500, "INTERNAL_ERROR", detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: DataRoomException (and
    subclasses), StorageException, RequestValidationError, RateLimitExceeded,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(DataRoomException, _data_room_exception_handler)
    app.add_exception_handler(StorageException, _storage_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
