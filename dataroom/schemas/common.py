"""Shared API schemas: camelCase base model, response envelope and pagination."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire. Accepts either on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: {"success": true, "data": ..., "message"?, "pagination"?}."""

    success: bool = True
    data: T
    message: str | None = None
    pagination: Pagination | None = None

    @model_serializer(mode="wrap")
    def _drop_empty_optionals(self, handler: Any) -> dict[str, Any]:
        body = handler(self)
        for key in ("message", "pagination"):
            if body.get(key) is None:
                body.pop(key, None)
        return body


class ErrorResponse(BaseModel):
    """Failure envelope. Built by the exception handlers; declared on routes for OpenAPI."""

    success: bool = False
    error: str
    message: str
    details: dict[str, Any] | None = None
