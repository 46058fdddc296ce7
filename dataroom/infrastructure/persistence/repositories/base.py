"""Base repository: generic CRUD with constraint-violation translation."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete as sa_delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from dataroom.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)

# PostgreSQL SQLSTATE codes; SQLite only reports the constraint type in its message.
_SQLSTATE_KINDS = {"23505": "unique", "23503": "foreign_key", "23514": "check"}


def _violation_kind(exc: IntegrityError) -> str | None:
    """Return "unique", "foreign_key", "check" or None for other violations."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return _SQLSTATE_KINDS.get(code)
    text = str(orig).upper()
    if "UNIQUE" in text:
        return "unique"
    if "FOREIGN KEY" in text:
        return "foreign_key"
    if "CHECK" in text:
        return "check"
    return None


class BaseRepository(Generic[ModelType]):
    """Base repository with get, create, update and delete_by_id.

    Writes flush immediately so that store constraints fire inside the
    request transaction. Violations raised by the flush are translated:
    unique into the ConflictException built by _conflict(), foreign key into
    the ResourceNotFoundException built by _missing_reference(), check into
    the ValidationException built by _invalid(). Subclasses override these
    to name their sibling scope and parent. Anything else propagates.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_orm(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record; raise ConflictException on unique violation."""
        self.db.add(obj)
        await self._flush_translated(obj)
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record; raise ConflictException on unique violation."""
        await self._flush_translated(obj)
        await self.db.refresh(obj)
        return obj

    async def delete_by_id(self, entity_id: str) -> bool:
        """Delete by primary key with a single statement (store cascades apply).

        Returns True if a row was deleted.
        """
        model: Any = self.model
        result = await self.db.execute(sa_delete(self.model).where(model.id == entity_id))
        return (result.rowcount or 0) > 0

    async def _flush_translated(self, obj: ModelType) -> None:
        try:
            await self.db.flush()
        except IntegrityError as exc:
            kind = _violation_kind(exc)
            if kind == "unique":
                raise self._conflict(obj) from exc
            if kind == "foreign_key":
                raise self._missing_reference(obj) from exc
            if kind == "check":
                raise self._invalid(obj) from exc
            raise

    def _conflict(self, obj: ModelType) -> ConflictException:
        """Build the ConflictException for a unique violation on obj."""
        return ConflictException(
            self.model.__tablename__, str(getattr(obj, "name", "")), "this location"
        )

    def _missing_reference(self, obj: ModelType) -> ResourceNotFoundException:
        """Build the error for a foreign key pointing at a row that no longer exists."""
        return ResourceNotFoundException(
            self.model.__tablename__, str(getattr(obj, "id", "") or "")
        )

    def _invalid(self, obj: ModelType) -> ValidationException:
        """Build the error for a check-constraint violation on obj."""
        return ValidationException(f"Invalid {self.model.__tablename__} data")
