"""Input helpers shared by use cases."""

from dataroom.domain.exceptions import ValidationException
from dataroom.domain.value_objects import EntityName


def require_name(raw: str | None, max_length: int, field: str = "name") -> EntityName:
    """Parse a user-supplied name; raise ValidationException when invalid."""
    try:
        return EntityName.parse(raw, max_length)
    except ValueError as e:
        raise ValidationException(str(e), field=field) from e


def page_offset(page: int, limit: int) -> int:
    """Return the row offset for a 1-based page."""
    if page < 1:
        raise ValidationException("page must be >= 1", field="page")
    if limit < 1:
        raise ValidationException("limit must be >= 1", field="limit")
    return (page - 1) * limit
