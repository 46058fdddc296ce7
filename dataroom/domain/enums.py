"""Domain enumerations for the data room service.

Enums represent fixed sets of domain values (e.g. entity kinds in the
ownership chain).
"""

from enum import Enum


class EntityKind(str, Enum):
    """Kind of entity an ownership check targets.

    Every check is resolved by walking up to the data room at the root of
    the entity's ancestry.
    """

    DATA_ROOM = "data_room"
    FOLDER = "folder"
    FILE = "file"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid kind values as strings."""
        return [kind.value for kind in cls]


class AuthProvider(str, Enum):
    """How a user account was first authenticated."""

    GOOGLE = "google"
    PASSWORD = "password"


class SortField(str, Enum):
    """Sort keys accepted by folder and file listings."""

    NAME = "name"
    CREATED_AT = "created_at"
    SIZE = "size"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"
