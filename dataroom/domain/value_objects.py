"""Domain value objects for the data room service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass
from typing import ClassVar

DATA_ROOM_NAME_MAX = 100
FOLDER_NAME_MAX = 100
FILE_NAME_MAX = 255
DESCRIPTION_MAX = 500


@dataclass(frozen=True)
class EntityName:
    """Display name of a data room, folder or file.

    Stored trimmed; must be 1..max_length characters with no control
    characters. Uniqueness among siblings is exact (case-sensitive).
    """

    value: str
    max_length: int = FOLDER_NAME_MAX

    COPY_SUFFIX: ClassVar[str] = " (Copy)"

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Name must not be empty")
        if self.value != self.value.strip():
            raise ValueError("Name must not start or end with whitespace")
        if len(self.value) > self.max_length:
            raise ValueError(f"Name must be at most {self.max_length} characters")
        if any(ord(ch) < 32 or ord(ch) == 127 for ch in self.value):
            raise ValueError("Name must not contain control characters")

    @classmethod
    def parse(cls, raw: str | None, max_length: int = FOLDER_NAME_MAX) -> "EntityName":
        """Trim and validate user input. Raises ValueError."""
        return cls((raw or "").strip(), max_length)

    def copy_name(self) -> "EntityName":
        """Name for a duplicate: '<name> (Copy)', base shortened to fit max_length."""
        room = self.max_length - len(self.COPY_SUFFIX)
        base = self.value[:room].rstrip() if len(self.value) > room else self.value
        return EntityName(f"{base}{self.COPY_SUFFIX}", self.max_length)

    def __str__(self) -> str:
        return self.value
