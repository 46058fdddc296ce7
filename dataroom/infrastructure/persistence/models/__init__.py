"""Persistence models: ORM entities and mixins."""

from dataroom.infrastructure.persistence.models.data_room import DataRoom
from dataroom.infrastructure.persistence.models.file import File
from dataroom.infrastructure.persistence.models.folder import Folder
from dataroom.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OwnedModel,
    OwnerMixin,
    TimestampedModel,
    TimestampMixin,
)
from dataroom.infrastructure.persistence.models.user import User

__all__ = [
    "User",
    "DataRoom",
    "Folder",
    "File",
    "CuidMixin",
    "OwnerMixin",
    "TimestampMixin",
    "TimestampedModel",
    "OwnedModel",
]
