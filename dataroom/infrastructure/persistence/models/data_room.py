"""DataRoom ORM model. Root of every ownership chain."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dataroom.infrastructure.persistence.database import Base
from dataroom.infrastructure.persistence.models.mixins import OwnedModel


class DataRoom(OwnedModel, Base):
    """Data room entity. Table: data_room. Name unique per owner.

    Deleting a room cascades (in the database) to its folders and files.
    """

    __tablename__ = "data_room"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_data_room_owner_name"),
    )
