"""Folder ORM model. Self-referential tree inside a data room."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from dataroom.infrastructure.persistence.database import Base
from dataroom.infrastructure.persistence.models.mixins import OwnedModel


class Folder(OwnedModel, Base):
    """Folder entity. Table: folder. parent_id NULL means a root folder of its room.

    Sibling names are unique: (parent_id, name) among nested folders and
    (data_room_id, name) among root folders. Two partial indexes are used
    because NULL parent_ids never collide in a composite unique constraint.
    """

    __tablename__ = "folder"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    data_room_id: Mapped[str] = mapped_column(
        String, ForeignKey("data_room.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("folder.id", ondelete="CASCADE"), nullable=True, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "parent_id IS NULL OR parent_id <> id", name="ck_folder_not_own_parent"
        ),
        Index(
            "ux_folder_sibling_name",
            "parent_id",
            "name",
            unique=True,
            postgresql_where=text("parent_id IS NOT NULL"),
            sqlite_where=text("parent_id IS NOT NULL"),
        ),
        Index(
            "ux_folder_root_name",
            "data_room_id",
            "name",
            unique=True,
            postgresql_where=text("parent_id IS NULL"),
            sqlite_where=text("parent_id IS NULL"),
        ),
        Index("ix_folder_room_parent", "data_room_id", "parent_id"),
    )
