"""File ORM model. Metadata for an object held by the storage backend."""

from sqlalchemy import BigInteger, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dataroom.infrastructure.persistence.database import Base
from dataroom.infrastructure.persistence.models.mixins import OwnedModel


class File(OwnedModel, Base):
    """File entity. Table: file. Name unique per folder.

    data_room_id is a denormalised copy of the folder's room for scoped
    listing and search. Several rows may share one storage_ref (duplicates);
    the object is released only when the last row referencing it is gone.
    """

    __tablename__ = "file"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    checksum: Mapped[str] = mapped_column(String(64), nullable=False)
    storage_ref: Mapped[str] = mapped_column(String, nullable=False, index=True)
    folder_id: Mapped[str] = mapped_column(
        String, ForeignKey("folder.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data_room_id: Mapped[str] = mapped_column(
        String, ForeignKey("data_room.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("folder_id", "name", name="uq_file_folder_name"),
        Index("ix_file_room_name", "data_room_id", "name"),
    )
