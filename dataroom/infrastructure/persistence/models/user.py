"""User ORM model for authentication."""

from sqlalchemy import Boolean, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from dataroom.infrastructure.persistence.database import Base
from dataroom.infrastructure.persistence.models.mixins import TimestampedModel


class User(TimestampedModel, Base):
    """User model. Table: app_user. Unique email; provider subject unique per provider."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    provider_subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hashed_password: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true"), default=True
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
        UniqueConstraint("provider", "provider_subject", name="uq_user_provider_subject"),
    )
