"""User repository with sign-in helpers. Interface methods return application DTOs."""

from __future__ import annotations

import asyncio

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.application.dtos.user import UserResult, VerifiedIdentity
from dataroom.domain.enums import AuthProvider
from dataroom.domain.exceptions import ConflictException, SignInMethodConflictException
from dataroom.infrastructure.persistence.models.user import User
from dataroom.infrastructure.persistence.repositories.base import BaseRepository
from dataroom.infrastructure.security.password import get_password_hash, verify_password

# Lazy dummy hash for constant-time comparison when user is not found (timing-attack mitigation).
# Computed on first use in a thread to avoid blocking the event loop at import.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        email=u.email,
        name=u.name,
        provider=u.provider,
        is_active=u.is_active,
    )


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """User repository. Find-or-create on external sign-in, password register and authenticate."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    def _conflict(self, obj: User) -> ConflictException:
        return ConflictException("user", obj.email, "this service")

    async def _get_orm_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == _normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def _get_orm_by_subject(self, provider: str, subject: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.provider == provider, User.provider_subject == subject)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self._get_orm(user_id)
        return _user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> UserResult | None:
        user = await self._get_orm_by_email(email)
        return _user_to_result(user) if user else None

    async def get_or_create_from_identity(
        self, identity: VerifiedIdentity, provider: str
    ) -> UserResult:
        """Return the user for this provider subject, creating it on first sign-in.

        Lookup is by (provider, subject). An unmatched identity whose email
        belongs to another account (password sign-in, or another subject)
        raises SignInMethodConflictException instead of signing into it.
        A missing display name or subject is filled in from the identity.
        """
        user = await self._get_orm_by_subject(provider, identity.subject)
        if user is None:
            user = await self._get_orm_by_email(identity.email)
            if user is not None and (
                user.provider != provider
                or user.provider_subject not in (None, identity.subject)
            ):
                raise SignInMethodConflictException(provider)
        if user is None:
            user = User(
                email=_normalize_email(identity.email),
                name=identity.name,
                provider=provider,
                provider_subject=identity.subject,
                is_active=True,
            )
            created = await self.create(user)
            return _user_to_result(created)
        changed = False
        if not user.name and identity.name:
            user.name = identity.name
            changed = True
        if user.provider == provider and not user.provider_subject:
            user.provider_subject = identity.subject
            changed = True
        if changed:
            user = await self.update(user)
        return _user_to_result(user)

    async def create_password_user(
        self, email: str, password: str, name: str | None = None
    ) -> UserResult:
        """Create user; raise ConflictException on unique constraint violation."""
        hashed = await asyncio.to_thread(get_password_hash, password)
        user = User(
            email=_normalize_email(email),
            name=name,
            provider=AuthProvider.PASSWORD.value,
            hashed_password=hashed,
            is_active=True,
        )
        created = await self.create(user)
        return _user_to_result(created)

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        user = await self._get_orm_by_email(email)
        if not user or not user.hashed_password:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not user.is_active:
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return _user_to_result(user)
