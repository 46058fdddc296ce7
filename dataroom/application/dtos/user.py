"""DTOs for user and authentication use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, find-or-create, register). No password."""

    id: str
    email: str
    name: str | None
    provider: str
    is_active: bool


@dataclass(frozen=True)
class VerifiedIdentity:
    """Claims extracted from an identity-provider credential after verification."""

    subject: str
    email: str
    name: str | None = None
    email_verified: bool = True


@dataclass(frozen=True)
class AuthResult:
    """Access token issued after a successful sign-in."""

    access_token: str
    expires_in: int
    user: UserResult
    token_type: str = "bearer"
