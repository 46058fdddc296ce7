"""Auth and current-user dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from dataroom.application.dtos.user import UserResult
from dataroom.application.interfaces.services import IIdentityVerifier, ITokenService
from dataroom.application.use_cases.auth import AuthService
from dataroom.core.config import get_settings
from dataroom.domain.exceptions import AuthenticationException
from dataroom.infrastructure.external.identity.google import GoogleIdentityVerifier
from dataroom.infrastructure.persistence.database import get_db, get_db_transactional
from dataroom.infrastructure.persistence.repositories import UserRepository
from dataroom.infrastructure.security.jwt import JWTTokenService

_http_bearer = HTTPBearer(auto_error=False)


def get_token_service() -> ITokenService:
    return JWTTokenService(get_settings())


def get_identity_verifier(request: Request) -> IIdentityVerifier:
    """Google verifier reusing the app's shared HTTP client when the lifespan created one."""
    http_client = getattr(request.app.state, "http_client", None)
    return GoogleIdentityVerifier(http_client=http_client, settings=get_settings())


async def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    token_service: Annotated[ITokenService, Depends(get_token_service)],
    identity_verifier: Annotated[IIdentityVerifier, Depends(get_identity_verifier)],
) -> AuthService:
    """AuthService for sign-in routes (may create users, so transactional)."""
    return AuthService(
        UserRepository(db),
        token_service,
        identity_verifier,
        password_auth_enabled=get_settings().password_auth_enabled,
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    db: Annotated[AsyncSession, Depends(get_db)],
    token_service: Annotated[ITokenService, Depends(get_token_service)],
) -> UserResult:
    """Return the user behind the bearer token.

    Missing credentials raise AuthenticationException; token failures raise
    the specific malformed/expired/unknown-signer subclass. All map to 401.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authenticated", "NOT_AUTHENTICATED")
    service = AuthService(UserRepository(db), token_service)
    return await service.resolve_user(credentials.credentials)


CurrentUser = Annotated[UserResult, Depends(get_current_user)]
