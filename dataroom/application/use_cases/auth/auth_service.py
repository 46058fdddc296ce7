"""Authentication use cases: external sign-in, password sign-in and token resolution."""

from __future__ import annotations

import logging

from dataroom.application.dtos.user import AuthResult, UserResult
from dataroom.application.interfaces.repositories import IUserRepository
from dataroom.application.interfaces.services import IIdentityVerifier, ITokenService
from dataroom.domain.enums import AuthProvider
from dataroom.domain.exceptions import AuthenticationException, ValidationException

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    """Exchanges credentials for application access tokens.

    A user row is created on the first successful external sign-in and
    looked up by email afterwards.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        token_service: ITokenService,
        identity_verifier: IIdentityVerifier | None = None,
        *,
        password_auth_enabled: bool = True,
    ) -> None:
        self.user_repo = user_repo
        self.token_service = token_service
        self.identity_verifier = identity_verifier
        self.password_auth_enabled = password_auth_enabled

    def _issue(self, user: UserResult) -> AuthResult:
        return AuthResult(
            access_token=self.token_service.issue(user.id, user.email),
            expires_in=self.token_service.expires_in_seconds,
            user=user,
        )

    async def sign_in_with_google(self, credential: str) -> AuthResult:
        if self.identity_verifier is None:
            raise AuthenticationException("Google sign-in is not configured")
        identity = await self.identity_verifier.verify(credential)
        user = await self.user_repo.get_or_create_from_identity(
            identity, AuthProvider.GOOGLE.value
        )
        if not user.is_active:
            raise AuthenticationException("Account is disabled")
        logger.info("User %s signed in with google", user.id)
        return self._issue(user)

    def _require_password_auth(self) -> None:
        if not self.password_auth_enabled:
            raise AuthenticationException("Password sign-in is disabled")

    async def register(
        self, email: str, password: str, name: str | None = None
    ) -> AuthResult:
        """Create a password account and sign it in. ConflictException if the email is taken."""
        self._require_password_auth()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
        user = await self.user_repo.create_password_user(
            email, password, name.strip() if name and name.strip() else None
        )
        logger.info("Registered user %s", user.id)
        return self._issue(user)

    async def login(self, email: str, password: str) -> AuthResult:
        self._require_password_auth()
        user = await self.user_repo.authenticate(email, password)
        if user is None:
            raise AuthenticationException("Invalid email or password", "INVALID_CREDENTIAL")
        return self._issue(user)

    async def resolve_user(self, token: str) -> UserResult:
        """Return the active user a bearer token belongs to.

        Token failures propagate as their specific AuthenticationException
        subclass; a token for a missing or disabled user is rejected too.
        """
        user_id = self.token_service.verify(token)
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationException("User not found or inactive", "USER_INACTIVE")
        return user
