"""Google Sign-In ID token verification via the tokeninfo endpoint.

Google validates the signature; this module checks the claims that matter
to us (audience, issuer, expiry, verified email) and maps transport and
provider failures onto domain exceptions.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from dataroom.application.dtos.user import VerifiedIdentity
from dataroom.core.config import Settings, get_settings
from dataroom.domain.exceptions import (
    AuthenticationException,
    IdentityProviderException,
)

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


def _rejected(reason: str) -> AuthenticationException:
    logger.info("Google credential rejected: %s", reason)
    return AuthenticationException("Invalid Google credential", "INVALID_CREDENTIAL")


class GoogleIdentityVerifier:
    """IIdentityVerifier for Google ID tokens.

    Uses a shared httpx.AsyncClient when one is given (app lifespan), else a
    short-lived client per call.
    """

    provider_name = "google"

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._http = http_client
        self._settings = settings or get_settings()

    async def _fetch_claims(self, credential: str) -> httpx.Response:
        url = self._settings.google_tokeninfo_url
        params = {"id_token": credential}
        timeout = self._settings.identity_provider_timeout_seconds
        try:
            if self._http is not None:
                return await self._http.get(url, params=params, timeout=timeout)
            async with httpx.AsyncClient(timeout=timeout) as client:
                return await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error("Google tokeninfo request failed: %s", type(e).__name__)
            raise IdentityProviderException("unreachable") from e

    async def verify(self, credential: str) -> VerifiedIdentity:
        if not credential or not credential.strip():
            raise _rejected("empty credential")
        response = await self._fetch_claims(credential.strip())
        if response.status_code >= 500:
            logger.error("Google tokeninfo returned status=%d", response.status_code)
            raise IdentityProviderException(f"status {response.status_code}")
        if response.status_code != 200:
            raise _rejected(f"status {response.status_code}")
        try:
            claims: dict[str, Any] = response.json()
        except ValueError as e:
            raise IdentityProviderException("invalid response body") from e
        return self._validate_claims(claims)

    def _validate_claims(self, claims: dict[str, Any]) -> VerifiedIdentity:
        client_id = self._settings.google_client_id
        if client_id and claims.get("aud") != client_id:
            raise _rejected("audience mismatch")
        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise _rejected("issuer mismatch")
        try:
            exp = int(claims.get("exp", 0))
        except (TypeError, ValueError):
            raise _rejected("invalid exp") from None
        if exp <= int(time.time()):
            raise _rejected("expired")
        email = claims.get("email")
        subject = claims.get("sub")
        if not email or not subject:
            raise _rejected("missing email or sub")
        if str(claims.get("email_verified", "false")).lower() != "true":
            raise _rejected("email not verified")
        return VerifiedIdentity(
            subject=str(subject),
            email=str(email),
            name=claims.get("name"),
            email_verified=True,
        )
