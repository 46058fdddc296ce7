"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators implemented in infrastructure
(object storage, identity provider, token signing).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import timedelta
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

if TYPE_CHECKING:
    from dataroom.application.dtos.user import VerifiedIdentity


# Storage service interface
class IStorageService(Protocol):
    """Protocol for object storage backends (local, S3-compatible)."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload file with checksum verification. Idempotent if same checksum."""
        ...

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete object. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        ...

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return metadata without downloading."""
        ...

    async def generate_download_url(
        self,
        storage_ref: str,
        expiration: timedelta = timedelta(hours=1),
        filename: str | None = None,
    ) -> str:
        """Return temporary download URL (presigned for S3, token URL for local)."""
        ...


# Identity verifier interface
class IIdentityVerifier(Protocol):
    """Protocol for verifying an identity-provider credential (e.g. Google ID token)."""

    async def verify(self, credential: str) -> VerifiedIdentity:
        """Return verified claims.

        Raises AuthenticationException when the credential is rejected and
        IdentityProviderException when the provider cannot be reached.
        """
        ...


# Token service interface
class ITokenService(Protocol):
    """Protocol for issuing and verifying the application's bearer tokens."""

    @property
    def expires_in_seconds(self) -> int:
        ...

    def issue(self, user_id: str, email: str | None = None) -> str:
        """Return a signed access token for the user."""
        ...

    def verify(self, token: str) -> str:
        """Return the user id carried by a valid token.

        Raises TokenMalformedException, TokenExpiredException or
        TokenSignerUnknownException.
        """
        ...
