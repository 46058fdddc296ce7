"""Identity provider adapters."""

from dataroom.infrastructure.external.identity.google import GoogleIdentityVerifier

__all__ = ["GoogleIdentityVerifier"]
