"""JWT access tokens: issue and verify with distinct failure reasons.

Tokens carry sub (user id), iss, iat and exp. Verification separates three
failures so clients and logs can tell them apart:

- TokenMalformedException: not a JWT, or required claims are missing.
- TokenExpiredException: signed by us, but exp has passed.
- TokenSignerUnknownException: signature, algorithm or issuer is not ours.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from dataroom.core.config import Settings, get_settings
from dataroom.domain.exceptions import (
    TokenExpiredException,
    TokenMalformedException,
    TokenSignerUnknownException,
)

logger = logging.getLogger(__name__)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (must include sub).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.
        settings: Optional settings; defaults to get_settings().

    Returns:
        Encoded JWT string.
    """
    s = settings or get_settings()
    now = datetime.now(UTC)
    ttl = (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=s.access_token_expire_minutes)
    )
    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + ttl, "iss": s.token_issuer})
    encoded = jwt.encode(
        to_encode,
        s.secret_key.get_secret_value(),
        algorithm=s.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Raises:
        TokenMalformedException: Undecodable token or missing sub/exp.
        TokenExpiredException: Valid signature, expired.
        TokenSignerUnknownException: Signature, algorithm or issuer mismatch.
    """
    s = settings or get_settings()
    try:
        header = jwt.get_unverified_header(token)
        unverified = jwt.get_unverified_claims(token)
    except JWTError as e:
        raise TokenMalformedException() from e
    if not isinstance(unverified.get("sub"), str) or "exp" not in unverified:
        raise TokenMalformedException()
    if header.get("alg") != s.algorithm:
        logger.info("Rejected token with unexpected alg %r", header.get("alg"))
        raise TokenSignerUnknownException()
    try:
        return jwt.decode(
            token,
            s.secret_key.get_secret_value(),
            algorithms=[s.algorithm],
            issuer=s.token_issuer,
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredException() from e
    except JWTClaimsError as e:
        raise TokenSignerUnknownException() from e
    except JWTError as e:
        # Header and claims parsed above, so what failed is the signature.
        raise TokenSignerUnknownException() from e


class JWTTokenService:
    """ITokenService backed by python-jose and application settings."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    @property
    def expires_in_seconds(self) -> int:
        return self._settings.access_token_expire_minutes * 60

    def issue(self, user_id: str, email: str | None = None) -> str:
        claims: dict[str, Any] = {"sub": user_id}
        if email:
            claims["email"] = email
        return create_access_token(claims, settings=self._settings)

    def verify(self, token: str) -> str:
        return verify_token(token, settings=self._settings)["sub"]
