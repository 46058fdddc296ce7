"""GoogleIdentityVerifier against a mocked tokeninfo endpoint."""

import time

import httpx
import pytest

from dataroom.core.config import get_settings
from dataroom.domain.exceptions import AuthenticationException, IdentityProviderException
from dataroom.infrastructure.external.identity.google import GoogleIdentityVerifier

CLIENT_ID = "test-client-id.apps.googleusercontent.com"


def _claims(**overrides) -> dict:
    claims = {
        "aud": CLIENT_ID,
        "iss": "https://accounts.google.com",
        "exp": str(int(time.time()) + 600),
        "sub": "google-123",
        "email": "alice@example.com",
        "email_verified": "true",
        "name": "Alice",
    }
    claims.update(overrides)
    return claims


def _verifier(handler) -> GoogleIdentityVerifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleIdentityVerifier(http_client=client, settings=get_settings())


async def test_valid_credential_yields_identity() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["id_token"] = request.url.params.get("id_token")
        return httpx.Response(200, json=_claims())

    identity = await _verifier(handler).verify("the-id-token")

    assert seen["id_token"] == "the-id-token"
    assert identity.subject == "google-123"
    assert identity.email == "alice@example.com"
    assert identity.name == "Alice"


@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "someone-else"},
        {"iss": "evil.example.com"},
        {"exp": "1"},
        {"email_verified": "false"},
        {"email": None},
    ],
)
async def test_bad_claims_are_rejected(overrides: dict) -> None:
    claims = {k: v for k, v in _claims(**overrides).items() if v is not None}
    verifier = _verifier(lambda request: httpx.Response(200, json=claims))
    with pytest.raises(AuthenticationException) as exc_info:
        await verifier.verify("tok")
    assert exc_info.value.error_code == "INVALID_CREDENTIAL"


async def test_provider_4xx_is_invalid_credential() -> None:
    verifier = _verifier(lambda request: httpx.Response(400, json={"error": "invalid_token"}))
    with pytest.raises(AuthenticationException):
        await verifier.verify("tok")


async def test_provider_5xx_is_provider_failure() -> None:
    verifier = _verifier(lambda request: httpx.Response(503))
    with pytest.raises(IdentityProviderException):
        await verifier.verify("tok")


async def test_network_error_is_provider_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(IdentityProviderException):
        await _verifier(handler).verify("tok")


async def test_empty_credential_never_calls_provider() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("provider must not be called")

    with pytest.raises(AuthenticationException):
        await _verifier(handler).verify("   ")
