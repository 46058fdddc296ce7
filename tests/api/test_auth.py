"""Auth API: password register/login, Google sign-in, bearer token failures."""

from datetime import timedelta

from fastapi import FastAPI
from httpx import AsyncClient

from dataroom.api.v1.dependencies import get_identity_verifier
from dataroom.application.dtos.user import VerifiedIdentity
from dataroom.domain.exceptions import AuthenticationException, IdentityProviderException
from dataroom.infrastructure.security.jwt import create_access_token

from tests.helpers import TEST_PASSWORD, register_user


class _FakeVerifier:
    def __init__(self, result: VerifiedIdentity | Exception) -> None:
        self.result = result

    async def verify(self, credential: str) -> VerifiedIdentity:
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


async def test_register_returns_token_and_user(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "Alice@Example.com", "password": TEST_PASSWORD, "name": "Alice"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["tokenType"] == "bearer"
    assert body["data"]["expiresIn"] > 0
    assert body["data"]["user"]["email"] == "alice@example.com"
    assert body["data"]["user"]["provider"] == "password"


async def test_register_duplicate_email_is_conflict(client: AsyncClient) -> None:
    await register_user(client, "dup@example.com")
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "DUP@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "CONFLICT"


async def test_register_short_password_is_rejected(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register", json={"email": "x@example.com", "password": "short"}
    )
    assert response.status_code == 422


async def test_login_and_me(client: AsyncClient) -> None:
    await register_user(client, "bob@example.com", "Bob")
    response = await client.post(
        "/api/v1/auth/login", json={"email": "bob@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["data"]["accessToken"]

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Bob"


async def test_login_wrong_password(client: AsyncClient) -> None:
    await register_user(client, "carol@example.com")
    response = await client.post(
        "/api/v1/auth/login", json={"email": "carol@example.com", "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "INVALID_CREDENTIAL"


async def test_login_unknown_email(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 401


async def test_missing_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/data-rooms")
    assert response.status_code == 401
    assert response.json()["error"] == "NOT_AUTHENTICATED"


async def test_malformed_token(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/data-rooms", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "TOKEN_MALFORMED"


async def test_expired_token(client: AsyncClient) -> None:
    token = create_access_token({"sub": "someone"}, expires_delta=timedelta(seconds=-5))
    response = await client.get(
        "/api/v1/data-rooms", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "TOKEN_EXPIRED"


async def test_token_for_unknown_user(client: AsyncClient) -> None:
    token = create_access_token({"sub": "no-such-user"})
    response = await client.get(
        "/api/v1/data-rooms", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "USER_INACTIVE"


async def test_google_sign_in_creates_user_once(app: FastAPI, client: AsyncClient) -> None:
    identity = VerifiedIdentity(subject="g-1", email="gina@example.com", name="Gina")
    app.dependency_overrides[get_identity_verifier] = lambda: _FakeVerifier(identity)

    first = await client.post("/api/v1/auth/google", json={"credential": "id-token"})
    second = await client.post("/api/v1/auth/google", json={"credential": "id-token"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["data"]["user"]["id"] == second.json()["data"]["user"]["id"]
    assert first.json()["data"]["user"]["provider"] == "google"


async def test_google_sign_in_does_not_enter_password_account(
    app: FastAPI, client: AsyncClient
) -> None:
    squatter = await register_user(client, "dana@example.com", "Not Dana")
    room = await client.post("/api/v1/data-rooms", json={"name": "Planted"}, headers=squatter)
    assert room.status_code == 201

    identity = VerifiedIdentity(subject="g-dana", email="Dana@Example.com", name="Dana")
    app.dependency_overrides[get_identity_verifier] = lambda: _FakeVerifier(identity)
    response = await client.post("/api/v1/auth/google", json={"credential": "id-token"})

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "CONFLICT"
    assert "data" not in body


async def test_google_sign_in_with_other_subject_for_same_email(
    app: FastAPI, client: AsyncClient
) -> None:
    first = VerifiedIdentity(subject="g-old", email="eve@example.com")
    app.dependency_overrides[get_identity_verifier] = lambda: _FakeVerifier(first)
    assert (await client.post("/api/v1/auth/google", json={"credential": "a"})).status_code == 200

    second = VerifiedIdentity(subject="g-new", email="eve@example.com")
    app.dependency_overrides[get_identity_verifier] = lambda: _FakeVerifier(second)
    response = await client.post("/api/v1/auth/google", json={"credential": "b"})
    assert response.status_code == 409


async def test_google_invalid_credential(app: FastAPI, client: AsyncClient) -> None:
    app.dependency_overrides[get_identity_verifier] = lambda: _FakeVerifier(
        AuthenticationException("Invalid Google credential", "INVALID_CREDENTIAL")
    )
    response = await client.post("/api/v1/auth/google", json={"credential": "bad"})
    assert response.status_code == 401


async def test_google_provider_down_is_502(app: FastAPI, client: AsyncClient) -> None:
    app.dependency_overrides[get_identity_verifier] = lambda: _FakeVerifier(
        IdentityProviderException("unreachable")
    )
    response = await client.post("/api/v1/auth/google", json={"credential": "tok"})
    assert response.status_code == 502
    assert "details" not in response.json()
