"""Pytest configuration and fixtures for the data room API.

Every test that touches the database gets its own file-backed SQLite
database under tmp_path (tables created from the ORM metadata) and a local
storage root next to it. Settings are re-read per test after the
environment is patched.
"""

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

import dataroom.infrastructure.persistence.models  # noqa: F401  (registers tables)
from dataroom.core.config import get_settings
from dataroom.infrastructure.persistence import database
from dataroom.infrastructure.persistence.database import Base

from tests.helpers import register_user


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point settings at a throwaway database and storage root."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-for-jwt-signing-only")
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("PASSWORD_AUTH_ENABLED", "true")
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def db_engine() -> AsyncIterator[None]:
    """Create the schema on a fresh engine; dispose it afterwards."""
    await database.dispose_engine()
    database._ensure_engine()
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await database.dispose_engine()


@pytest.fixture
async def db_session(db_engine):
    """Session for repository tests. Not committed; discarded after the test."""
    assert database.AsyncSessionLocal is not None
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def app(db_engine) -> FastAPI:
    from dataroom.main import create_app

    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    return await register_user(client, "owner@example.com", "Owner")


@pytest.fixture
async def other_headers(client: AsyncClient) -> dict[str, str]:
    return await register_user(client, "intruder@example.com", "Intruder")
