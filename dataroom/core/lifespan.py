"""Application lifespan: startup and shutdown.

Wiring only: the shared outbound HTTP client and the SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from dataroom.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared HTTP client, yield, then close it and dispose the engine."""
    settings = get_settings()

    # Shared HTTP client for identity provider calls (connection reuse).
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.identity_provider_timeout_seconds
    )
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("Shared HTTP client closed")

    from dataroom.infrastructure.persistence import database

    await database.dispose_engine()
