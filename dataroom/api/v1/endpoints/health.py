"""Health check endpoints: liveness (no dependencies) and readiness (database ping)."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from dataroom.core.config import get_settings
from dataroom.schemas.health import HealthResponse, ReadinessErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> HealthResponse | JSONResponse:
    """Return 200 if the database answers SELECT 1; 503 otherwise."""
    from dataroom.infrastructure.persistence import database

    try:
        database._ensure_engine()
        if database.engine is None:
            raise RuntimeError("engine not configured")
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Readiness check failed: %s", type(e).__name__)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message="Database unreachable").model_dump(),
        )
    return HealthResponse(version=get_settings().app_version)
