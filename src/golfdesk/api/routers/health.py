"""Liveness and database readiness endpoints."""

import datetime as dt
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from golfdesk import __version__
from golfdesk.api.dependencies import DbSession
from golfdesk.api.responses import api_response
from golfdesk.api.schemas.health import DatabaseCheck, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness")
async def health() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__, timestamp=dt.datetime.now(dt.UTC))


@router.get("/health/db", response_model=HealthResponse, summary="Database readiness")
async def health_db(db: DbSession) -> JSONResponse:
    """Round-trips ``SELECT 1``. Answers 503 while the database is unreachable."""
    check = await _ping(db)
    body = HealthResponse(
        status=check.status,
        version=__version__,
        timestamp=dt.datetime.now(dt.UTC),
        database=check,
    )
    code = status.HTTP_200_OK if check.status == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
    return api_response(body, code)


async def _ping(db: AsyncSession) -> DatabaseCheck:
    started = time.perf_counter()
    error = None
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        error = type(e).__name__
    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    return DatabaseCheck(
        status="unhealthy" if error else "healthy",
        latency_ms=latency_ms,
        error=error,
    )
