"""Top-level routing: probes at the root, feature modules under /api/v1."""

from typing import Any

import structlog
from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from shipnorth import __version__
from shipnorth.api.dependencies import DBSession
from shipnorth.config import settings
from shipnorth.modules import discover_modules


logger = structlog.get_logger()


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Overall readiness plus the result of each dependency check."""

    status: str
    checks: dict[str, str]


health_router = APIRouter(tags=["health"])


@health_router.get("/health/live", response_model=HealthResponse, summary="Liveness probe")
async def liveness() -> HealthResponse:
    """The process is up and serving requests."""
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Checks that the audit trail database is reachable. Returns 503 otherwise.",
)
async def readiness(db: DBSession, response: Response) -> ReadinessResponse:
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("readiness_check_failed", check="database", error=str(exc))
        database = str(exc) or type(exc).__name__

    checks = {"database": database}
    if all(result == "ok" for result in checks.values()):
        return ReadinessResponse(status="ready", checks=checks)

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status="degraded", checks=checks)


@health_router.get("/info", summary="Application info")
async def info() -> dict[str, Any]:
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "debug": settings.debug,
    }


v1_router = APIRouter(prefix="/api/v1")
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
