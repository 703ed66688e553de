"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError


pytestmark = pytest.mark.integration


async def test_liveness(client: AsyncClient) -> None:
    """Test liveness probe returns alive."""
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


async def test_readiness(client: AsyncClient, db: AsyncMock) -> None:
    """Test readiness probe checks the database."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"database": "ok"}}
    db.execute.assert_awaited_once()


async def test_readiness_degraded(client: AsyncClient, db: AsyncMock) -> None:
    """Test readiness probe reports an unreachable database."""
    db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


async def test_info(client: AsyncClient) -> None:
    """Test info endpoint."""
    response = await client.get("/info")

    assert response.status_code == 200
    assert response.json()["app"] == "Shipnorth Access"


async def test_request_id_echoed(client: AsyncClient) -> None:
    """Test the request ID header is returned."""
    response = await client.get("/health/live", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
