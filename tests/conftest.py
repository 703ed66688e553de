"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from shipnorth.core.audit import get_audit_service
from shipnorth.core.auth import create_access_token
from shipnorth.core.database import get_db
from shipnorth.core.permissions.models import Principal
from shipnorth.main import create_app
from tests.factories import RecordingAuditService


@pytest.fixture
def audit_recorder() -> RecordingAuditService:
    """Audit service that records entries instead of storing them."""
    return RecordingAuditService()


@pytest.fixture
def db() -> AsyncMock:
    """Mock request-scoped database session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
async def app(audit_recorder: RecordingAuditService, db: AsyncMock):
    """Create test application instance."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_audit_service] = lambda: audit_recorder

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def auth_headers() -> Callable[[Principal], dict[str, str]]:
    """Build an Authorization header for a principal."""

    def _headers(principal: Principal) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(principal)}"}

    return _headers


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
