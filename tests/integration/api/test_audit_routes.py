"""Integration tests for the audit review endpoints."""

from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import AsyncClient

from shipnorth.core.audit import AuditStats, get_audit_service
from shipnorth.core.audit.schemas import ActionCount
from shipnorth.core.permissions.models import Role
from tests.factories import PrincipalFactory, RecordingAuditService


pytestmark = pytest.mark.integration


class FakeAuditTrail(RecordingAuditService):
    """Recording service with canned review data."""

    def __init__(self) -> None:
        super().__init__()
        self.requested_limits: list[int | None] = []

    async def recent_entries(self, limit=None):
        self.requested_limits.append(limit)
        return [
            SimpleNamespace(
                id=uuid4(),
                actor_id="s1",
                action="delete",
                resource_type="Settings",
                resource_id=None,
                details={"endpoint": "/api/v1/settings", "method": "DELETE"},
                success=False,
                error_message="Permission denied",
                ip_address="10.0.0.1",
                created_at=datetime(2026, 10, 18, 9, 30, tzinfo=UTC),
            )
        ]

    async def stats(self) -> AuditStats:
        return AuditStats(
            total_count=12,
            recent_failure_count=2,
            top_actions=[ActionCount(action="read", count=9), ActionCount(action="delete", count=3)],
        )


@pytest.fixture
def trail(app) -> FakeAuditTrail:
    service = FakeAuditTrail()
    app.dependency_overrides[get_audit_service] = lambda: service
    return service


class TestListAuditLogs:
    """Tests for GET /api/v1/audit."""

    async def test_admin_lists_entries(self, client: AsyncClient, trail, auth_headers):
        admin = PrincipalFactory.with_roles(Role.ADMIN, id="a1")

        response = await client.get("/api/v1/audit?limit=5", headers=auth_headers(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["logs"][0]["action"] == "delete"
        assert body["logs"][0]["success"] is False
        assert trail.requested_limits == [5]

        # The review itself is an audited check
        assert len(trail.entries) == 1
        assert trail.entries[0].resource_type == "AuditLog"
        assert trail.entries[0].success is True

    async def test_default_limit(self, client: AsyncClient, trail, auth_headers):
        admin = PrincipalFactory.with_roles(Role.ADMIN)

        await client.get("/api/v1/audit", headers=auth_headers(admin))

        assert trail.requested_limits == [None]

    async def test_invalid_limit(self, client: AsyncClient, trail, auth_headers):
        admin = PrincipalFactory.with_roles(Role.ADMIN)

        response = await client.get("/api/v1/audit?limit=0", headers=auth_headers(admin))

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "query.limit"

    async def test_staff_denied_and_audited(self, client: AsyncClient, trail, auth_headers):
        staff = PrincipalFactory.with_roles(Role.STAFF, id="s1")

        response = await client.get("/api/v1/audit", headers=auth_headers(staff))

        assert response.status_code == 403
        assert trail.requested_limits == []
        assert len(trail.entries) == 1
        assert trail.entries[0].actor_id == "s1"
        assert trail.entries[0].success is False

    async def test_customer_stopped_at_portal(self, client: AsyncClient, trail, auth_headers):
        customer = PrincipalFactory.with_roles(Role.CUSTOMER)

        response = await client.get("/api/v1/audit", headers=auth_headers(customer))

        assert response.status_code == 403
        assert response.json()["portal"] == "staff"
        assert trail.entries == []

    async def test_unauthenticated(self, client: AsyncClient, trail):
        response = await client.get("/api/v1/audit")

        assert response.status_code == 401
        assert trail.entries == []


class TestAuditStats:
    """Tests for GET /api/v1/audit/stats."""

    async def test_admin_gets_stats(self, client: AsyncClient, trail, auth_headers):
        admin = PrincipalFactory.with_roles(Role.ADMIN)

        response = await client.get("/api/v1/audit/stats", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json() == {
            "total_count": 12,
            "recent_failure_count": 2,
            "top_actions": [
                {"action": "read", "count": 9},
                {"action": "delete", "count": 3},
            ],
        }

    async def test_staff_denied(self, client: AsyncClient, trail, auth_headers):
        staff = PrincipalFactory.with_roles(Role.STAFF)

        response = await client.get("/api/v1/audit/stats", headers=auth_headers(staff))

        assert response.status_code == 403
        assert response.json()["error_code"] == "forbidden"
