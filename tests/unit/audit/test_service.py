"""Tests for the audit service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from shipnorth.core.audit.models import AuditLog
from shipnorth.core.audit.schemas import AuditEntry
from shipnorth.core.audit.service import AuditContext, AuditService


pytestmark = pytest.mark.unit


def compiled_sql(statement, literal_binds: bool = True) -> str:
    return str(
        statement.compile(
            dialect=postgresql.dialect(),
            compile_kwargs={"literal_binds": literal_binds},
        )
    )


class TestAuditContext:
    """Tests for AuditContext."""

    def test_create_context(self):
        """Test creating an audit context."""
        context = AuditContext(
            endpoint="/api/v1/packages/p1",
            method="DELETE",
            ip_address="192.168.1.1",
            user_agent="Mozilla/5.0",
        )

        assert context.endpoint == "/api/v1/packages/p1"
        assert context.method == "DELETE"
        assert context.ip_address == "192.168.1.1"
        assert context.user_agent == "Mozilla/5.0"

    def test_create_context_minimal(self):
        """Test creating a minimal audit context."""
        context = AuditContext()

        assert context.endpoint is None
        assert context.ip_address is None


class TestAuditService:
    """Tests for AuditService."""

    @pytest.fixture
    def mock_session(self):
        """Create a mock database session usable as a context manager."""
        session = AsyncMock()
        session.add = MagicMock()
        session.__aenter__.return_value = session
        session.__aexit__.return_value = False
        return session

    @pytest.fixture
    def service(self, mock_session):
        return AuditService(session_factory=MagicMock(return_value=mock_session))

    @pytest.fixture
    def log(self, monkeypatch):
        """Capture the service's structured log calls."""
        logger = MagicMock()
        monkeypatch.setattr("shipnorth.core.audit.service.log", logger)
        return logger

    @pytest.fixture
    def entry(self):
        return AuditEntry(
            actor_id="u1",
            action="read",
            resource_type="Package",
            resource_id="p1",
        )

    async def test_record_writes_and_commits(self, service, mock_session, entry, log):
        """Test a successful write."""
        await service.record(entry)

        mock_session.add.assert_called_once()
        mock_session.commit.assert_awaited_once()

        row = mock_session.add.call_args[0][0]
        assert isinstance(row, AuditLog)
        assert row.actor_id == "u1"
        assert row.action == "read"
        assert row.resource_type == "Package"
        assert row.resource_id == "p1"
        assert row.success is True
        log.info.assert_called_once()
        assert log.info.call_args[0][0] == "audit_log_created"

    async def test_record_swallows_commit_failure(self, service, mock_session, entry, log):
        """Storage failures are logged, never raised."""
        mock_session.commit.side_effect = OperationalError("INSERT", {}, Exception("db down"))

        await service.record(entry)

        log.error.assert_called_once()
        assert log.error.call_args[0][0] == "audit_write_failed"
        assert log.error.call_args[1]["actor_id"] == "u1"
        log.info.assert_not_called()

    async def test_record_swallows_session_failure(self, entry, log):
        """A session that cannot even be opened is also swallowed."""
        service = AuditService(session_factory=MagicMock(side_effect=RuntimeError("no pool")))

        await service.record(entry)

        log.error.assert_called_once()
        assert log.error.call_args[1]["error"] == "no pool"

    async def test_write_result(self, service, mock_session, entry):
        """The internal write reports its outcome."""
        result = await service._write(entry)
        assert result.written
        assert result.error is None

        mock_session.commit.side_effect = RuntimeError()
        result = await service._write(entry)
        assert not result.written
        assert result.error == "RuntimeError"

    async def test_record_decision_denied(self, service, mock_session, log):
        """Denials carry the reason in details and error message."""
        context = AuditContext(
            endpoint="/api/v1/settings",
            method="DELETE",
            ip_address="10.0.0.1",
            user_agent="Test Agent",
        )

        await service.record_decision(
            actor_id="u1",
            action="delete",
            resource_type="Settings",
            allowed=False,
            context=context,
            reason="Permission denied",
        )

        row = mock_session.add.call_args[0][0]
        assert row.success is False
        assert row.error_message == "Permission denied"
        assert row.details == {
            "endpoint": "/api/v1/settings",
            "method": "DELETE",
            "reason": "Permission denied",
        }
        assert row.ip_address == "10.0.0.1"
        assert row.user_agent == "Test Agent"
        assert row.resource_id is None

    async def test_record_decision_allowed(self, service, mock_session, log):
        """Allowed decisions have no error message."""
        await service.record_decision(
            actor_id="u1",
            action="read",
            resource_type="Package",
            allowed=True,
            context=AuditContext(endpoint="/api/v1/packages/p1", method="GET"),
            resource_id="p1",
        )

        row = mock_session.add.call_args[0][0]
        assert row.success is True
        assert row.error_message is None
        assert row.resource_id == "p1"
        assert row.details == {"endpoint": "/api/v1/packages/p1", "method": "GET"}

    async def test_recent_entries(self, service, mock_session):
        """Test reading recent entries."""
        rows = [MagicMock(spec=AuditLog), MagicMock(spec=AuditLog)]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        mock_session.execute.return_value = result

        entries = await service.recent_entries(limit=2)

        assert entries == rows
        sql = compiled_sql(mock_session.execute.call_args[0][0])
        assert "ORDER BY audit_logs.created_at DESC" in sql
        assert "LIMIT 2" in sql

    @pytest.mark.parametrize(
        "limit,expected",
        [(None, "LIMIT 100"), (5000, "LIMIT 1000"), (-3, "LIMIT 1")],
    )
    async def test_recent_entries_limit_clamped(self, service, mock_session, limit, expected):
        """Test the limit is defaulted and clamped."""
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_session.execute.return_value = result

        await service.recent_entries(limit=limit)

        assert expected in compiled_sql(mock_session.execute.call_args[0][0])

    async def test_recent_entries_propagates_errors(self, service, mock_session):
        """Reads are not best effort."""
        mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(OperationalError):
            await service.recent_entries()

    async def test_stats(self, service, mock_session):
        """Test summarizing the audit trail."""
        mock_session.scalar.side_effect = [42, 3]
        result = MagicMock()
        result.all.return_value = [("read", 30), ("delete", 12)]
        mock_session.execute.return_value = result

        stats = await service.stats()

        assert stats.total_count == 42
        assert stats.recent_failure_count == 3
        assert [(a.action, a.count) for a in stats.top_actions] == [("read", 30), ("delete", 12)]

        failures_sql = compiled_sql(
            mock_session.scalar.call_args_list[1][0][0], literal_binds=False
        )
        assert "audit_logs.success IS false" in failures_sql
        top_sql = compiled_sql(mock_session.execute.call_args[0][0])
        assert "GROUP BY audit_logs.action" in top_sql
        assert "LIMIT 10" in top_sql

    async def test_stats_empty_trail(self, service, mock_session):
        """Test stats on an empty trail."""
        mock_session.scalar.side_effect = [None, None]
        result = MagicMock()
        result.all.return_value = []
        mock_session.execute.return_value = result

        stats = await service.stats()

        assert stats.total_count == 0
        assert stats.recent_failure_count == 0
        assert stats.top_actions == []
