"""Audit service for recording permission decisions.

Writes are a side channel of the request: each one runs in its own
session and transaction, and a failed write is logged and swallowed
so it can never change or delay the access decision it describes.
Reads are for administrative review and propagate storage errors.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Annotated

import structlog
from fastapi import Depends, Request
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shipnorth.config import settings
from shipnorth.core.audit.models import AuditLog
from shipnorth.core.audit.schemas import (
    ActionCount,
    AuditEntry,
    AuditStats,
    AuditWriteResult,
)
from shipnorth.core.database import async_session_factory
from shipnorth.core.logging.middleware import get_client_ip


log = structlog.get_logger()

SessionFactory = Callable[[], AsyncSession]


class AuditContext:
    """Request-level information included in every audit entry."""

    def __init__(
        self,
        endpoint: str | None = None,
        method: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.method = method
        self.ip_address = ip_address
        self.user_agent = user_agent

    @classmethod
    def from_request(cls, request: Request) -> "AuditContext":
        """Build the context from an incoming request."""
        return cls(
            endpoint=request.url.path,
            method=request.method,
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("User-Agent"),
        )


class AuditService:
    """Append-only access to the audit trail.

    Exposes no update or delete operation.
    """

    def __init__(self, session_factory: SessionFactory = async_session_factory) -> None:
        """Initialize audit service.

        Args:
            session_factory: Callable returning a new AsyncSession
        """
        self.session_factory = session_factory

    async def _write(self, entry: AuditEntry) -> AuditWriteResult:
        try:
            async with self.session_factory() as session:
                session.add(AuditLog(**entry.model_dump()))
                await session.commit()
        except Exception as exc:  # noqa: BLE001 - any storage failure is reported, not raised
            return AuditWriteResult(written=False, error=str(exc) or type(exc).__name__)
        return AuditWriteResult(written=True)

    async def record(self, entry: AuditEntry) -> None:
        """Append an entry to the audit trail, best effort.

        Storage failures are logged locally and never raised: the audit
        trail must not block or fail the request it describes.

        Args:
            entry: The entry to write
        """
        result = await self._write(entry)

        if not result.written:
            log.error(
                "audit_write_failed",
                actor_id=entry.actor_id,
                action=entry.action,
                resource_type=entry.resource_type,
                resource_id=entry.resource_id,
                success=entry.success,
                error=result.error,
            )
            return

        log.info(
            "audit_log_created",
            actor_id=entry.actor_id,
            action=entry.action,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            success=entry.success,
        )

    async def record_decision(
        self,
        actor_id: str,
        action: str,
        resource_type: str,
        allowed: bool,
        context: AuditContext,
        resource_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Record the outcome of one permission check.

        Args:
            actor_id: Principal that was checked
            action: Requested action
            resource_type: Resource type checked
            allowed: The evaluator's answer
            context: Request context for the entry
            resource_id: ID of the concrete subject, if any
            reason: Why the request was denied; stored as details and error message
        """
        details: dict[str, str] = {}
        if context.endpoint is not None:
            details["endpoint"] = context.endpoint
        if context.method is not None:
            details["method"] = context.method
        if reason is not None:
            details["reason"] = reason

        await self.record(
            AuditEntry(
                actor_id=actor_id,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details,
                success=allowed,
                error_message=None if allowed else reason,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
            )
        )

    async def recent_entries(self, limit: int | None = None) -> list[AuditLog]:
        """Get the most recent audit entries, newest first.

        Args:
            limit: Maximum number of entries, clamped to the configured maximum

        Returns:
            List of audit log rows
        """
        limit = limit or settings.audit_default_limit
        limit = max(1, min(limit, settings.audit_max_limit))

        stmt = select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def stats(self) -> AuditStats:
        """Summarize the audit trail.

        Returns:
            Total entries, denied entries inside the failure window,
            and the most frequent actions
        """
        since = datetime.now(UTC) - timedelta(hours=settings.audit_failure_window_hours)
        action_count = func.count().label("count")

        async with self.session_factory() as session:
            total = await session.scalar(select(func.count()).select_from(AuditLog))
            recent_failures = await session.scalar(
                select(func.count())
                .select_from(AuditLog)
                .where(AuditLog.success.is_(False), AuditLog.created_at > since)
            )
            result = await session.execute(
                select(AuditLog.action, action_count)
                .group_by(AuditLog.action)
                .order_by(action_count.desc(), AuditLog.action)
                .limit(settings.audit_top_actions_limit)
            )
            top_actions = [
                ActionCount(action=action, count=count) for action, count in result.all()
            ]

        return AuditStats(
            total_count=total or 0,
            recent_failure_count=recent_failures or 0,
            top_actions=top_actions,
        )


def get_audit_service() -> AuditService:
    """Dependency that provides the audit service."""
    return AuditService()


AuditRecorder = Annotated[AuditService, Depends(get_audit_service)]
