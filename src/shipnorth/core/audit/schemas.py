"""Pydantic schemas for the audit trail."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuditEntry(BaseModel):
    """An audit entry to be written.

    The timestamp is not part of the entry; storage assigns it.
    """

    actor_id: str
    action: str
    resource_type: str
    resource_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    success: bool = True
    error_message: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class AuditLogResponse(BaseModel):
    """A stored audit entry as returned to administrators."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    actor_id: str
    action: str
    resource_type: str
    resource_id: str | None
    details: dict[str, Any]
    success: bool
    error_message: str | None
    ip_address: str | None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Recent audit entries, newest first."""

    logs: list[AuditLogResponse]
    count: int


class ActionCount(BaseModel):
    """How often an action appears in the audit trail."""

    action: str
    count: int


class AuditStats(BaseModel):
    """Summary figures for the audit trail.

    Attributes:
        total_count: Number of entries ever written
        recent_failure_count: Denied entries inside the failure window
        top_actions: Most frequent actions, most frequent first
    """

    total_count: int
    recent_failure_count: int
    top_actions: list[ActionCount]


class AuditWriteResult(BaseModel):
    """Outcome of a single audit write attempt."""

    written: bool
    error: str | None = None
