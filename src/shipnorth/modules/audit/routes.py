"""Audit trail review routes (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shipnorth.core.audit import AuditRecorder, AuditStats
from shipnorth.core.audit.schemas import AuditLogListResponse, AuditLogResponse
from shipnorth.core.permissions.dependencies import (
    require_permission,
    require_portal_access,
)
from shipnorth.core.permissions.models import Action, Portal, Principal, ResourceType


router = APIRouter(
    prefix="/audit",
    tags=["audit"],
    dependencies=[Depends(require_portal_access(Portal.STAFF))],
)

AuditReader = Annotated[
    Principal, Depends(require_permission(Action.READ, ResourceType.AUDIT_LOG))
]


@router.get(
    "",
    response_model=AuditLogListResponse,
    summary="List recent audit entries",
    description="Most recent permission decisions, newest first.",
)
async def list_audit_logs(
    _principal: AuditReader,
    audit: AuditRecorder,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> AuditLogListResponse:
    """List recent audit entries."""
    entries = await audit.recent_entries(limit)
    logs = [AuditLogResponse.model_validate(entry) for entry in entries]
    return AuditLogListResponse(logs=logs, count=len(logs))


@router.get(
    "/stats",
    response_model=AuditStats,
    summary="Audit statistics",
    description="Total entries, recent denials and the most frequent actions.",
)
async def get_audit_stats(
    _principal: AuditReader,
    audit: AuditRecorder,
) -> AuditStats:
    """Summarize the audit trail."""
    return await audit.stats()
