"""Audit trail for permission decisions.

Provides:
- AuditLog model for storing audit entries
- AuditService for best-effort writes and administrative reads
"""

from shipnorth.core.audit.models import AuditLog
from shipnorth.core.audit.schemas import AuditEntry, AuditStats
from shipnorth.core.audit.service import (
    AuditContext,
    AuditRecorder,
    AuditService,
    get_audit_service,
)


__all__ = [
    "AuditContext",
    "AuditEntry",
    "AuditLog",
    "AuditRecorder",
    "AuditService",
    "AuditStats",
    "get_audit_service",
]
