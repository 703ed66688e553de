"""Audit log database model.

One row per evaluated permission check, allowed or denied.
Rows are only ever inserted; nothing in the application updates
or deletes them.
"""

from typing import Any

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shipnorth.core.constants import (
    MAX_ACTOR_ID_LENGTH,
    MAX_AUDIT_ACTION_LENGTH,
    MAX_AUDIT_RESOURCE_LENGTH,
    MAX_IPV6_LENGTH,
    MAX_RESOURCE_ID_LENGTH,
)
from shipnorth.core.database.base import Base, CreatedAtMixin, JSONType, UUIDMixin


class AuditLog(Base, UUIDMixin, CreatedAtMixin):
    """Audit log entry for a permission decision.

    Attributes:
        actor_id: Principal that requested the operation
        action: Requested action (create, read, update, delete, manage)
        resource_type: Resource type checked (Package, Invoice, ...)
        resource_id: ID of the concrete subject, if there was one
        details: Context such as endpoint, method and reason
        success: Whether the operation was allowed
        error_message: Reason recorded for a denial
        ip_address: Client IP address
        user_agent: Client user agent string
        created_at: When the entry was written
    """

    __tablename__ = "audit_logs"

    actor_id: Mapped[str] = mapped_column(
        String(MAX_ACTOR_ID_LENGTH),
        nullable=False,
        index=True,
    )

    # What happened
    action: Mapped[str] = mapped_column(
        String(MAX_AUDIT_ACTION_LENGTH),
        nullable=False,
        index=True,
    )
    resource_type: Mapped[str] = mapped_column(
        String(MAX_AUDIT_RESOURCE_LENGTH),
        nullable=False,
        index=True,
    )
    resource_id: Mapped[str | None] = mapped_column(
        String(MAX_RESOURCE_ID_LENGTH),
        nullable=True,
        index=True,
    )
    details: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
    )

    # Outcome
    success: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Request context
    ip_address: Mapped[str | None] = mapped_column(
        String(MAX_IPV6_LENGTH),
        nullable=True,
    )
    user_agent: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, actor_id={self.actor_id}, action={self.action}, "
            f"resource_type={self.resource_type}, success={self.success})>"
        )
