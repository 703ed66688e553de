"""User database models."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from shipnorth.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_PORTAL_NAME_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from shipnorth.core.database.base import Base, JSONType, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """An account that can sign in to one or more portals.

    Attributes:
        email: Unique email address
        roles: Role tags held by the account
        role: Legacy single role, kept for rows written before multi-role support
        customer_id: Customer record owned by the account (customers only)
        last_used_portal: Portal the account used most recently
        default_portal: Portal explicitly chosen as default
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    roles: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
    )
    role: Mapped[str | None] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=True,
    )
    customer_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )
    last_used_portal: Mapped[str | None] = mapped_column(
        String(MAX_PORTAL_NAME_LENGTH),
        nullable=True,
    )
    default_portal: Mapped[str | None] = mapped_column(
        String(MAX_PORTAL_NAME_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, roles={self.roles})>"
