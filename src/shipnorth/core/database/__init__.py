"""Database layer - session management, base models, and mixins."""

from shipnorth.core.database.base import (
    Base,
    CreatedAtMixin,
    JSONType,
    TimestampMixin,
    UUIDMixin,
)
from shipnorth.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "CreatedAtMixin",
    "JSONType",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
]
