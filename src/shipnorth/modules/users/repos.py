"""User repository for database operations."""

from uuid import UUID

from sqlalchemy import select, update

from shipnorth.api.dependencies import DBSession
from shipnorth.core.permissions.models import Portal
from shipnorth.modules.users.models import User
from shipnorth.modules.users.schemas import PortalPreferences


def _parse_id(user_id: str) -> UUID | None:
    try:
        return UUID(user_id)
    except ValueError:
        return None


class UserRepository:
    """Repository for User database operations.

    Users are addressed by the principal identifier; identifiers that
    are not UUIDs never match a row.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_portal_preferences(self, user_id: str) -> PortalPreferences | None:
        """Read the stored portal preferences of a user.

        Returns:
            The preferences, or None if there is no such user
        """
        parsed = _parse_id(user_id)
        if parsed is None:
            return None
        result = await self.session.execute(
            select(User.last_used_portal, User.default_portal).where(User.id == parsed)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return PortalPreferences(last_used_portal=row[0], default_portal=row[1])

    async def update_last_used_portal(self, user_id: str, portal: Portal) -> bool:
        """Record the portal a user entered most recently.

        Returns:
            True if a user row was updated
        """
        return await self._set_portal(user_id, last_used_portal=portal.value)

    async def set_default_portal(self, user_id: str, portal: Portal) -> bool:
        """Record the portal a user chose to land on.

        Returns:
            True if a user row was updated
        """
        return await self._set_portal(user_id, default_portal=portal.value)

    async def _set_portal(self, user_id: str, **values: str) -> bool:
        parsed = _parse_id(user_id)
        if parsed is None:
            return False
        result = await self.session.execute(
            update(User).where(User.id == parsed).values(**values)
        )
        return bool(result.rowcount)
