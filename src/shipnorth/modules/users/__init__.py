"""User accounts and their portal preferences."""

from shipnorth.modules.users.models import User
from shipnorth.modules.users.repos import UserRepository
from shipnorth.modules.users.schemas import PortalPreferences


__all__ = ["PortalPreferences", "User", "UserRepository"]
