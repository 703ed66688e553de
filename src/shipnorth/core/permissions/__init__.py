"""Role and ownership based access control.

Provides:
- Principal, Role, Action, ResourceType and Portal
- can_perform and PermissionChecker for pure permission checks
- Portal resolution
- FastAPI dependencies that enforce and audit checks on routes
"""

from shipnorth.core.permissions.checker import (
    PermissionChecker,
    can_perform,
    filter_permitted,
)
from shipnorth.core.permissions.models import (
    Action,
    Portal,
    Principal,
    ResourceType,
    Role,
)
from shipnorth.core.permissions.portals import (
    PortalAccess,
    available_portals,
    can_access_portal,
    resolve_default_portal,
    resolve_portals,
)
from shipnorth.core.permissions.subject import Subject


__all__ = [
    "Action",
    "PermissionChecker",
    "Portal",
    "PortalAccess",
    "Principal",
    "ResourceType",
    "Role",
    "Subject",
    "available_portals",
    "can_access_portal",
    "can_perform",
    "filter_permitted",
    "resolve_default_portal",
    "resolve_portals",
]
