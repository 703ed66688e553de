"""Portal selection routes."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from shipnorth.core.auth import CurrentPrincipal
from shipnorth.core.errors import ForbiddenError, NotFoundError
from shipnorth.core.permissions.models import Portal, Principal
from shipnorth.core.permissions.portals import (
    PortalAccess,
    can_access_portal,
    resolve_portals,
)
from shipnorth.modules.portals.schemas import PortalChoice
from shipnorth.modules.users import PortalPreferences, UserRepository


logger = structlog.get_logger()

router = APIRouter(prefix="/portals", tags=["portals"])

Users = Annotated[UserRepository, Depends()]


def _portal_access(principal: Principal, preferences: PortalPreferences | None) -> PortalAccess:
    # Without a user row only the token's last_used_portal claim is known
    if preferences is None:
        return resolve_portals(principal)
    return resolve_portals(
        principal,
        last_used_portal=preferences.last_used_portal,
        default_portal=preferences.default_portal,
    )


def _ensure_accessible(principal: Principal, portal: Portal) -> None:
    if not can_access_portal(principal, portal):
        raise ForbiddenError(
            f"You do not have access to the {portal.value} portal",
            details={"portal": portal.value},
        )


def _user_not_found(principal: Principal) -> NotFoundError:
    return NotFoundError("User not found", resource="User", resource_id=principal.id)


@router.get(
    "",
    response_model=PortalAccess,
    summary="Get accessible portals",
    description="Portals the caller may enter and the one to land on.",
)
async def get_portals(principal: CurrentPrincipal, users: Users) -> PortalAccess:
    """Get accessible portals and the default portal."""
    preferences = await users.get_portal_preferences(principal.id)
    return _portal_access(principal, preferences)


@router.put(
    "/last-used",
    response_model=PortalAccess,
    summary="Record last used portal",
    description="Remember the portal the caller switched to.",
)
async def update_last_used_portal(
    data: PortalChoice,
    principal: CurrentPrincipal,
    users: Users,
) -> PortalAccess:
    """Record the portal the caller switched to."""
    _ensure_accessible(principal, data.portal)

    if not await users.update_last_used_portal(principal.id, data.portal):
        raise _user_not_found(principal)

    logger.info("last_used_portal_updated", user_id=principal.id, portal=data.portal.value)

    return _portal_access(principal, await users.get_portal_preferences(principal.id))


@router.put(
    "/default",
    response_model=PortalAccess,
    summary="Choose default portal",
    description="Portal to land on when the last used one is unknown or no longer accessible.",
)
async def set_default_portal(
    data: PortalChoice,
    principal: CurrentPrincipal,
    users: Users,
) -> PortalAccess:
    """Record the portal the caller wants as default."""
    _ensure_accessible(principal, data.portal)

    if not await users.set_default_portal(principal.id, data.portal):
        raise _user_not_found(principal)

    logger.info("default_portal_updated", user_id=principal.id, portal=data.portal.value)

    return _portal_access(principal, await users.get_portal_preferences(principal.id))
