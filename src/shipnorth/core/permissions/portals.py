"""Portal access derived from a principal's roles.

A principal may be eligible for several portals at once. The default
portal is the last one they used, when still accessible, then the one
they chose as default, when still accessible. Otherwise the fixed
preference staff, then driver, then customer applies.
"""

from pydantic import BaseModel

from shipnorth.core.permissions.models import Portal, Principal, Role


PORTAL_ROLES: dict[Portal, frozenset[Role]] = {
    Portal.CUSTOMER: frozenset({Role.CUSTOMER}),
    Portal.DRIVER: frozenset({Role.DRIVER}),
    Portal.STAFF: frozenset({Role.STAFF, Role.ADMIN}),
}

# Fallback order when there is no usable last-used portal
DEFAULT_PREFERENCE: tuple[Portal, ...] = (Portal.STAFF, Portal.DRIVER)


class PortalAccess(BaseModel):
    """Portals a principal may enter and the one to land on."""

    available: list[Portal]
    default: Portal


def can_access_portal(principal: Principal, portal: Portal | str) -> bool:
    """Check whether the principal may enter a portal.

    Unknown portal names are never accessible.
    """
    try:
        portal = Portal(portal)
    except ValueError:
        return False
    return principal.has_role(*PORTAL_ROLES[portal])


def available_portals(principal: Principal) -> list[Portal]:
    """List accessible portals in customer, driver, staff order."""
    return [portal for portal in Portal if can_access_portal(principal, portal)]


def resolve_default_portal(
    principal: Principal,
    last_used_portal: Portal | str | None = None,
    default_portal: Portal | str | None = None,
) -> Portal:
    """Pick the portal a principal should land on.

    Args:
        principal: The authenticated caller
        last_used_portal: Recorded preference; falls back to the
            principal's own last_used_portal when omitted
        default_portal: Portal the principal chose as default, if any

    Returns:
        The first accessible of last used and chosen default, otherwise
        staff for staff/admin, driver for drivers, customer for everyone else
    """
    for preference in (last_used_portal or principal.last_used_portal, default_portal):
        if preference is not None and can_access_portal(principal, preference):
            return Portal(preference)

    for portal in DEFAULT_PREFERENCE:
        if can_access_portal(principal, portal):
            return portal
    return Portal.CUSTOMER


def resolve_portals(
    principal: Principal,
    last_used_portal: Portal | str | None = None,
    default_portal: Portal | str | None = None,
) -> PortalAccess:
    """Compute accessible portals and the default in one go."""
    return PortalAccess(
        available=available_portals(principal),
        default=resolve_default_portal(principal, last_used_portal, default_portal),
    )
