"""Permission checking logic.

This module answers whether a principal may perform an action on a
resource type, optionally for a concrete subject. Checks are pure:
no I/O, no shared state, and a denial is a ``False`` return rather
than an exception, so they are safe to call from any request.
"""

from collections.abc import Iterable
from typing import Any, TypeVar

import structlog

from shipnorth.core.permissions.models import Action, Principal, ResourceType
from shipnorth.core.permissions.rules import rule_for
from shipnorth.core.permissions.subject import as_subject


logger = structlog.get_logger()

T = TypeVar("T")


def can_perform(
    principal: Principal,
    action: Action | str,
    resource_type: ResourceType | str,
    subject: Any = None,
) -> bool:
    """Check whether a principal may perform an action.

    Args:
        principal: The authenticated caller
        action: The action to check (e.g., "read", "manage")
        resource_type: The resource type (e.g., "Package")
        subject: Optional record being acted on. Without one the check
            answers whether the principal could ever be allowed.

    Returns:
        True if allowed, False otherwise

    Note:
        Admins are always allowed, for every resource type and action.
    """
    action = Action(action)
    resource_type = ResourceType(resource_type)

    # Admins have all permissions
    if principal.is_admin:
        logger.debug(
            "admin_shortcut",
            user_id=principal.id,
            action=action.value,
            resource_type=resource_type.value,
        )
        return True

    rule = rule_for(resource_type)
    return rule(principal, action, as_subject(subject))


def filter_permitted(
    principal: Principal,
    action: Action | str,
    resource_type: ResourceType | str,
    items: Iterable[T],
) -> list[T]:
    """Keep only the items the principal may perform the action on.

    Args:
        principal: The authenticated caller
        action: The action to check for each item
        resource_type: The resource type of every item
        items: Candidate subjects

    Returns:
        The permitted items, in their original order
    """
    return [item for item in items if can_perform(principal, action, resource_type, item)]


class PermissionChecker:
    """Permission checks bound to a single principal.

    Handy in route handlers that need several checks for the same caller.
    """

    def __init__(self, principal: Principal) -> None:
        self.principal = principal

    def can(
        self,
        action: Action | str,
        resource_type: ResourceType | str,
        subject: Any = None,
    ) -> bool:
        """Check a single permission."""
        return can_perform(self.principal, action, resource_type, subject)

    def has_any(
        self,
        permissions: Iterable[tuple[ResourceType | str, Action | str]],
        subject: Any = None,
    ) -> bool:
        """Check if the principal holds at least one of the permissions.

        Args:
            permissions: (resource_type, action) pairs
            subject: Optional record the permissions apply to

        Returns:
            True if any pair is allowed
        """
        return any(
            self.can(action, resource_type, subject) for resource_type, action in permissions
        )

    def has_all(
        self,
        permissions: Iterable[tuple[ResourceType | str, Action | str]],
        subject: Any = None,
    ) -> bool:
        """Check if the principal holds every one of the permissions."""
        return all(
            self.can(action, resource_type, subject) for resource_type, action in permissions
        )

    def filter(
        self,
        resource_type: ResourceType | str,
        items: Iterable[T],
        action: Action | str = Action.READ,
    ) -> list[T]:
        """Keep only the items the principal may act on."""
        return filter_permitted(self.principal, action, resource_type, items)
