"""FastAPI dependencies that enforce permissions on routes.

Usage:
    @router.get("/packages/{package_id}")
    async def get_package(
        principal: Annotated[
            Principal,
            Depends(require_permission(Action.READ, ResourceType.PACKAGE, load_package)),
        ],
    ):
        ...

Every check made through ``require_permission`` is written to the
audit trail, allowed or denied. Portal guards and collection filters
are not audited.
"""

from collections.abc import Callable, Iterable
from typing import Annotated, Any, TypeVar

import structlog
from fastapi import Depends, Request

from shipnorth.core.audit import AuditContext, AuditRecorder
from shipnorth.core.auth.dependencies import CurrentPrincipal
from shipnorth.core.constants import DENIED_MESSAGE, DENIED_REASON
from shipnorth.core.errors import ForbiddenError
from shipnorth.core.permissions.checker import can_perform, filter_permitted
from shipnorth.core.permissions.models import Action, Portal, Principal, ResourceType
from shipnorth.core.permissions.portals import can_access_portal
from shipnorth.core.permissions.subject import as_subject


logger = structlog.get_logger()

T = TypeVar("T")

SubjectExtractor = Callable[..., Any]


async def no_subject() -> None:
    """Subject extractor for checks that are not about a single record."""
    return None


def require_permission(
    action: Action | str,
    resource_type: ResourceType | str,
    get_subject: SubjectExtractor | None = None,
) -> Callable[..., Any]:
    """Build a dependency that requires a permission to access a route.

    Args:
        action: The action being performed (e.g., "delete")
        resource_type: The resource type being accessed (e.g., "Package")
        get_subject: Optional dependency returning the record being acted
            on. It is resolved like any FastAPI dependency, so it may take
            path parameters or a database session.

    Returns:
        Dependency returning the permitted Principal

    Raises:
        UnauthorizedError: If no principal is present (not audited)
        ForbiddenError: If the principal lacks the permission
    """
    action = Action(action)
    resource_type = ResourceType(resource_type)
    subject_dependency = get_subject or no_subject

    async def permission_dependency(
        request: Request,
        principal: CurrentPrincipal,
        audit: AuditRecorder,
        subject: Annotated[Any, Depends(subject_dependency)],
    ) -> Principal:
        allowed = can_perform(principal, action, resource_type, subject)

        view = as_subject(subject)
        resource_id = view.id if view is not None else None
        log_data = {
            "user_id": principal.id,
            "action": action.value,
            "resource_type": resource_type.value,
            "resource_id": resource_id,
            "endpoint": request.url.path,
        }

        if not allowed:
            logger.warning("permission_denied", **log_data)
        else:
            logger.info("permission_granted", **log_data)

        await audit.record_decision(
            actor_id=principal.id,
            action=action.value,
            resource_type=resource_type.value,
            allowed=allowed,
            context=AuditContext.from_request(request),
            resource_id=resource_id,
            reason=None if allowed else DENIED_REASON,
        )

        if not allowed:
            raise ForbiddenError(DENIED_MESSAGE)

        return principal

    return permission_dependency


class PermissionFilter:
    """Callable that keeps only the items a principal may act on."""

    def __init__(
        self,
        principal: Principal,
        resource_type: ResourceType,
        action: Action = Action.READ,
    ) -> None:
        self.principal = principal
        self.resource_type = resource_type
        self.action = action

    def __call__(self, items: Iterable[T]) -> list[T]:
        return filter_permitted(self.principal, self.action, self.resource_type, items)


def filter_by_permissions(
    resource_type: ResourceType | str,
    action: Action | str = Action.READ,
) -> Callable[..., Any]:
    """Build a dependency that provides a PermissionFilter.

    Usage:
        @router.get("/packages")
        async def list_packages(
            permitted: Annotated[
                PermissionFilter, Depends(filter_by_permissions(ResourceType.PACKAGE))
            ],
        ):
            return permitted(await repo.list_all())
    """
    resource_type = ResourceType(resource_type)
    action = Action(action)

    async def filter_dependency(principal: CurrentPrincipal) -> PermissionFilter:
        return PermissionFilter(principal, resource_type, action)

    return filter_dependency


def require_portal_access(portal: Portal | str) -> Callable[..., Any]:
    """Build a dependency that requires access to a portal.

    Raises:
        UnauthorizedError: If no principal is present
        ForbiddenError: If the principal may not enter the portal
    """
    portal = Portal(portal)

    async def portal_dependency(principal: CurrentPrincipal) -> Principal:
        if not can_access_portal(principal, portal):
            raise ForbiddenError(
                f"You do not have access to the {portal.value} portal",
                details={"portal": portal.value},
            )
        return principal

    return portal_dependency
