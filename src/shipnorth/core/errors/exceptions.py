"""Exceptions that map to HTTP error responses.

Raise these from dependencies and route handlers; the handlers in
``shipnorth.core.errors.handlers`` turn them into Problem Details.
"""

from typing import Any


class AppException(Exception):
    """Base class for errors with a defined HTTP representation.

    Attributes:
        message: Text shown to the client
        error_code: Stable machine-readable category
        status_code: HTTP status of the response
        details: Extra members merged into the response body
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message:
            self.message = message
        if error_code:
            self.error_code = error_code
        self.details = dict(details or {})
        super().__init__(self.message)


class NotFoundError(AppException):
    """A referenced record does not exist.

    Example:
        raise NotFoundError("User not found", resource="User", resource_id=user_id)
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, details=details)


class AccessError(AppException):
    """Request rejected by access control.

    Subclasses differ only in ``error_code``, which tells clients whether
    to authenticate (``unauthenticated``) or give up (``forbidden``).
    """


class UnauthorizedError(AccessError):
    """No authenticated principal. Raised before any permission check."""

    message = "Authentication required"
    error_code = "unauthenticated"
    status_code = 401


class ForbiddenError(AccessError):
    """The principal may not perform the operation.

    The message stays generic. Which rule failed is only recorded in
    the audit trail.

    Example:
        raise ForbiddenError(details={"portal": "staff"})
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403
