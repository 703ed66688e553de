"""Error handling module with RFC 7807 Problem Details."""

from shipnorth.core.errors.exceptions import (
    AccessError,
    AppException,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from shipnorth.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    problem_response,
    register_exception_handlers,
)


__all__ = [
    "AccessError",
    "AppException",
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "ProblemDetail",
    "UnauthorizedError",
    "problem_response",
    "register_exception_handlers",
]
