"""Problem Details (RFC 7807) error responses.

All error responses share one shape. Besides the standard members they
carry ``error_code``, which is how clients tell an ``unauthenticated``
request apart from a ``forbidden`` one.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from shipnorth.config import settings
from shipnorth.core.errors.exceptions import AppException, UnauthorizedError


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """One invalid request field."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """Error response body.

    Attributes:
        type: URI documenting the error category
        title: Short summary derived from the error code
        status: HTTP status code
        detail: Explanation of this occurrence, safe to show to users
        error_code: Machine-readable error category
        instance: Request path the error occurred on
        errors: Field errors, for validation failures only
        trace_id: Request ID, for correlating with server logs
    """

    model_config = ConfigDict(extra="allow")

    type: str
    title: str
    status: int
    detail: str
    error_code: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None


def problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    *,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render a Problem Details response for the current request.

    Members in ``extra`` are added next to the standard ones but never
    replace them.
    """
    body = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        error_code=error_code,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    for key, value in (extra or {}).items():
        body.setdefault(key, value)

    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
    )

    # Bearer challenge for clients that retry with credentials
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None

    return problem_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        extra=exc.details,
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report every invalid field; body fields are named without the "body" prefix."""
    errors = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(
            FieldError(
                field=path or "unknown",
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )

    logger.warning("validation_error", path=request.url.path, error_count=len(errors))

    return problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort handler. The exception is logged, never returned."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )

    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the Problem Details handlers on an application."""
    app.add_exception_handler(AppException, cast("ExceptionHandler", app_exception_handler))
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
