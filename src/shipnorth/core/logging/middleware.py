"""HTTP access logging.

One ``request_started`` and one ``request_completed`` (or
``request_failed``) event per request. The caller's user id and roles
are included once the principal context middleware has put them on
``request.state``.
"""

import time
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger()

# Probes and API docs are too noisy to log
DEFAULT_EXCLUDE_PATHS = (
    "/health/live",
    "/health/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
)


def _level_for(status_code: int) -> Callable[..., Any]:
    if status_code >= 500:
        return logger.error
    if status_code >= 400:
        return logger.warning
    return logger.info


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its outcome and duration.

    Client errors are warnings and server errors are errors, so denied
    and unauthenticated requests are easy to find.
    """

    def __init__(self, app: Any, exclude_paths: Sequence[str] | None = None) -> None:
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or DEFAULT_EXCLUDE_PATHS)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        started = time.perf_counter()
        request_info: dict[str, Any] = {"method": request.method, "path": path}

        logger.info(
            "request_started",
            **request_info,
            query=str(request.url.query) or None,
            client_ip=get_client_ip(request),
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "request_failed",
                **request_info,
                duration_ms=_elapsed_ms(started),
                error=str(exc),
            )
            raise

        user_id = getattr(request.state, "user_id", None)
        if user_id:
            request_info["user_id"] = user_id
            request_info["roles"] = getattr(request.state, "roles", [])

        _level_for(response.status_code)(
            "request_completed",
            **request_info,
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        return response


def get_client_ip(request: Request) -> str | None:
    """Best guess at the originating client address.

    Proxies are trusted: the first X-Forwarded-For hop wins, then
    X-Real-IP, then the socket peer.
    """
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded_for.split(",")[0].strip()
    if first_hop:
        return first_hop

    return request.headers.get("X-Real-IP") or (request.client.host if request.client else None)
