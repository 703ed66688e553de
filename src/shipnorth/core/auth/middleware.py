"""Request context middleware.

Neither middleware rejects requests. They only make the request ID and
the caller's identity available to logs and error responses.
"""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from shipnorth.core.auth.backend import principal_from_token


class PrincipalContextMiddleware(BaseHTTPMiddleware):
    """Expose the caller's user id and roles for logging.

    A valid bearer token puts ``user_id`` and ``roles`` on request.state
    and in the structlog context. Authentication itself is enforced by
    the route dependencies.
    """

    def __init__(self, app: ASGIApp, exclude_paths: tuple[str, ...] = ("/health",)) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if token and scheme.lower() == "bearer" and not request.url.path.startswith(
            self.exclude_paths
        ):
            principal = principal_from_token(token)
            if principal is not None:
                roles = sorted(role.value for role in principal.roles)
                request.state.user_id = principal.id
                request.state.roles = roles
                structlog.contextvars.bind_contextvars(user_id=principal.id, roles=roles)

        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID.

    An incoming X-Request-ID is reused. The ID is stored as
    request.state.request_id (and trace_id, for error responses),
    bound to the structlog context and echoed in the response.
    Context bound during the request is cleared afterwards.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request.state.trace_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "user_id", "roles")

        response.headers["X-Request-ID"] = request_id
        return response
