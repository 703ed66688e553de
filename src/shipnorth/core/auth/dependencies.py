"""FastAPI dependencies for authentication.

The principal is built from verified token claims only; no database
lookup happens per request.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shipnorth.core.auth.backend import principal_from_token
from shipnorth.core.errors import UnauthorizedError
from shipnorth.core.permissions.models import Principal


# auto_error is off so a missing token becomes our own 401 Problem Details
bearer_scheme = HTTPBearer(auto_error=False)


async def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal:
    """Get the authenticated principal for the request.

    Raises:
        UnauthorizedError: If the token is missing or yields no principal
    """
    if credentials is None:
        raise UnauthorizedError("Missing authentication token")

    principal = principal_from_token(credentials.credentials)
    if principal is None:
        raise UnauthorizedError("Invalid or expired token")

    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
