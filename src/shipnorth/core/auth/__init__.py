"""Authentication: token verification and principal extraction."""

from shipnorth.core.auth.backend import (
    create_access_token,
    decode_token,
    principal_from_token,
)
from shipnorth.core.auth.dependencies import CurrentPrincipal, get_principal
from shipnorth.core.auth.middleware import PrincipalContextMiddleware, RequestIdMiddleware
from shipnorth.core.auth.schemas import TokenData


__all__ = [
    "CurrentPrincipal",
    "PrincipalContextMiddleware",
    "RequestIdMiddleware",
    "TokenData",
    "create_access_token",
    "decode_token",
    "get_principal",
    "principal_from_token",
]
