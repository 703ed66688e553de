"""JWT handling for access tokens.

Tokens are issued by the identity service; this module verifies them
and can mint equivalent tokens for tooling and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from jose import JWTError, jwt
from pydantic import ValidationError

from shipnorth.config import settings
from shipnorth.core.auth.schemas import TokenData
from shipnorth.core.permissions.models import Principal, Role


logger = structlog.get_logger()


# Most privileged first
ROLE_PRECEDENCE = (Role.ADMIN, Role.STAFF, Role.DRIVER, Role.CUSTOMER)


def primary_role(principal: Principal) -> Role:
    """The single role reported to consumers that only understand one."""
    return next(role for role in ROLE_PRECEDENCE if role in principal.roles)


def create_access_token(
    principal: Principal,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token for a principal.

    Both ``roles`` and the legacy ``role`` claim are written so older
    consumers keep working. ``role`` is the most privileged role held.

    Args:
        principal: The principal the token represents
        expires_delta: Optional custom expiration time
        additional_claims: Optional extra claims to include

    Returns:
        Encoded JWT string
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    roles = sorted(role.value for role in principal.roles)

    to_encode: dict[str, Any] = {
        "sub": principal.id,
        "roles": roles,
        "role": primary_role(principal).value,
        "exp": expire,
        "type": "access",
    }
    if principal.owned_customer_id is not None:
        to_encode["customer_id"] = principal.owned_customer_id
    if principal.last_used_portal is not None:
        to_encode["last_used_portal"] = principal.last_used_portal.value
    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a JWT token.

    Args:
        token: The JWT string to decode

    Returns:
        TokenData if the signature, expiry and claims are valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return TokenData.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        logger.debug("token_rejected", error_type=type(exc).__name__)
        return None


def principal_from_token(token: str) -> Principal | None:
    """Build the principal a bearer token represents.

    Returns:
        The principal, or None for invalid or expired tokens, non-access
        tokens and tokens that carry no role
    """
    token_data = decode_token(token)
    if token_data is None or token_data.type != "access":
        return None

    try:
        return token_data.to_principal()
    except ValidationError:
        logger.debug("token_rejected", error_type="no_roles")
        return None
