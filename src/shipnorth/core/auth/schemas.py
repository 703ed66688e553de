"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel, Field

from shipnorth.core.permissions.models import Portal, Principal, Role


class TokenData(BaseModel):
    """Data extracted from a JWT access token.

    Attributes:
        sub: The principal's identifier
        roles: Role tags; older tokens only carry ``role``
        role: Legacy single role
        customer_id: Customer record owned by the principal
        last_used_portal: Portal the principal used most recently
        exp: Token expiration time
        type: Token type (access or refresh)
    """

    sub: str
    roles: list[Role] = Field(default_factory=list)
    role: Role | None = None
    customer_id: str | None = None
    last_used_portal: Portal | None = None
    exp: datetime
    type: str = "access"

    def to_principal(self) -> Principal:
        """Build the request principal from the verified claims."""
        return Principal(
            id=self.sub,
            roles=self.roles,
            role=self.role,
            owned_customer_id=self.customer_id,
            last_used_portal=self.last_used_portal,
        )
