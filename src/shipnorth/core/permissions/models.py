"""Access-control vocabulary and the Principal value type.

Roles, actions, resource types and portals are closed enumerations.
A Principal is built once per request from verified token claims and
normalizes the legacy single ``role`` field into a non-empty role set.
"""

from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Role(StrEnum):
    """Role tags a principal may hold."""

    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"
    DRIVER = "driver"


class Action(StrEnum):
    """Operations on a resource. MANAGE implies all of the others."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


class ResourceType(StrEnum):
    """Protected entity categories, each with its own rule."""

    PACKAGE = "Package"
    CUSTOMER = "Customer"
    LOAD = "Load"
    INVOICE = "Invoice"
    USER = "User"
    SETTINGS = "Settings"
    REPORT = "Report"
    ROUTE = "Route"
    DELIVERY = "Delivery"
    AUDIT_LOG = "AuditLog"


class Portal(StrEnum):
    """Role-gated UI entry points."""

    CUSTOMER = "customer"
    DRIVER = "driver"
    STAFF = "staff"


class Principal(BaseModel):
    """The authenticated caller.

    Accepts either ``roles`` (list) or the legacy ``role`` field on input;
    ``roles`` wins when both are present. Owned customer references are
    accepted as ``owned_customer_id``, ``customer_id`` or ``customerId``.

    Attributes:
        id: Opaque identifier, stable for the session
        roles: Non-empty set of roles
        owned_customer_id: Customer record owned by this principal, if any
        last_used_portal: Portal the principal used most recently, if known
    """

    model_config = ConfigDict(frozen=True)

    id: str
    roles: frozenset[Role] = Field(min_length=1)
    owned_customer_id: str | None = None
    last_used_portal: Portal | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_claims(cls, data: Any) -> Any:
        """Fold legacy and camelCase claim names into the canonical fields."""
        if not isinstance(data, dict):
            return data

        data = dict(data)

        roles = data.get("roles")
        if not roles:
            role = data.pop("role", None)
            data["roles"] = [role] if role else []
        else:
            data.pop("role", None)
        if isinstance(data["roles"], str):
            data["roles"] = [data["roles"]]

        for alias in ("customer_id", "customerId"):
            value = data.pop(alias, None)
            if data.get("owned_customer_id") is None and value is not None:
                data["owned_customer_id"] = value

        if "lastUsedPortal" in data:
            data.setdefault("last_used_portal", data.pop("lastUsedPortal"))

        return data

    @field_validator("id", "owned_customer_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        """Identifiers are opaque strings; UUIDs and ints are stringified."""
        if isinstance(v, UUID | int) and not isinstance(v, bool):
            return str(v)
        return v

    def has_role(self, *roles: Role) -> bool:
        """Check whether the principal holds any of the given roles."""
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles
