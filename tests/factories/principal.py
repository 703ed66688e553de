"""Principal factory for tests."""

from uuid import uuid4

from polyfactory import Use
from polyfactory.factories.pydantic_factory import ModelFactory

from shipnorth.core.permissions.models import Principal, Role


class PrincipalFactory(ModelFactory[Principal]):
    """Factory for creating test Principal instances.

    Defaults to a plain customer without an owned customer record.
    """

    __model__ = Principal

    id = Use(lambda: str(uuid4()))
    roles = frozenset({Role.CUSTOMER})
    owned_customer_id = None
    last_used_portal = None

    @classmethod
    def with_roles(cls, *roles: Role, **kwargs) -> Principal:
        """Build a principal holding exactly the given roles."""
        return cls.build(roles=frozenset(roles), **kwargs)
