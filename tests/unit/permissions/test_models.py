"""Unit tests for Principal normalization."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from shipnorth.core.permissions.models import Portal, Principal, Role


pytestmark = pytest.mark.unit


class TestPrincipalRoles:
    """Role set normalization at construction."""

    def test_roles_list(self):
        """A roles list becomes a role set."""
        principal = Principal(id="u1", roles=["staff", "driver"])

        assert principal.roles == frozenset({Role.STAFF, Role.DRIVER})

    def test_legacy_single_role(self):
        """A lone legacy role becomes a one-element role set."""
        principal = Principal.model_validate({"id": "u1", "role": "driver"})

        assert principal.roles == frozenset({Role.DRIVER})

    def test_roles_take_precedence_over_legacy_role(self):
        """When both are present, roles wins."""
        principal = Principal.model_validate(
            {"id": "u1", "role": "customer", "roles": ["staff"]}
        )

        assert principal.roles == frozenset({Role.STAFF})

    def test_empty_roles_falls_back_to_legacy_role(self):
        """An empty roles list does not hide the legacy role."""
        principal = Principal.model_validate({"id": "u1", "role": "admin", "roles": []})

        assert principal.roles == frozenset({Role.ADMIN})

    def test_single_role_string_in_roles(self):
        """A bare string under roles is treated as one role."""
        principal = Principal.model_validate({"id": "u1", "roles": "customer"})

        assert principal.roles == frozenset({Role.CUSTOMER})

    def test_no_roles_rejected(self):
        """A principal without any role is invalid."""
        with pytest.raises(ValidationError):
            Principal.model_validate({"id": "u1"})

        with pytest.raises(ValidationError):
            Principal(id="u1", roles=[])

    def test_unknown_role_rejected(self):
        """Roles outside the fixed set are invalid."""
        with pytest.raises(ValidationError):
            Principal(id="u1", roles=["superhero"])

    def test_duplicate_roles_collapse(self):
        """Repeated roles are stored once."""
        principal = Principal(id="u1", roles=["staff", "staff"])

        assert principal.roles == frozenset({Role.STAFF})


class TestPrincipalFields:
    """Identifier coercion and claim aliases."""

    def test_uuid_id_coerced_to_string(self):
        """UUID identifiers are stored in string form."""
        user_id = uuid4()

        principal = Principal(id=user_id, roles=["staff"])

        assert principal.id == str(user_id)

    @pytest.mark.parametrize("key", ["customer_id", "customerId", "owned_customer_id"])
    def test_owned_customer_aliases(self, key):
        """The owned customer reference is accepted under all claim names."""
        principal = Principal.model_validate({"id": "u1", "roles": ["customer"], key: "c1"})

        assert principal.owned_customer_id == "c1"

    def test_last_used_portal_camel_case(self):
        """lastUsedPortal is accepted as written by older clients."""
        principal = Principal.model_validate(
            {"id": "u1", "roles": ["driver"], "lastUsedPortal": "driver"}
        )

        assert principal.last_used_portal is Portal.DRIVER

    def test_principal_is_immutable(self):
        """A principal cannot change during a check."""
        principal = Principal(id="u1", roles=["customer"])

        with pytest.raises(ValidationError):
            principal.id = "u2"

    def test_has_role_and_is_admin(self):
        """Role helpers reflect the role set."""
        principal = Principal(id="u1", roles=["admin", "driver"])

        assert principal.is_admin
        assert principal.has_role(Role.DRIVER)
        assert principal.has_role(Role.CUSTOMER, Role.ADMIN)
        assert not principal.has_role(Role.CUSTOMER)
