"""Per-resource permission rules.

Each ResourceType maps to one rule function with the signature
``(principal, action, subject) -> bool``. Rules only run when the
global admin shortcut in the checker did not apply.

Most resources are described declaratively: every role gets a Grant,
which is a set of actions plus an optional ownership predicate. A
principal is allowed when any of its roles grants the action (union of
roles, never intersection). A grant that includes MANAGE is full control
and covers every action.

When no subject is given the ownership predicate is not evaluated:
the question is whether the role could ever perform the action, which
list endpoints and UI gating rely on before re-checking each item.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from shipnorth.core.permissions.models import Action, Principal, ResourceType, Role
from shipnorth.core.permissions.subject import Subject


Rule = Callable[[Principal, Action, Subject | None], bool]
Ownership = Callable[[Principal, Subject], bool]

FULL_CONTROL = frozenset(Action)
READ_ONLY = frozenset({Action.READ})
READ_UPDATE = frozenset({Action.READ, Action.UPDATE})
STAFF_USER_WRITES = frozenset({Action.CREATE, Action.UPDATE, Action.DELETE})


@dataclass(frozen=True)
class Grant:
    """Actions a role may perform, optionally limited to owned subjects."""

    actions: frozenset[Action]
    owns: Ownership | None = None

    def covers(self, action: Action) -> bool:
        return Action.MANAGE in self.actions or action in self.actions

    def allows(self, principal: Principal, action: Action, subject: Subject | None) -> bool:
        if not self.covers(action):
            return False
        if self.owns is None or subject is None:
            return True
        return self.owns(principal, subject)


# ============================================================
# Ownership predicates
# ============================================================


def owns_customer_record(principal: Principal, subject: Subject) -> bool:
    """Subject belongs to the principal's customer account."""
    return subject.owned_by_customer(principal.owned_customer_id)


def is_own_customer_profile(principal: Principal, subject: Subject) -> bool:
    """Subject is the principal's customer record itself."""
    return subject.is_identified_by(principal.owned_customer_id)


def is_assigned_driver(principal: Principal, subject: Subject) -> bool:
    """Subject is assigned to the principal as driver."""
    return subject.assigned_to_driver(principal.id)


def carried_by_driver(principal: Principal, subject: Subject) -> bool:
    """One of the subject's loads is assigned to the principal."""
    return subject.has_load_for_driver(principal.id)


# ============================================================
# Rule builders
# ============================================================


def role_grants(grants: Mapping[Role, Grant]) -> Rule:
    """Build a rule that allows when any held role's grant allows."""

    def rule(principal: Principal, action: Action, subject: Subject | None) -> bool:
        return any(
            grant.allows(principal, action, subject)
            for role, grant in grants.items()
            if role in principal.roles
        )

    return rule


def deny_all(_principal: Principal, _action: Action, _subject: Subject | None) -> bool:
    """Admin-only resources: reachable solely through the admin shortcut."""
    return False


def user_rule(principal: Principal, action: Action, subject: Subject | None) -> bool:
    """User accounts.

    Staff read any account and create, update or delete accounts that
    are not admins. Everyone may read and update their own profile.
    """
    if Role.STAFF in principal.roles:
        if action is Action.READ:
            return True
        if action in STAFF_USER_WRITES and (subject is None or not subject.is_admin_account):
            return True

    if action in READ_UPDATE:
        return subject is None or subject.is_identified_by(principal.id)

    return False


RULES: Mapping[ResourceType, Rule] = {
    ResourceType.PACKAGE: role_grants(
        {
            Role.STAFF: Grant(FULL_CONTROL),
            Role.CUSTOMER: Grant(READ_ONLY, owns=owns_customer_record),
            Role.DRIVER: Grant(READ_ONLY, owns=carried_by_driver),
        }
    ),
    ResourceType.CUSTOMER: role_grants(
        {
            Role.STAFF: Grant(FULL_CONTROL),
            Role.CUSTOMER: Grant(READ_UPDATE, owns=is_own_customer_profile),
        }
    ),
    ResourceType.LOAD: role_grants(
        {
            Role.STAFF: Grant(FULL_CONTROL),
            Role.DRIVER: Grant(READ_UPDATE, owns=is_assigned_driver),
        }
    ),
    ResourceType.INVOICE: role_grants(
        {
            Role.STAFF: Grant(FULL_CONTROL),
            Role.CUSTOMER: Grant(READ_ONLY, owns=owns_customer_record),
        }
    ),
    ResourceType.ROUTE: role_grants(
        {
            Role.STAFF: Grant(FULL_CONTROL),
            Role.DRIVER: Grant(FULL_CONTROL, owns=is_assigned_driver),
        }
    ),
    ResourceType.DELIVERY: role_grants(
        {
            Role.STAFF: Grant(FULL_CONTROL),
            Role.DRIVER: Grant(FULL_CONTROL, owns=is_assigned_driver),
        }
    ),
    ResourceType.REPORT: role_grants({Role.STAFF: Grant(FULL_CONTROL)}),
    ResourceType.USER: user_rule,
    ResourceType.SETTINGS: deny_all,
    ResourceType.AUDIT_LOG: deny_all,
}


def rule_for(resource_type: ResourceType) -> Rule:
    """Look up the rule for a resource type; unknown types deny."""
    return RULES.get(resource_type, deny_all)
