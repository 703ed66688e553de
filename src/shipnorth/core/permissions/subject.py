"""Read-only view of the record a permission check is about.

Ownership rules only need a handful of fields from a subject, so
records are narrowed into a Subject before any rule sees them. The
view is built from mappings (decoded JSON, database rows) or from
attribute-bearing objects (ORM models, pydantic models), and each
relationship is read under both the camelCase and snake_case key
that historical records use.

Building a Subject never raises. Missing or malformed fields yield
empty values, which every ownership rule treats as "no match".
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


CUSTOMER_KEYS = ("customerId", "customer_id")
DRIVER_KEYS = ("driverId", "driver_id")
LOADS_KEYS = ("loads",)
ROLE_KEYS = ("role",)
ROLES_KEYS = ("roles",)


def _read(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    try:
        return getattr(record, key, None)
    except Exception:  # noqa: BLE001 - lazy ORM attributes may fail to load
        return None


def _identifier(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, Mapping | list | tuple | set):
        return None
    return str(value)


def _identifiers(record: Any, keys: Iterable[str]) -> frozenset[str]:
    found = (_identifier(_read(record, key)) for key in keys)
    return frozenset(value for value in found if value is not None)


def _items(value: Any) -> list[Any]:
    if value is None or isinstance(value, str | bytes | Mapping):
        return []
    try:
        return list(value)
    except TypeError:
        return []


def _role_names(record: Any) -> frozenset[str]:
    names: set[str] = set()
    for key in ROLE_KEYS:
        role = _read(record, key)
        if isinstance(role, str):
            names.add(role)
    for key in ROLES_KEYS:
        for role in _items(_read(record, key)):
            # Role rows expose a name; plain tags (and StrEnums) are strings
            name = role if isinstance(role, str) else getattr(role, "name", None)
            if isinstance(name, str):
                names.add(name)
    return frozenset(names)


@dataclass(frozen=True, slots=True)
class Subject:
    """The ownership-relevant fields of a concrete resource instance.

    Attributes:
        id: The record's own identifier
        customer_ids: Owning customer references found on the record
        driver_ids: Assigned driver references found on the record
        load_driver_ids: Drivers assigned to the record's nested loads
        roles: Role names carried by the record (User records only)
    """

    id: str | None = None
    customer_ids: frozenset[str] = frozenset()
    driver_ids: frozenset[str] = frozenset()
    load_driver_ids: frozenset[str] = frozenset()
    roles: frozenset[str] = frozenset()

    @classmethod
    def from_record(cls, record: Any) -> "Subject":
        """Narrow an arbitrary record into a Subject."""
        if isinstance(record, Subject):
            return record
        if record is None:
            return cls()

        load_drivers: set[str] = set()
        for key in LOADS_KEYS:
            for load in _items(_read(record, key)):
                load_drivers.update(_identifiers(load, DRIVER_KEYS))

        return cls(
            id=_identifier(_read(record, "id")),
            customer_ids=_identifiers(record, CUSTOMER_KEYS),
            driver_ids=_identifiers(record, DRIVER_KEYS),
            load_driver_ids=frozenset(load_drivers),
            roles=_role_names(record),
        )

    def owned_by_customer(self, customer_id: str | None) -> bool:
        return customer_id is not None and customer_id in self.customer_ids

    def assigned_to_driver(self, driver_id: str | None) -> bool:
        return driver_id is not None and driver_id in self.driver_ids

    def has_load_for_driver(self, driver_id: str | None) -> bool:
        return driver_id is not None and driver_id in self.load_driver_ids

    def is_identified_by(self, identifier: str | None) -> bool:
        return identifier is not None and self.id == identifier

    @property
    def is_admin_account(self) -> bool:
        return "admin" in self.roles


def as_subject(record: Any) -> Subject | None:
    """Return None for "no subject", otherwise a Subject view of the record."""
    if record is None:
        return None
    return Subject.from_record(record)
