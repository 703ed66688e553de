"""Pydantic schemas for user accounts."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from shipnorth.core.permissions.models import Portal


class PortalPreferences(BaseModel):
    """Portal choices stored on a user row.

    Values that are not a known portal (e.g. written by an older client)
    are read as unset.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    last_used_portal: Portal | None = None
    default_portal: Portal | None = None

    @field_validator("last_used_portal", "default_portal", mode="before")
    @classmethod
    def drop_unknown_portal(cls, v: Any) -> Any:
        if v is None:
            return None
        try:
            return Portal(v)
        except ValueError:
            return None
