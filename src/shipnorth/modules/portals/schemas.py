"""Pydantic schemas for portal selection."""

from pydantic import BaseModel

from shipnorth.core.permissions.models import Portal


class PortalChoice(BaseModel):
    """Request body naming a portal to record as last used or default."""

    portal: Portal
