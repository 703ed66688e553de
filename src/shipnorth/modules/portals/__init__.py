"""Portal selection module."""

from shipnorth.modules.portals.routes import router


__all__ = ["router"]
