"""Audit review module."""

from shipnorth.modules.audit.routes import router


__all__ = ["router"]
