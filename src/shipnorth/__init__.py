"""Shipnorth access control: permission evaluation, portals and audit trail."""

__version__ = "0.1.0"
