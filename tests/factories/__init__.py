"""Test factories."""

from tests.factories.audit import RecordingAuditService
from tests.factories.principal import PrincipalFactory


__all__ = ["PrincipalFactory", "RecordingAuditService"]
