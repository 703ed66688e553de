"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_IPV6_LENGTH = 45
MAX_ACTOR_ID_LENGTH = 255
MAX_AUDIT_ACTION_LENGTH = 50
MAX_AUDIT_RESOURCE_LENGTH = 50
MAX_RESOURCE_ID_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 20
MAX_PORTAL_NAME_LENGTH = 20

# Audit trail
DENIED_REASON = "Permission denied"
DENIED_MESSAGE = "You do not have permission to perform this action"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
