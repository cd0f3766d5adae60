"""
Security Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserRole,
    AuditEventType,
    AlertType,
    AlertSeverity,
    AlertStatus,
    LOGIN_ACTIVITY_TYPES,
    highest_severity,
    parse_enum,
)

# Export all entities
from .user import User
from .audit_event import AuditEvent, ImmutableAuditEventError
from .alert import Alert

__all__ = [
    # Enums
    "UserRole",
    "AuditEventType",
    "AlertType",
    "AlertSeverity",
    "AlertStatus",
    "LOGIN_ACTIVITY_TYPES",
    "highest_severity",
    "parse_enum",
    # Entities
    "User",
    "AuditEvent",
    "ImmutableAuditEventError",
    "Alert",
]
