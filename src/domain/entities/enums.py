"""
Security Domain Enums

Closed sets of tagged values used across domain entities.
Raw strings from requests are parsed into these at the API/use case boundary.
"""

from enum import Enum
from typing import Iterable, Optional


class UserRole(str, Enum):
    """Account role carried in the access token"""

    USER = "USER"
    ADMIN = "ADMIN"


class AuditEventType(str, Enum):
    """Authentication-relevant action recorded in the audit log"""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILURE = "LOGIN_FAILURE"
    LOGOUT = "LOGOUT"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    MFA_CHALLENGE = "MFA_CHALLENGE"
    MFA_SUCCESS = "MFA_SUCCESS"
    MFA_FAILURE = "MFA_FAILURE"


# Event types shown to end users on their own activity page
LOGIN_ACTIVITY_TYPES = (
    AuditEventType.LOGIN_SUCCESS,
    AuditEventType.LOGIN_FAILURE,
    AuditEventType.MFA_CHALLENGE,
    AuditEventType.MFA_SUCCESS,
    AuditEventType.MFA_FAILURE,
)


class AlertType(str, Enum):
    """Kind of incident an alert represents"""

    BRUTE_FORCE = "BRUTE_FORCE"
    NEW_DEVICE = "NEW_DEVICE"
    IMPOSSIBLE_TRAVEL = "IMPOSSIBLE_TRAVEL"
    MULTI_ACCOUNT_FAILURE = "MULTI_ACCOUNT_FAILURE"
    SUSPICIOUS_MFA = "SUSPICIOUS_MFA"
    SUSPICIOUS_ACTIVITY = "SUSPICIOUS_ACTIVITY"
    OTHER = "OTHER"


class AlertSeverity(str, Enum):
    """Ordinal risk tag of an alert"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    AlertSeverity.LOW: 1,
    AlertSeverity.MEDIUM: 2,
    AlertSeverity.HIGH: 3,
}


def highest_severity(severities: Iterable[AlertSeverity]) -> Optional[AlertSeverity]:
    """Worst severity among the given ones, None for an empty input."""
    highest = None
    for severity in severities:
        if highest is None or severity.rank > highest.rank:
            highest = severity
    return highest


class AlertStatus(str, Enum):
    """Triage state of an alert"""

    OPEN = "OPEN"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    RESOLVED = "RESOLVED"


def parse_enum(enum_cls, raw: Optional[str]):
    """Return the enum member named by raw, or None if raw is not a member."""
    if raw is None:
        return None
    try:
        return enum_cls(raw.strip())
    except ValueError:
        return None
