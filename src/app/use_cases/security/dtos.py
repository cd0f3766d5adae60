"""
Security Use Case DTOs (Data Transfer Objects)

Query objects and response views for alerts, audit logs and summaries.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.app.use_cases.base_dto import CamelModel
from src.domain.base import isoformat_utc
from src.domain.entities import Alert, AuditEvent, User


# ============================================================================
# Query DTOs
# ============================================================================


class AuditLogQuery(BaseModel):
    """
    Raw audit log filters as received from the caller.

    event_type may hold several comma-separated values.
    """

    event_type: Optional[str] = None
    user_id: Optional[str] = None
    q: Optional[str] = None
    ip_address: Optional[str] = None
    severity: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


# ============================================================================
# Nested views
# ============================================================================


class UserSummary(CamelModel):
    """Profile fields of the account an event or alert concerns"""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserSummary":
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )


class AlertView(CamelModel):
    """Alert as returned to clients"""

    id: str
    user_id: Optional[str] = None
    audit_event_id: Optional[str] = None
    type: str
    severity: str
    status: str
    description: str
    created_at: str
    resolved_at: Optional[str] = None

    @classmethod
    def from_entity(cls, alert: Alert) -> "AlertView":
        return cls(
            id=str(alert.id),
            user_id=str(alert.user_id) if alert.user_id else None,
            audit_event_id=str(alert.audit_event_id) if alert.audit_event_id else None,
            type=alert.type.value,
            severity=alert.severity.value,
            status=alert.status.value,
            description=alert.description,
            created_at=isoformat_utc(alert.created_at),
            resolved_at=isoformat_utc(alert.resolved_at),
        )


class AuditEventSummary(CamelModel):
    """Short form of the event that triggered an alert"""

    id: str
    event_type: str
    ip_address: Optional[str] = None
    created_at: str
    metadata: Dict[str, Any] = {}

    @classmethod
    def from_entity(cls, event: AuditEvent) -> "AuditEventSummary":
        return cls(
            id=str(event.id),
            event_type=event.event_type.value,
            ip_address=event.ip_address,
            created_at=isoformat_utc(event.created_at),
            metadata=event.event_metadata or {},
        )


# ============================================================================
# Response DTOs
# ============================================================================


class AlertDetail(AlertView):
    """Alert with its account and triggering event (admin alert list)"""

    user: Optional[UserSummary] = None
    audit_event: Optional[AuditEventSummary] = None


class AuditLogRow(CamelModel):
    """
    One audit event in the admin log.

    severity is derived from the linked alerts (highest wins) and is None
    when the event has no alerts.
    """

    id: str
    user_id: Optional[str] = None
    event_type: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    geo_location: Optional[str] = None
    metadata: Dict[str, Any] = {}
    created_at: str
    user: Optional[UserSummary] = None
    alerts: List[AlertView] = []
    alert_count: int = 0
    severity: Optional[str] = None


class AuditLogPage(CamelModel):
    """Paginated admin audit log"""

    rows: List[AuditLogRow]
    page: int
    limit: int
    total: int
    total_pages: int


class TimeBucket(CamelModel):
    """Count of events in the bucket starting at t"""

    t: str
    c: int


class IpCount(CamelModel):
    ip_address: str
    count: int


class EventTypeCount(CamelModel):
    event_type: str
    count: int


class AuditLogSummary(CamelModel):
    """Dashboard aggregates over a lookback window"""

    window: str
    since: str
    failed_logins_over_time: List[TimeBucket]
    top_source_ips: List[IpCount]
    event_type_breakdown: List[EventTypeCount]


class ActivityView(CamelModel):
    """One of the caller's own login/MFA events with its alerts"""

    id: str
    event_type: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    geo_location: Optional[str] = None
    metadata: Dict[str, Any] = {}
    created_at: str
    alerts: List[AlertView] = []


class MySecuritySummary(CamelModel):
    """Self-service security overview"""

    last_login_at: Optional[str] = None
    failed_logins_last7d: int = Field(alias="failedLoginsLast7d")
    open_alerts_count: int
