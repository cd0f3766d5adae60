"""
Audit Log Filter Parsing

Turns raw audit log query values into repository criteria.
Filtering is permissive: values that cannot match any stored event make the
whole query match nothing instead of failing the request.
"""

from typing import Optional
from uuid import UUID

from src.app.repositories.audit_event_repository import AuditEventFilter
from src.domain.base import to_naive_utc
from src.domain.entities import AlertSeverity, AuditEventType, parse_enum

from .dtos import AuditLogQuery


def build_audit_event_filter(query: AuditLogQuery) -> Optional[AuditEventFilter]:
    """
    Build repository criteria from raw query values.

    Returns None when the query can match no event (unknown event types only,
    unknown severity or a malformed user id).
    """
    criteria = AuditEventFilter()

    if query.event_type:
        tokens = [t.strip() for t in query.event_type.split(",") if t.strip()]
        if tokens:
            event_types = [parse_enum(AuditEventType, t) for t in tokens]
            event_types = [t for t in event_types if t is not None]
            if not event_types:
                return None
            criteria.event_types = list(dict.fromkeys(event_types))

    if query.user_id:
        try:
            criteria.user_id = UUID(query.user_id.strip())
        except ValueError:
            return None

    if query.severity:
        severity = parse_enum(AlertSeverity, query.severity)
        if severity is None:
            return None
        criteria.severity = severity

    if query.q and query.q.strip():
        criteria.search = query.q.strip()

    if query.ip_address and query.ip_address.strip():
        criteria.ip_address = query.ip_address.strip()

    if query.date_from is not None:
        criteria.created_from = to_naive_utc(query.date_from)

    if query.date_to is not None:
        criteria.created_to = to_naive_utc(query.date_to)

    return criteria
