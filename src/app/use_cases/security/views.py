"""
View Builders

Assemble response views from audit events plus their users and alerts,
loading related rows in batches.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_utc
from src.domain.entities import Alert, AuditEvent, User, highest_severity

from .dtos import ActivityView, AlertView, AuditLogRow, UserSummary


async def load_alerts_by_event(
    uow: UnitOfWork, events: Sequence[AuditEvent]
) -> Dict[UUID, List[Alert]]:
    alerts = await uow.alerts.list_by_audit_event_ids(e.id for e in events)
    grouped: Dict[UUID, List[Alert]] = defaultdict(list)
    for alert in alerts:
        grouped[alert.audit_event_id].append(alert)
    return grouped


async def load_users_by_id(
    uow: UnitOfWork, user_ids: Iterable[Optional[UUID]]
) -> Dict[UUID, User]:
    users = await uow.users.get_by_ids(uid for uid in user_ids if uid is not None)
    return {user.id: user for user in users}


def build_audit_log_row(
    event: AuditEvent, user: Optional[User] = None, alerts: Sequence[Alert] = ()
) -> AuditLogRow:
    severity = highest_severity(a.severity for a in alerts)
    return AuditLogRow(
        id=str(event.id),
        user_id=str(event.user_id) if event.user_id else None,
        event_type=event.event_type.value,
        ip_address=event.ip_address,
        user_agent=event.user_agent,
        geo_location=event.geo_location,
        metadata=event.event_metadata or {},
        created_at=isoformat_utc(event.created_at),
        user=UserSummary.from_entity(user) if user else None,
        alerts=[AlertView.from_entity(a) for a in alerts],
        alert_count=len(alerts),
        severity=severity.value if severity else None,
    )


async def build_audit_log_rows(
    uow: UnitOfWork, events: Sequence[AuditEvent]
) -> List[AuditLogRow]:
    alerts_by_event = await load_alerts_by_event(uow, events)
    users_by_id = await load_users_by_id(uow, {e.user_id for e in events})
    return [
        build_audit_log_row(
            event,
            user=users_by_id.get(event.user_id),
            alerts=alerts_by_event.get(event.id, []),
        )
        for event in events
    ]


async def build_activity_views(
    uow: UnitOfWork, events: Sequence[AuditEvent]
) -> List[ActivityView]:
    alerts_by_event = await load_alerts_by_event(uow, events)
    return [
        ActivityView(
            id=str(event.id),
            event_type=event.event_type.value,
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            geo_location=event.geo_location,
            metadata=event.event_metadata or {},
            created_at=isoformat_utc(event.created_at),
            alerts=[AlertView.from_entity(a) for a in alerts_by_event.get(event.id, [])],
        )
        for event in events
    ]
