"""
List Alerts Use Case

Admin view of security alerts with their account and triggering event.
"""

from typing import List, Optional

from src.app.services.access_control import Caller, require_admin
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AlertSeverity, AlertStatus, AlertType, parse_enum
from src.libs.result import Result, Return

from .dtos import AlertDetail, AlertView, AuditEventSummary, UserSummary
from .views import load_users_by_id


class ListAlertsUseCase:
    """
    Use case for listing alerts.

    Business Rules:
    - Caller must be an admin (checked before any read)
    - status, severity and type filters are optional and combined with AND
    - An unknown filter value matches nothing (empty list, not an error)
    - Results ordered by newest first
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        caller: Caller,
        status: Optional[str] = None,
        severity: Optional[str] = None,
        alert_type: Optional[str] = None,
    ) -> Result[List[AlertDetail]]:
        denied = require_admin(caller)
        if denied:
            return Return.err(denied)

        parsed_status = parse_enum(AlertStatus, status) if status else None
        parsed_severity = parse_enum(AlertSeverity, severity) if severity else None
        parsed_type = parse_enum(AlertType, alert_type) if alert_type else None

        if (
            (status and parsed_status is None)
            or (severity and parsed_severity is None)
            or (alert_type and parsed_type is None)
        ):
            return Return.ok([])

        async with self.uow:
            alerts = await self.uow.alerts.list(
                status=parsed_status, severity=parsed_severity, alert_type=parsed_type
            )

            users_by_id = await load_users_by_id(self.uow, {a.user_id for a in alerts})
            events = await self.uow.audit_events.get_by_ids(
                {a.audit_event_id for a in alerts if a.audit_event_id}
            )
            events_by_id = {e.id: e for e in events}

            details = []
            for alert in alerts:
                user = users_by_id.get(alert.user_id)
                event = events_by_id.get(alert.audit_event_id)
                details.append(
                    AlertDetail(
                        **AlertView.from_entity(alert).model_dump(),
                        user=UserSummary.from_entity(user) if user else None,
                        audit_event=AuditEventSummary.from_entity(event) if event else None,
                    )
                )

            return Return.ok(details)
