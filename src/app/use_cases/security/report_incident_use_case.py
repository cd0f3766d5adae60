"""
Report Incident Use Case

User-initiated alert about suspicious activity on their own account.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.access_control import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Alert, AlertSeverity, AlertStatus, AlertType
from src.domain.error_codes import NOT_FOUND
from src.libs.result import Error, Result, Return

from .dtos import AlertView

logger = logging.getLogger(__name__)

DEFAULT_REPORT_DESCRIPTION = (
    "User reported suspicious activity from account security page."
)


class ReportIncidentUseCase:
    """
    Use case for reporting suspicious activity.

    Business Rules:
    - Always creates a SUSPICIOUS_ACTIVITY alert, HIGH severity, OPEN
    - activity_id, when given, must be an event owned by the caller;
      other users' events are reported as not found
    - A blank note falls back to a fixed description
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        caller: Caller,
        activity_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Result[AlertView]:
        not_found = Error(
            NOT_FOUND, "Activity not found or does not belong to this user"
        )

        async with self.uow:
            audit_event_id = None
            if activity_id:
                try:
                    event_uuid = UUID(activity_id)
                except ValueError:
                    return Return.err(not_found)

                event = await self.uow.audit_events.get_by_id_for_user(
                    event_uuid, caller.user_id
                )
                if event is None:
                    return Return.err(not_found)
                audit_event_id = event.id

            alert = Alert(
                user_id=caller.user_id,
                audit_event_id=audit_event_id,
                type=AlertType.SUSPICIOUS_ACTIVITY,
                severity=AlertSeverity.HIGH,
                status=AlertStatus.OPEN,
                description=(note or "").strip() or DEFAULT_REPORT_DESCRIPTION,
            )
            alert = await self.uow.alerts.create(alert)
            await self.uow.commit()

            logger.warning(f"User {caller.user_id} reported suspicious activity (alert {alert.id})")
            return Return.ok(AlertView.from_entity(alert))
