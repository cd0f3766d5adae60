"""
Update Alert Status Use Case

Admin triage transition of an alert (acknowledge, resolve, reopen).
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from src.app.services.access_control import Caller, require_admin
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AlertStatus, parse_enum
from src.domain.error_codes import NOT_FOUND, VALIDATION_ERROR
from src.libs.result import Error, Result, Return

from .dtos import AlertView

logger = logging.getLogger(__name__)


class UpdateAlertStatusUseCase:
    """
    Use case for moving an alert to a new status.

    Business Rules:
    - Caller must be an admin, checked before the store is touched
    - status must be one of OPEN, ACKNOWLEDGED, RESOLVED
    - resolved_at is stamped when moving to RESOLVED and cleared otherwise
    - Moving an alert to the status it already has changes nothing
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, caller: Caller, alert_id: str, status: Optional[str]
    ) -> Result[AlertView]:
        """
        Execute update alert status use case.

        Args:
            caller: Identity from the access token
            alert_id: Alert ID from the path
            status: Requested status

        Returns:
            Result with the updated AlertView, or Error
        """
        denied = require_admin(caller)
        if denied:
            return Return.err(denied)

        if not status:
            return Return.err(Error(VALIDATION_ERROR, "Status is required"))

        new_status = parse_enum(AlertStatus, status)
        if new_status is None:
            return Return.err(Error(VALIDATION_ERROR, "Invalid status value"))

        try:
            alert_uuid = UUID(alert_id)
        except ValueError:
            return Return.err(Error(NOT_FOUND, "Alert not found"))

        async with self.uow:
            alert = await self.uow.alerts.get_by_id(alert_uuid)
            if alert is None:
                return Return.err(Error(NOT_FOUND, "Alert not found"))

            previous = alert.status
            if alert.transition_to(new_status, self.clock()):
                alert = await self.uow.alerts.update(alert)
                await self.uow.commit()
                logger.info(
                    f"Alert {alert.id} moved from {previous.value} to {new_status.value} "
                    f"by {caller.user_id}"
                )

            return Return.ok(AlertView.from_entity(alert))
