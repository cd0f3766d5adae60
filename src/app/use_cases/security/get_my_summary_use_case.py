"""
Get My Summary Use Case

Self-service security overview for the calling user.
"""

from datetime import datetime, timedelta
from typing import Callable

from src.app.services.access_control import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_utc, utcnow
from src.domain.entities import AlertStatus, AuditEventType
from src.libs.result import Result, Return

from .dtos import MySecuritySummary


class GetMySummaryUseCase:
    """
    Use case for the caller's own security summary.

    Business Rules:
    - last_login_at: newest LOGIN_SUCCESS of the caller, or None
    - failed_logins_last7d: caller's LOGIN_FAILURE events in the trailing 7 days
    - open_alerts_count: caller's alerts in OPEN status
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, caller: Caller) -> Result[MySecuritySummary]:
        async with self.uow:
            last_login = await self.uow.audit_events.get_latest_for_user(
                caller.user_id, AuditEventType.LOGIN_SUCCESS
            )
            failed_logins = await self.uow.audit_events.count_since(
                AuditEventType.LOGIN_FAILURE,
                since=self.clock() - timedelta(days=7),
                user_id=caller.user_id,
            )
            open_alerts = await self.uow.alerts.count_for_user(
                caller.user_id, AlertStatus.OPEN
            )

            return Return.ok(
                MySecuritySummary(
                    last_login_at=isoformat_utc(last_login.created_at) if last_login else None,
                    failed_logins_last7d=failed_logins,
                    open_alerts_count=open_alerts,
                )
            )
