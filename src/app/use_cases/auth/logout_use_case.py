"""
Logout Use Case

Records the end of a session. Access tokens are stateless, so there is
nothing to revoke server-side.
"""

from typing import Optional

from src.app.services.access_control import Caller
from src.app.services.event_recorder import RequestContext
from src.app.services.security_monitor import SecurityMonitor
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEventType
from src.libs.result import Result, Return
from .dtos import MessageResponse


class LogoutUseCase:
    def __init__(self, uow: UnitOfWork, monitor: Optional[SecurityMonitor] = None):
        self.uow = uow
        self.monitor = monitor or SecurityMonitor(uow)

    async def execute(
        self, caller: Caller, context: RequestContext
    ) -> Result[MessageResponse]:
        async with self.uow:
            await self.monitor.track(
                AuditEventType.LOGOUT, context, user_id=caller.user_id
            )

        return Return.ok(MessageResponse(status="success", message="Logged out"))
