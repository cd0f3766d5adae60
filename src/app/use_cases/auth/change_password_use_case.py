"""
Change Password Use Case

Replaces the caller's password after checking the current one.
"""

import logging
from typing import Optional

import bcrypt

from src.app.services.access_control import Caller
from src.app.services.event_recorder import RequestContext
from src.app.services.security_monitor import SecurityMonitor
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEventType
from src.domain.error_codes import NOT_FOUND, VALIDATION_ERROR
from src.libs.result import Error, Result, Return
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class ChangePasswordUseCase:
    """
    Use case for changing the caller's password.

    Business Rules:
    - Current password must match
    - New password must be at least 8 characters and differ from the current one
    - The new hash is committed before PASSWORD_CHANGE is recorded
    """

    def __init__(self, uow: UnitOfWork, monitor: Optional[SecurityMonitor] = None):
        self.uow = uow
        self.monitor = monitor or SecurityMonitor(uow)

    async def execute(
        self,
        caller: Caller,
        current_password: str,
        new_password: str,
        context: RequestContext,
    ) -> Result[MessageResponse]:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(VALIDATION_ERROR, "Password must be at least 8 characters")
            )
        if new_password == current_password:
            return Return.err(
                Error(VALIDATION_ERROR, "New password must differ from the current one")
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(caller.user_id)
            if user is None:
                return Return.err(Error(NOT_FOUND, "User not found"))

            if not bcrypt.checkpw(current_password.encode(), user.password_hash.encode()):
                return Return.err(
                    Error(VALIDATION_ERROR, "Current password is incorrect")
                )

            user.password_hash = bcrypt.hashpw(
                new_password.encode(), bcrypt.gensalt(12)
            ).decode()
            await self.uow.users.update(user)
            await self.uow.commit()
            logger.info(f"Password changed for user {caller.user_id}")

            await self.monitor.track(
                AuditEventType.PASSWORD_CHANGE, context, user_id=caller.user_id
            )

        return Return.ok(MessageResponse(status="success", message="Password updated"))
