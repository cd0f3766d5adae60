"""
List My Activities Use Case

A user's own recent login and MFA events.
"""

from typing import List

from src.app.services.access_control import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import LOGIN_ACTIVITY_TYPES
from src.libs.result import Result, Return

from .dtos import ActivityView
from .views import build_activity_views

RECENT_ACTIVITY_LIMIT = 20


class ListMyActivitiesUseCase:
    """
    Use case for the account security page.

    Business Rules:
    - Only events owned by the caller are returned
    - Login and MFA event types only, most recent 20, newest first
    - Each event carries its alerts, newest first
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, caller: Caller) -> Result[List[ActivityView]]:
        async with self.uow:
            events = await self.uow.audit_events.list_recent_for_user(
                caller.user_id, LOGIN_ACTIVITY_TYPES, limit=RECENT_ACTIVITY_LIMIT
            )
            return Return.ok(await build_activity_views(self.uow, events))
