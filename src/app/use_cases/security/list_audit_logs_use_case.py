"""
List Audit Logs Use Case

Admin view of the audit log with filtering and page-number pagination.
"""

import math
from typing import Optional

from config import ApplicationConfig
from src.app.services.access_control import Caller, require_admin
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return

from .audit_log_filter import build_audit_event_filter
from .dtos import AuditLogPage, AuditLogQuery
from .views import build_audit_log_rows


def clamp_page_size(limit: Optional[int]) -> int:
    if limit is None:
        return ApplicationConfig.AUDIT_PAGE_SIZE_DEFAULT
    return min(max(limit, 1), ApplicationConfig.AUDIT_PAGE_SIZE_MAX)


class ListAuditLogsUseCase:
    """
    Use case for listing audit events.

    Business Rules:
    - Caller must be an admin (checked before any read)
    - Filters are combined with AND; event types within the filter with OR
    - Pages are 1-indexed; page size is clamped to [1, AUDIT_PAGE_SIZE_MAX]
    - total_pages = ceil(total / limit); pages past the end are empty
    - Results ordered by newest first
    - Each row carries its alerts and the highest alert severity
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        caller: Caller,
        query: AuditLogQuery,
        page: Optional[int] = 1,
        limit: Optional[int] = None,
    ) -> Result[AuditLogPage]:
        denied = require_admin(caller)
        if denied:
            return Return.err(denied)

        page = max(page or 1, 1)
        limit = clamp_page_size(limit)

        criteria = build_audit_event_filter(query)
        if criteria is None:
            return Return.ok(
                AuditLogPage(rows=[], page=page, limit=limit, total=0, total_pages=0)
            )

        async with self.uow:
            total = await self.uow.audit_events.count(criteria)
            offset = (page - 1) * limit
            rows = []
            if offset < total:
                events = await self.uow.audit_events.search(
                    criteria, offset=offset, limit=limit
                )
                rows = await build_audit_log_rows(self.uow, events)

            return Return.ok(
                AuditLogPage(
                    rows=rows,
                    page=page,
                    limit=limit,
                    total=total,
                    total_pages=math.ceil(total / limit),
                )
            )
