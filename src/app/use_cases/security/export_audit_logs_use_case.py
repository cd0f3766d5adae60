"""
Export Audit Logs Use Case

CSV export of the filtered audit log.
"""

import csv
import io
import json
from typing import Iterable

from config import ApplicationConfig
from src.app.services.access_control import Caller, require_admin
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return

from .audit_log_filter import build_audit_event_filter
from .dtos import AuditLogQuery, AuditLogRow
from .views import build_audit_log_rows

CSV_HEADER = [
    "createdAt",
    "eventType",
    "userEmail",
    "ipAddress",
    "userAgent",
    "geoLocation",
    "alertCount",
    "alertTypes",
    "metadata",
]


def render_csv(rows: Iterable[AuditLogRow]) -> str:
    """Every field is double-quoted with inner quotes doubled; None becomes empty."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for row in rows:
        writer.writerow(
            [
                row.created_at,
                row.event_type,
                row.user.email if row.user else None,
                row.ip_address,
                row.user_agent,
                row.geo_location,
                row.alert_count,
                ";".join(a.type for a in row.alerts),
                json.dumps(row.metadata),
            ]
        )

    return output.getvalue()


class ExportAuditLogsUseCase:
    """
    Use case for exporting audit events as CSV.

    Business Rules:
    - Caller must be an admin (checked before any read)
    - Same filters as the audit log listing, no pagination
    - At most AUDIT_EXPORT_MAX_ROWS rows, the most recent ones, newest first
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, caller: Caller, query: AuditLogQuery) -> Result[str]:
        denied = require_admin(caller)
        if denied:
            return Return.err(denied)

        criteria = build_audit_event_filter(query)
        if criteria is None:
            return Return.ok(render_csv([]))

        async with self.uow:
            events = await self.uow.audit_events.search(
                criteria, offset=0, limit=ApplicationConfig.AUDIT_EXPORT_MAX_ROWS
            )
            rows = await build_audit_log_rows(self.uow, events)

            return Return.ok(render_csv(rows))
