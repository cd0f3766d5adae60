"""
Summarize Audit Logs Use Case

Time-bucketed dashboard statistics over a fixed lookback window.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from src.app.services.access_control import Caller, require_admin
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import isoformat_utc, utcnow
from src.domain.entities import AuditEventType
from src.domain.error_codes import VALIDATION_ERROR
from src.libs.result import Error, Result, Return

from .dtos import AuditLogSummary, EventTypeCount, IpCount, TimeBucket

# window -> (lookback, bucket size)
SUMMARY_WINDOWS: Dict[str, Tuple[timedelta, str]] = {
    "24h": (timedelta(hours=24), "hour"),
    "7d": (timedelta(days=7), "day"),
}
DEFAULT_WINDOW = "24h"
TOP_SOURCE_IPS = 10
TOP_EVENT_TYPES = 20


def bucket_start(value: datetime, bucket: str) -> datetime:
    if bucket == "hour":
        return value.replace(minute=0, second=0, microsecond=0)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def bucket_counts(timestamps: List[datetime], bucket: str) -> List[TimeBucket]:
    """Non-empty buckets in ascending order of their start"""
    counts = Counter(bucket_start(ts, bucket) for ts in timestamps)
    return [TimeBucket(t=isoformat_utc(start), c=counts[start]) for start in sorted(counts)]


class SummarizeAuditLogsUseCase:
    """
    Use case for the admin security dashboard.

    Business Rules:
    - Caller must be an admin (checked before any read)
    - window is 24h (hourly buckets) or 7d (daily buckets), default 24h
    - failed_logins_over_time: LOGIN_FAILURE counts per bucket, ascending
    - top_source_ips: top 10 non-null IPs by LOGIN_FAILURE count
    - event_type_breakdown: top 20 event types by count, all types
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, caller: Caller, window: Optional[str] = None
    ) -> Result[AuditLogSummary]:
        denied = require_admin(caller)
        if denied:
            return Return.err(denied)

        window = window or DEFAULT_WINDOW
        if window not in SUMMARY_WINDOWS:
            return Return.err(
                Error(VALIDATION_ERROR, "window must be one of: 24h, 7d")
            )

        lookback, bucket = SUMMARY_WINDOWS[window]
        since = self.clock() - lookback

        async with self.uow:
            failures = await self.uow.audit_events.list_timestamps_since(
                AuditEventType.LOGIN_FAILURE, since
            )
            top_ips = await self.uow.audit_events.top_ip_addresses(
                AuditEventType.LOGIN_FAILURE, since, limit=TOP_SOURCE_IPS
            )
            breakdown = await self.uow.audit_events.count_by_event_type(
                since, limit=TOP_EVENT_TYPES
            )

            return Return.ok(
                AuditLogSummary(
                    window=window,
                    since=isoformat_utc(since),
                    failed_logins_over_time=bucket_counts(failures, bucket),
                    top_source_ips=[
                        IpCount(ip_address=ip, count=count) for ip, count in top_ips
                    ],
                    event_type_breakdown=[
                        EventTypeCount(event_type=AuditEventType(t).value, count=count)
                        for t, count in breakdown
                    ],
                )
            )
