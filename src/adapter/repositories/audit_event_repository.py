from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import exists, func, or_
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import (
    AuditEventFilter,
    IAuditEventRepository,
)
from src.domain.entities import Alert, AuditEvent, AuditEventType, User


def _apply_filter(stmt, criteria: AuditEventFilter):
    """Narrow a statement over audit_events by every field set on criteria."""
    if criteria.event_types is not None:
        stmt = stmt.where(col(AuditEvent.event_type).in_(criteria.event_types))

    if criteria.user_id is not None:
        stmt = stmt.where(AuditEvent.user_id == criteria.user_id)

    if criteria.ip_address:
        stmt = stmt.where(
            col(AuditEvent.ip_address).contains(criteria.ip_address, autoescape=True)
        )

    if criteria.search:
        stmt = stmt.outerjoin(User, col(User.id) == col(AuditEvent.user_id)).where(
            or_(
                col(User.email).icontains(criteria.search, autoescape=True),
                col(User.first_name).icontains(criteria.search, autoescape=True),
                col(User.last_name).icontains(criteria.search, autoescape=True),
            )
        )

    if criteria.created_from is not None:
        stmt = stmt.where(col(AuditEvent.created_at) >= criteria.created_from)

    if criteria.created_to is not None:
        stmt = stmt.where(col(AuditEvent.created_at) <= criteria.created_to)

    if criteria.severity is not None:
        stmt = stmt.where(
            exists().where(
                col(Alert.audit_event_id) == col(AuditEvent.id),
                col(Alert.severity) == criteria.severity,
            )
        )

    return stmt


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def get_by_ids(self, event_ids: Iterable[UUID]) -> List[AuditEvent]:
        """Get all events whose ID is in event_ids"""
        ids = set(event_ids)
        if not ids:
            return []
        stmt = select(AuditEvent).where(col(AuditEvent.id).in_(ids))
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_id_for_user(
        self, event_id: UUID, user_id: UUID
    ) -> Optional[AuditEvent]:
        """Get an event only if it belongs to user_id"""
        stmt = select(AuditEvent).where(
            AuditEvent.id == event_id, AuditEvent.user_id == user_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def count_since(
        self,
        event_type: AuditEventType,
        since: datetime,
        user_id: Optional[UUID] = None,
        ip_address: Optional[str] = None,
    ) -> int:
        """
        Count events of one type in [since, now].

        user_id and ip_address narrow the count independently (AND), so a
        known user behind a known IP is only matched on both.
        """
        stmt = select(func.count(col(AuditEvent.id))).where(
            AuditEvent.event_type == event_type,
            col(AuditEvent.created_at) >= since,
        )
        if user_id is not None:
            stmt = stmt.where(AuditEvent.user_id == user_id)
        if ip_address is not None:
            stmt = stmt.where(AuditEvent.ip_address == ip_address)

        result = await self.session.exec(stmt)
        return result.one()

    async def search(
        self, criteria: AuditEventFilter, offset: int = 0, limit: int = 50
    ) -> List[AuditEvent]:
        """Events matching criteria, newest first"""
        stmt = _apply_filter(select(AuditEvent), criteria)
        stmt = (
            stmt.order_by(col(AuditEvent.created_at).desc(), col(AuditEvent.id).desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(self, criteria: AuditEventFilter) -> int:
        """Number of events matching criteria"""
        stmt = _apply_filter(
            select(func.count(col(AuditEvent.id))).select_from(AuditEvent), criteria
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def list_recent_for_user(
        self, user_id: UUID, event_types: Iterable[AuditEventType], limit: int = 20
    ) -> List[AuditEvent]:
        """Most recent events of the given types owned by user_id, newest first"""
        stmt = (
            select(AuditEvent)
            .where(
                AuditEvent.user_id == user_id,
                col(AuditEvent.event_type).in_(list(event_types)),
            )
            .order_by(col(AuditEvent.created_at).desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_latest_for_user(
        self, user_id: UUID, event_type: AuditEventType
    ) -> Optional[AuditEvent]:
        """Newest event of event_type owned by user_id"""
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.user_id == user_id, AuditEvent.event_type == event_type)
            .order_by(col(AuditEvent.created_at).desc())
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def list_timestamps_since(
        self, event_type: AuditEventType, since: datetime
    ) -> List[datetime]:
        """created_at of every event of event_type since the given time, ascending"""
        stmt = (
            select(AuditEvent.created_at)
            .where(
                AuditEvent.event_type == event_type,
                col(AuditEvent.created_at) >= since,
            )
            .order_by(col(AuditEvent.created_at).asc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def top_ip_addresses(
        self, event_type: AuditEventType, since: datetime, limit: int = 10
    ) -> List[Tuple[str, int]]:
        """(ip_address, count) pairs for non-null IPs, highest count first"""
        total = func.count(col(AuditEvent.id))
        stmt = (
            select(AuditEvent.ip_address, total)
            .where(
                AuditEvent.event_type == event_type,
                col(AuditEvent.created_at) >= since,
                col(AuditEvent.ip_address).is_not(None),
            )
            .group_by(col(AuditEvent.ip_address))
            .order_by(total.desc(), col(AuditEvent.ip_address).asc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return [(ip, count) for ip, count in result.all()]

    async def count_by_event_type(
        self, since: datetime, limit: int = 20
    ) -> List[Tuple[AuditEventType, int]]:
        """(event_type, count) pairs across all types, highest count first"""
        total = func.count(col(AuditEvent.id))
        stmt = (
            select(AuditEvent.event_type, total)
            .where(col(AuditEvent.created_at) >= since)
            .group_by(col(AuditEvent.event_type))
            .order_by(total.desc(), col(AuditEvent.event_type).asc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return [(event_type, count) for event_type, count in result.all()]
