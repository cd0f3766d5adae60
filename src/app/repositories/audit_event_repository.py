from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import AlertSeverity, AuditEvent, AuditEventType


class AuditEventFilter(BaseModel):
    """
    Criteria for searching the audit log. All set fields are combined with AND.

    - event_types: membership in the set (OR within the set)
    - ip_address: substring match
    - search: case-insensitive match on the owning user's email/first/last name
    - severity: at least one linked alert has this severity
    """

    event_types: Optional[List[AuditEventType]] = None
    user_id: Optional[UUID] = None
    ip_address: Optional[str] = None
    search: Optional[str] = None
    severity: Optional[AlertSeverity] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer (append-only)"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        pass

    @abstractmethod
    async def get_by_ids(self, event_ids: Iterable[UUID]) -> List[AuditEvent]:
        """Get all events whose ID is in event_ids"""
        pass

    @abstractmethod
    async def get_by_id_for_user(
        self, event_id: UUID, user_id: UUID
    ) -> Optional[AuditEvent]:
        """Get an event only if it belongs to user_id"""
        pass

    @abstractmethod
    async def count_since(
        self,
        event_type: AuditEventType,
        since: datetime,
        user_id: Optional[UUID] = None,
        ip_address: Optional[str] = None,
    ) -> int:
        """Count events of one type created at or after since, narrowed by user/IP when given"""
        pass

    @abstractmethod
    async def search(
        self, criteria: AuditEventFilter, offset: int = 0, limit: int = 50
    ) -> List[AuditEvent]:
        """Events matching criteria, newest first"""
        pass

    @abstractmethod
    async def count(self, criteria: AuditEventFilter) -> int:
        """Number of events matching criteria"""
        pass

    @abstractmethod
    async def list_recent_for_user(
        self, user_id: UUID, event_types: Iterable[AuditEventType], limit: int = 20
    ) -> List[AuditEvent]:
        """Most recent events of the given types owned by user_id, newest first"""
        pass

    @abstractmethod
    async def get_latest_for_user(
        self, user_id: UUID, event_type: AuditEventType
    ) -> Optional[AuditEvent]:
        """Newest event of event_type owned by user_id"""
        pass

    @abstractmethod
    async def list_timestamps_since(
        self, event_type: AuditEventType, since: datetime
    ) -> List[datetime]:
        """created_at of every event of event_type since the given time, ascending"""
        pass

    @abstractmethod
    async def top_ip_addresses(
        self, event_type: AuditEventType, since: datetime, limit: int = 10
    ) -> List[Tuple[str, int]]:
        """(ip_address, count) pairs for non-null IPs, highest count first"""
        pass

    @abstractmethod
    async def count_by_event_type(
        self, since: datetime, limit: int = 20
    ) -> List[Tuple[AuditEventType, int]]:
        """(event_type, count) pairs across all types, highest count first"""
        pass
