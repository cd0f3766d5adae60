"""
Event Recorder

Best-effort writer for the append-only audit log.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, AuditEventType

logger = logging.getLogger(__name__)


class RequestContext(BaseModel):
    """Network provenance of the request that triggered an event"""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    geo_location: Optional[str] = None


class EventRecorder:
    """
    Appends one immutable AuditEvent per authentication-relevant action.

    Recording is a side channel of the authentication flow: a storage
    failure is logged and reported as None, never raised. Must be used
    inside an entered unit of work; each event is committed on its own so
    that detection rules counting from the store see it.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record(
        self,
        event_type: AuditEventType,
        context: RequestContext,
        user_id: Optional[UUID] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditEvent]:
        audit = AuditEvent(
            user_id=user_id,
            event_type=event_type,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            geo_location=context.geo_location,
            event_metadata=metadata or {},
        )
        try:
            created = await self.uow.audit_events.create(audit)
            await self.uow.commit()
        except Exception:
            logger.exception(f"Failed to write audit event {event_type.value}")
            await self._discard()
            return None

        return created

    async def _discard(self):
        try:
            await self.uow.rollback()
        except Exception:
            logger.warning("Rollback after failed audit write failed as well")
