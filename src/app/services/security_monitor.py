"""
Security Monitor

Records a login-flow event and runs detection against it in one call.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.detection_engine import (
    DetectionContext,
    DetectionEngine,
    DetectionOutcome,
)
from src.app.services.event_recorder import EventRecorder, RequestContext
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEventType


class SecurityMonitor:
    """
    Facade used by the authentication use cases.

    Neither step raises: the outcome of the authentication attempt is
    decided by the caller and never depends on monitoring succeeding.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        recorder: Optional[EventRecorder] = None,
        engine: Optional[DetectionEngine] = None,
    ):
        self.recorder = recorder or EventRecorder(uow)
        self.engine = engine or DetectionEngine(uow)

    async def track(
        self,
        event_type: AuditEventType,
        context: RequestContext,
        user_id: Optional[UUID] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> DetectionOutcome:
        latest = await self.recorder.record(
            event_type, context, user_id=user_id, metadata=metadata
        )
        return await self.engine.evaluate(
            DetectionContext(
                event_type=event_type,
                user_id=user_id,
                ip_address=context.ip_address,
                latest_event=latest,
            )
        )
