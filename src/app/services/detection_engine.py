"""
Detection Engine

Rule-based evaluation of login-flow events against recent audit history.
Each rule is an independent unit keyed by the event types that trigger it;
new rules are added by appending to the rule list, not by editing existing ones.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable, FrozenSet, List, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from config import ApplicationConfig
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import (
    Alert,
    AlertSeverity,
    AlertType,
    AuditEvent,
    AuditEventType,
)

logger = logging.getLogger(__name__)


class DetectionContext(BaseModel):
    """What the engine knows about the event that was just recorded"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    event_type: AuditEventType
    user_id: Optional[UUID] = None
    ip_address: Optional[str] = None
    latest_event: Optional[AuditEvent] = None  # None when recording failed


class DetectionOutcome(BaseModel):
    """Alerts raised while evaluating one event"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    alert_created: bool = False
    alerts: List[Alert] = []


class DetectionRule(ABC):
    """A predicate over recent history plus the alert it raises"""

    name: str = "rule"
    triggers: FrozenSet[AuditEventType] = frozenset()

    def applies_to(self, event_type: AuditEventType) -> bool:
        return event_type in self.triggers

    @abstractmethod
    async def evaluate(
        self, uow: UnitOfWork, context: DetectionContext, now: datetime
    ) -> Optional[Alert]:
        """Return an unsaved Alert when the rule fires, None otherwise"""
        pass


class BruteForceRule(DetectionRule):
    """
    Failed-login velocity.

    Counts LOGIN_FAILURE events in the trailing window, narrowed by the user
    when known AND by the source IP when known. At or above the threshold a
    HIGH severity BRUTE_FORCE alert is raised against the triggering event.

    Repeated failures past the threshold raise one alert each; there is no
    suppression window.
    """

    name = "brute_force"
    triggers = frozenset({AuditEventType.LOGIN_FAILURE})

    def __init__(self, threshold: int = 5, window: timedelta = timedelta(minutes=10)):
        self.threshold = threshold
        self.window = window

    async def evaluate(
        self, uow: UnitOfWork, context: DetectionContext, now: datetime
    ) -> Optional[Alert]:
        failure_count = await uow.audit_events.count_since(
            AuditEventType.LOGIN_FAILURE,
            since=now - self.window,
            user_id=context.user_id,
            ip_address=context.ip_address,
        )
        if failure_count < self.threshold:
            return None

        minutes = int(self.window.total_seconds() // 60)
        parts = [
            f"Detected {failure_count} failed login attempts in the last {minutes} minutes."
        ]
        if context.user_id:
            parts.append("Target: specific user account.")
        if context.ip_address:
            parts.append(f"Source IP: {context.ip_address}.")

        return Alert(
            user_id=context.user_id,
            audit_event_id=context.latest_event.id if context.latest_event else None,
            type=AlertType.BRUTE_FORCE,
            severity=AlertSeverity.HIGH,
            description=" ".join(parts),
        )


def default_rules() -> List[DetectionRule]:
    return [
        BruteForceRule(
            threshold=ApplicationConfig.BRUTE_FORCE_THRESHOLD,
            window=timedelta(minutes=ApplicationConfig.BRUTE_FORCE_WINDOW_MINUTES),
        )
    ]


class DetectionEngine:
    """
    Runs every rule triggered by the event type and stores the alerts they raise.

    Detection is advisory: a failing rule is logged and skipped, it never
    fails the request that produced the event. Must be used inside an
    entered unit of work.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rules: Optional[Sequence[DetectionRule]] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.rules = list(rules) if rules is not None else default_rules()
        self.clock = clock

    async def evaluate(self, context: DetectionContext) -> DetectionOutcome:
        now = self.clock()
        created: List[Alert] = []

        for rule in self.rules:
            if not rule.applies_to(context.event_type):
                continue

            try:
                alert = await rule.evaluate(self.uow, context, now)
                if alert is None:
                    continue
                alert = await self.uow.alerts.create(alert)
                await self.uow.commit()
            except Exception:
                logger.exception(f"Detection rule {rule.name} failed")
                await self._discard()
                continue

            logger.warning(
                f"Rule {rule.name} raised {alert.type.value} alert: {alert.description}"
            )
            created.append(alert)

        return DetectionOutcome(alert_created=bool(created), alerts=created)

    async def _discard(self):
        try:
            await self.uow.rollback()
        except Exception:
            logger.warning("Rollback after failed detection rule failed as well")
