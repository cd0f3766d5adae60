from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import Alert, AlertSeverity, AlertStatus, AlertType


class IAlertRepository(ABC):
    """Alert repository interface - application layer"""

    @abstractmethod
    async def create(self, alert: Alert) -> Alert:
        """Create a new alert"""
        pass

    @abstractmethod
    async def get_by_id(self, alert_id: UUID) -> Optional[Alert]:
        """Get alert by ID"""
        pass

    @abstractmethod
    async def update(self, alert: Alert) -> Alert:
        """Persist status changes of an existing alert"""
        pass

    @abstractmethod
    async def list(
        self,
        status: Optional[AlertStatus] = None,
        severity: Optional[AlertSeverity] = None,
        alert_type: Optional[AlertType] = None,
    ) -> List[Alert]:
        """Alerts matching every given criterion, newest first"""
        pass

    @abstractmethod
    async def list_by_audit_event_ids(self, event_ids: Iterable[UUID]) -> List[Alert]:
        """Alerts linked to any of the given events, newest first"""
        pass

    @abstractmethod
    async def count_for_user(self, user_id: UUID, status: AlertStatus) -> int:
        """Number of alerts owned by user_id in the given status"""
        pass
