from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.alert_repository import IAlertRepository
from src.domain.entities import Alert, AlertSeverity, AlertStatus, AlertType


class AlertRepository(IAlertRepository):
    """Alert repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, alert: Alert) -> Alert:
        """Create a new alert"""
        self.session.add(alert)
        await self.session.flush()
        await self.session.refresh(alert)
        return alert

    async def get_by_id(self, alert_id: UUID) -> Optional[Alert]:
        """Get alert by ID"""
        stmt = select(Alert).where(Alert.id == alert_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, alert: Alert) -> Alert:
        """Persist status changes of an existing alert"""
        self.session.add(alert)
        await self.session.flush()
        await self.session.refresh(alert)
        return alert

    async def list(
        self,
        status: Optional[AlertStatus] = None,
        severity: Optional[AlertSeverity] = None,
        alert_type: Optional[AlertType] = None,
    ) -> List[Alert]:
        """Alerts matching every given criterion, newest first"""
        stmt = select(Alert)
        if status is not None:
            stmt = stmt.where(Alert.status == status)
        if severity is not None:
            stmt = stmt.where(Alert.severity == severity)
        if alert_type is not None:
            stmt = stmt.where(Alert.type == alert_type)

        stmt = stmt.order_by(col(Alert.created_at).desc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_by_audit_event_ids(self, event_ids: Iterable[UUID]) -> List[Alert]:
        """Alerts linked to any of the given events, newest first"""
        ids = set(event_ids)
        if not ids:
            return []
        stmt = (
            select(Alert)
            .where(col(Alert.audit_event_id).in_(ids))
            .order_by(col(Alert.created_at).desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_for_user(self, user_id: UUID, status: AlertStatus) -> int:
        """Number of alerts owned by user_id in the given status"""
        stmt = select(func.count(col(Alert.id))).where(
            Alert.user_id == user_id, Alert.status == status
        )
        result = await self.session.exec(stmt)
        return result.one()
