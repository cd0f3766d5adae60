"""
Alert Entity

Actionable security incident with a triage lifecycle.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import AlertSeverity, AlertStatus, AlertType


class Alert(SQLModel, table=True):
    """
    Alert entity - incident raised by a detection rule or a user report.

    Business Rules:
    - Always created in OPEN state
    - description is written once at creation
    - resolved_at is set exactly while status is RESOLVED
    - Any state may move to any other state (acknowledge is optional,
      resolved alerts can be reopened)
    """

    __tablename__ = "alerts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id")
    audit_event_id: Optional[UUID] = Field(
        default=None, foreign_key="audit_events.id", index=True
    )

    type: AlertType
    severity: AlertSeverity = Field(default=AlertSeverity.MEDIUM)
    status: AlertStatus = Field(default=AlertStatus.OPEN)
    description: str

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    resolved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_alert_status_created", "status", "created_at"),
        Index("idx_alert_user_created", "user_id", "created_at"),
        Index("idx_alert_type_created", "type", "created_at"),
    )

    def transition_to(self, new_status: AlertStatus, now: datetime) -> bool:
        """
        Move the alert to new_status.

        Returns False (and changes nothing) when the alert is already there.
        """
        if self.status == new_status:
            return False

        self.status = new_status
        self.resolved_at = now if new_status == AlertStatus.RESOLVED else None
        return True
