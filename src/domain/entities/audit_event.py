"""
AuditEvent Entity

Immutable log of authentication events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import event
from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow

from .enums import AuditEventType


class ImmutableAuditEventError(Exception):
    """Raised when something tries to modify or delete a persisted audit event"""


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of authentication events.

    Business Rules:
    - Append-only: never updated or deleted once flushed
    - user_id is null when the action cannot be attributed
      (e.g. login attempt against an unknown email)
    - Source of truth for detection rules and every security report
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id")
    event_type: AuditEventType

    # Network provenance
    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    geo_location: Optional[str] = Field(default=None, max_length=255)

    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_user_created", "user_id", "created_at"),
        Index("idx_audit_type_created", "event_type", "created_at"),
        Index("idx_audit_ip_created", "ip_address", "created_at"),
    )


@event.listens_for(AuditEvent, "before_update")
def _reject_update(mapper, connection, target):
    raise ImmutableAuditEventError(f"Audit event {target.id} is immutable")


@event.listens_for(AuditEvent, "before_delete")
def _reject_delete(mapper, connection, target):
    raise ImmutableAuditEventError(f"Audit event {target.id} cannot be deleted")
