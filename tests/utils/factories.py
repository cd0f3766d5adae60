from datetime import datetime
from typing import Optional

import bcrypt
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.utils.jwt import generate_jwt
from src.domain.entities import (
    Alert,
    AlertSeverity,
    AlertStatus,
    AlertType,
    AuditEvent,
    AuditEventType,
    User,
    UserRole,
)

DEFAULT_PASSWORD = "SecurePass123!"


def hash_password(password: str) -> str:
    # Low cost factor keeps the suite fast
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode()


async def create_user(
    session: AsyncSession,
    email: str = "user@acme.com",
    password: str = DEFAULT_PASSWORD,
    role: UserRole = UserRole.USER,
    is_active: bool = True,
    mfa_secret: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> User:
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
        mfa_enabled=mfa_secret is not None,
        mfa_secret=mfa_secret,
        first_name=first_name,
        last_name=last_name,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def create_event(
    session: AsyncSession,
    event_type: AuditEventType,
    user: Optional[User] = None,
    ip_address: Optional[str] = None,
    created_at: Optional[datetime] = None,
    metadata: Optional[dict] = None,
) -> AuditEvent:
    event = AuditEvent(
        user_id=user.id if user else None,
        event_type=event_type,
        ip_address=ip_address,
        user_agent="pytest",
        event_metadata=metadata or {},
    )
    if created_at is not None:
        event.created_at = created_at
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


async def create_alert(
    session: AsyncSession,
    event: Optional[AuditEvent] = None,
    user: Optional[User] = None,
    alert_type: AlertType = AlertType.BRUTE_FORCE,
    severity: AlertSeverity = AlertSeverity.HIGH,
    status: AlertStatus = AlertStatus.OPEN,
    description: str = "Detected failed login attempts.",
) -> Alert:
    alert = Alert(
        user_id=user.id if user else None,
        audit_event_id=event.id if event else None,
        type=alert_type,
        severity=severity,
        status=status,
        description=description,
    )
    session.add(alert)
    await session.commit()
    await session.refresh(alert)
    return alert


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {generate_jwt(user.id, user.role.value)}"}
