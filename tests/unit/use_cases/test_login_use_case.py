import bcrypt
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.api.utils.jwt import MFA_LOGIN_PURPOSE, verify_jwt
from src.app.services.detection_engine import DetectionOutcome
from src.app.services.event_recorder import RequestContext
from src.app.use_cases.auth import LoginUseCase
from src.domain.entities import AuditEventType, User, UserRole

PASSWORD = "SecurePass123!"
CONTEXT = RequestContext(ip_address="203.0.113.7", user_agent="pytest")


def _user(**kwargs):
    return User(
        email="alice@acme.com",
        password_hash=bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode(),
        **kwargs,
    )


@pytest.fixture
def monitor():
    monitor = MagicMock()
    monitor.track = AsyncMock(return_value=DetectionOutcome())
    return monitor


@pytest.mark.asyncio
async def test_login_success(mock_uow, monitor):
    user = _user(role=UserRole.ADMIN)
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow, monitor=monitor).execute(
        "alice@acme.com", PASSWORD, CONTEXT
    )

    assert result.is_ok()
    assert result.value.status == "SUCCESS"
    claims = verify_jwt(result.value.token)
    assert claims["user_id"] == str(user.id)
    assert claims["role"] == "ADMIN"
    monitor.track.assert_awaited_once_with(
        AuditEventType.LOGIN_SUCCESS,
        CONTEXT,
        user_id=user.id,
        metadata={"email": "alice@acme.com", "mfaRequired": False},
    )


@pytest.mark.asyncio
async def test_login_wrong_password(mock_uow, monitor):
    user = _user()
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow, monitor=monitor).execute(
        "alice@acme.com", "nope", CONTEXT
    )

    assert result.is_err()
    assert result.error.code == "UNAUTHORIZED"
    assert result.error.message == "Invalid credentials"
    monitor.track.assert_awaited_once_with(
        AuditEventType.LOGIN_FAILURE,
        CONTEXT,
        user_id=user.id,
        metadata={"reason": "INVALID_PASSWORD", "email": "alice@acme.com"},
    )


@pytest.mark.asyncio
async def test_login_unknown_user(mock_uow, monitor):
    mock_uow.users.get_by_email.return_value = None

    result = await LoginUseCase(mock_uow, monitor=monitor).execute(
        "ghost@acme.com", PASSWORD, CONTEXT
    )

    assert result.error.message == "Invalid credentials"
    kwargs = monitor.track.await_args.kwargs
    assert kwargs["user_id"] is None
    assert kwargs["metadata"]["reason"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_login_inactive_user(mock_uow, monitor):
    mock_uow.users.get_by_email.return_value = _user(is_active=False)

    result = await LoginUseCase(mock_uow, monitor=monitor).execute(
        "alice@acme.com", PASSWORD, CONTEXT
    )

    assert result.is_err()
    assert monitor.track.await_args.kwargs["metadata"]["reason"] == "USER_INACTIVE"


@pytest.mark.asyncio
async def test_login_with_mfa_returns_mfa_token(mock_uow, monitor):
    user = _user(mfa_enabled=True, mfa_secret="JBSWY3DPEHPK3PXP")
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow, monitor=monitor).execute(
        "alice@acme.com", PASSWORD, CONTEXT
    )

    assert result.value.status == "MFA_REQUIRED"
    assert result.value.token is None
    assert verify_jwt(result.value.mfa_token)["purpose"] == MFA_LOGIN_PURPOSE
    tracked = [c.args[0] for c in monitor.track.await_args_list]
    assert tracked == [AuditEventType.LOGIN_SUCCESS, AuditEventType.MFA_CHALLENGE]


@pytest.mark.asyncio
async def test_mfa_flag_without_secret_logs_in_directly(mock_uow, monitor):
    mock_uow.users.get_by_email.return_value = _user(mfa_enabled=True)

    result = await LoginUseCase(mock_uow, monitor=monitor).execute(
        "alice@acme.com", PASSWORD, CONTEXT
    )

    assert result.value.status == "SUCCESS"


@pytest.mark.asyncio
async def test_login_outcome_ignores_monitoring_failures(mock_uow):
    """Recorder and engine failures are swallowed; the login still succeeds"""
    mock_uow.users.get_by_email.return_value = _user()
    mock_uow.audit_events.create.side_effect = RuntimeError("database is locked")

    result = await LoginUseCase(mock_uow).execute("alice@acme.com", PASSWORD, CONTEXT)

    assert result.is_ok()
    assert result.value.status == "SUCCESS"
