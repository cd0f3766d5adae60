from uuid import uuid4

import bcrypt
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.access_control import Caller
from src.app.services.detection_engine import DetectionOutcome
from src.app.services.event_recorder import RequestContext
from src.app.use_cases.auth import ChangePasswordUseCase
from src.domain.entities import AuditEventType, User

CURRENT = "OldPassword1!"
CONTEXT = RequestContext(ip_address="203.0.113.7")


@pytest.fixture
def monitor():
    monitor = MagicMock()
    monitor.track = AsyncMock(return_value=DetectionOutcome())
    return monitor


@pytest.fixture
def user():
    return User(
        email="dave@acme.com",
        password_hash=bcrypt.hashpw(CURRENT.encode(), bcrypt.gensalt(4)).decode(),
    )


@pytest.mark.asyncio
async def test_change_password(mock_uow, monitor, user):
    mock_uow.users.get_by_id.return_value = user
    caller = Caller(user_id=user.id, role="USER")

    result = await ChangePasswordUseCase(mock_uow, monitor=monitor).execute(
        caller, CURRENT, "NewPassword2!", CONTEXT
    )

    assert result.is_ok()
    assert bcrypt.checkpw(b"NewPassword2!", user.password_hash.encode())
    mock_uow.users.update.assert_awaited_once_with(user)
    mock_uow.commit.assert_awaited_once()
    monitor.track.assert_awaited_once_with(
        AuditEventType.PASSWORD_CHANGE, CONTEXT, user_id=user.id
    )


@pytest.mark.asyncio
async def test_wrong_current_password(mock_uow, monitor, user):
    mock_uow.users.get_by_id.return_value = user

    result = await ChangePasswordUseCase(mock_uow, monitor=monitor).execute(
        Caller(user_id=user.id, role="USER"), "Wrong!", "NewPassword2!", CONTEXT
    )

    assert result.error.message == "Current password is incorrect"
    mock_uow.users.update.assert_not_awaited()
    monitor.track.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("new_password", ["short", CURRENT])
async def test_rejected_new_password(mock_uow, monitor, new_password):
    result = await ChangePasswordUseCase(mock_uow, monitor=monitor).execute(
        Caller(user_id=uuid4(), role="USER"), CURRENT, new_password, CONTEXT
    )

    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.get_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_user(mock_uow, monitor):
    mock_uow.users.get_by_id.return_value = None

    result = await ChangePasswordUseCase(mock_uow, monitor=monitor).execute(
        Caller(user_id=uuid4(), role="USER"), CURRENT, "NewPassword2!", CONTEXT
    )

    assert result.error.code == "NOT_FOUND"
