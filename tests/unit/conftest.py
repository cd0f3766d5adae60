from uuid import uuid4

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.access_control import Caller
from src.domain.entities import UserRole


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.users = AsyncMock()
    uow.audit_events = AsyncMock()
    uow.alerts = AsyncMock()
    return uow


@pytest.fixture
def admin():
    return Caller(user_id=uuid4(), role=UserRole.ADMIN.value)


@pytest.fixture
def member():
    return Caller(user_id=uuid4(), role=UserRole.USER.value)
