from typing import Optional
from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.access_control import Caller
from src.domain.error_codes import UNAUTHORIZED
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id, role

    Raises:
        ClientError: 401 if token is missing, invalid, expired or an MFA token
    """
    if credentials is None:
        raise ClientError(
            Error(UNAUTHORIZED, "Authorization header required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)

    # MFA tokens only prove the password step and are not access tokens
    if payload is None or payload.get("purpose"):
        raise ClientError(
            Error(UNAUTHORIZED, "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload


async def get_caller(current_user: dict = Depends(get_current_user)) -> Caller:
    """Dependency turning verified JWT claims into the caller identity"""
    try:
        return Caller(
            user_id=UUID(current_user["user_id"]), role=current_user.get("role", "")
        )
    except (KeyError, ValueError):
        raise ClientError(
            Error(UNAUTHORIZED, "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
