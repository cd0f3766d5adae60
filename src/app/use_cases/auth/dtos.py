"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from src.app.use_cases.base_dto import CamelModel
from src.domain.entities import User


# ============================================================================
# Response DTOs
# ============================================================================


class AccountInfo(CamelModel):
    """Account information in authentication responses"""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    mfa_enabled: bool

    @classmethod
    def from_entity(cls, user: User) -> "AccountInfo":
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            mfa_enabled=user.mfa_enabled,
        )


class LoginResponse(CamelModel):
    """
    Response for login and MFA verification

    status is SUCCESS (token set) or MFA_REQUIRED (mfa_token set).
    """

    status: str
    token: Optional[str] = None
    mfa_token: Optional[str] = None
    user: AccountInfo


class MessageResponse(CamelModel):
    """Response for actions with nothing to return"""

    status: str
    message: str
