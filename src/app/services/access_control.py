"""
Access Control Gate

Admin-wide vs self-scoped authorization checks shared by the use cases.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import UserRole
from src.domain.error_codes import AUTHORIZATION_ERROR
from src.libs.result import Error


class Caller(BaseModel):
    """Identity taken from a verified access token"""

    user_id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def require_admin(caller: Caller) -> Optional[Error]:
    """Return an authorization error for non-admin callers, None otherwise."""
    if not caller.is_admin:
        return Error(AUTHORIZATION_ERROR, "Admin access required")
    return None
