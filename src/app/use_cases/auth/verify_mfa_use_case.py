"""
Verify MFA Use Case

Second login step: exchanges an MFA token and a TOTP code for a JWT.
"""

from typing import Optional
from uuid import UUID

import pyotp

from src.api.utils.jwt import MFA_LOGIN_PURPOSE, generate_jwt, verify_jwt
from src.app.services.event_recorder import RequestContext
from src.app.services.security_monitor import SecurityMonitor
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEventType
from src.domain.error_codes import UNAUTHORIZED, VALIDATION_ERROR
from src.libs.result import Error, Result, Return
from .dtos import AccountInfo, LoginResponse


class VerifyMfaUseCase:
    """
    Use case for MFA verification during login.

    Business Rules:
    - MFA token must be valid, unexpired and issued for the MFA login step
    - User must still be active with MFA enabled
    - TOTP accepts one 30s step of clock drift either way
    - Wrong codes are recorded as MFA_FAILURE, correct ones as MFA_SUCCESS
    """

    def __init__(self, uow: UnitOfWork, monitor: Optional[SecurityMonitor] = None):
        self.uow = uow
        self.monitor = monitor or SecurityMonitor(uow)

    async def execute(
        self, mfa_token: str, code: str, context: RequestContext
    ) -> Result[LoginResponse]:
        payload = verify_jwt(mfa_token)
        if payload is None:
            return Return.err(Error(UNAUTHORIZED, "Invalid or expired MFA token"))

        if payload.get("purpose") != MFA_LOGIN_PURPOSE:
            return Return.err(Error(VALIDATION_ERROR, "Invalid MFA token purpose"))

        try:
            user_id = UUID(payload["user_id"])
        except (KeyError, ValueError):
            return Return.err(Error(UNAUTHORIZED, "Invalid or expired MFA token"))

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None or not user.is_active or not user.mfa_enabled or not user.mfa_secret:
                return Return.err(Error(UNAUTHORIZED, "User not eligible for MFA login"))

            role = user.role.value
            account = AccountInfo.from_entity(user)
            code_valid = pyotp.TOTP(user.mfa_secret).verify(code, valid_window=1)

            if not code_valid:
                await self.monitor.track(
                    AuditEventType.MFA_FAILURE,
                    context,
                    user_id=user_id,
                    metadata={"reason": "INVALID_CODE", "email": account.email},
                )
                return Return.err(Error(VALIDATION_ERROR, "Invalid MFA code"))

            await self.monitor.track(
                AuditEventType.MFA_SUCCESS,
                context,
                user_id=user_id,
                metadata={"email": account.email},
            )

            return Return.ok(
                LoginResponse(status="SUCCESS", token=generate_jwt(user_id, role), user=account)
            )
