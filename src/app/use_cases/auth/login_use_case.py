"""
Login Use Case

Authenticates a user by email and password and records the attempt.
"""

from typing import Optional

import bcrypt

from src.api.utils.jwt import generate_jwt, generate_mfa_token
from src.app.services.event_recorder import RequestContext
from src.app.services.security_monitor import SecurityMonitor
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEventType
from src.domain.error_codes import UNAUTHORIZED
from src.libs.result import Error, Result, Return
from .dtos import AccountInfo, LoginResponse


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Unknown, inactive and wrong-password attempts all fail the same way
      and are recorded as LOGIN_FAILURE with the reason in metadata
    - Accounts with MFA receive a short-lived MFA token instead of a JWT;
      LOGIN_SUCCESS (mfaRequired=true) and MFA_CHALLENGE are recorded
    - Every recorded event is handed to the detection engine
    - The login outcome never depends on recording or detection
    """

    def __init__(self, uow: UnitOfWork, monitor: Optional[SecurityMonitor] = None):
        self.uow = uow
        self.monitor = monitor or SecurityMonitor(uow)

    async def execute(
        self, email: str, password: str, context: RequestContext
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            context: IP address and user agent of the request

        Returns:
            Result with LoginResponse, or Error
        """
        invalid = Error(UNAUTHORIZED, "Invalid credentials")

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or not user.is_active:
                if user is None:
                    # Hash dummy password to maintain constant time
                    bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(12))
                await self.monitor.track(
                    AuditEventType.LOGIN_FAILURE,
                    context,
                    user_id=user.id if user else None,
                    metadata={
                        "reason": "USER_NOT_FOUND" if user is None else "USER_INACTIVE",
                        "email": email,
                    },
                )
                return Return.err(invalid)

            # Capture everything needed before monitoring touches the session
            user_id = user.id
            role = user.role.value
            mfa_required = bool(user.mfa_enabled and user.mfa_secret)
            account = AccountInfo.from_entity(user)

            password_valid = bcrypt.checkpw(
                password.encode(), user.password_hash.encode()
            )

            if not password_valid:
                await self.monitor.track(
                    AuditEventType.LOGIN_FAILURE,
                    context,
                    user_id=user_id,
                    metadata={"reason": "INVALID_PASSWORD", "email": email},
                )
                return Return.err(invalid)

            await self.monitor.track(
                AuditEventType.LOGIN_SUCCESS,
                context,
                user_id=user_id,
                metadata={"email": email, "mfaRequired": mfa_required},
            )

            if mfa_required:
                await self.monitor.track(
                    AuditEventType.MFA_CHALLENGE,
                    context,
                    user_id=user_id,
                    metadata={"email": email},
                )
                return Return.ok(
                    LoginResponse(
                        status="MFA_REQUIRED",
                        mfa_token=generate_mfa_token(user_id, role),
                        user=account,
                    )
                )

            return Return.ok(
                LoginResponse(
                    status="SUCCESS",
                    token=generate_jwt(user_id, role),
                    user=account,
                )
            )
