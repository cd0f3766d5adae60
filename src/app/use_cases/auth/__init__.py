"""
Authentication Use Cases

Login-flow operations that produce audit events.
"""

from .login_use_case import LoginUseCase
from .verify_mfa_use_case import VerifyMfaUseCase
from .logout_use_case import LogoutUseCase
from .change_password_use_case import ChangePasswordUseCase
from .dtos import AccountInfo, LoginResponse, MessageResponse

__all__ = [
    # Use Cases
    "LoginUseCase",
    "VerifyMfaUseCase",
    "LogoutUseCase",
    "ChangePasswordUseCase",
    # DTOs - Responses
    "LoginResponse",
    "MessageResponse",
    # DTOs - Nested Models
    "AccountInfo",
]
