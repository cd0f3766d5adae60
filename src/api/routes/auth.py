from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.schemas import ApiResponse
from src.api.utils.request_context import extract_request_context
from src.app.services.access_control import Caller
from src.app.services.event_recorder import RequestContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ChangePasswordUseCase,
    LoginResponse,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    VerifyMfaUseCase,
)
from src.depends import get_caller, get_unit_of_work
from src.domain.error_codes import NOT_FOUND, UNAUTHORIZED, VALIDATION_ERROR

router = APIRouter(prefix="/auth", tags=["Authentication"])


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


@router.post(
    "/login", status_code=status.HTTP_200_OK, response_model=ApiResponse[LoginResponse]
)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(extract_request_context),
):
    """
    User Login

    Authenticates user and returns a JWT, or an MFA token when MFA is enabled.
    Every attempt is recorded in the audit log and checked by detection rules.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow)
    result = await use_case.execute(request.email, request.password, context)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == UNAUTHORIZED:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    login_result = result.value
    message = "MFA required" if login_result.status == "MFA_REQUIRED" else "Login successful"
    return ApiResponse(data=login_result, message=message)


class VerifyMfaRequest(BaseModel):
    """
    MFA verification HTTP request payload
    """

    code: str = Field(..., min_length=6, max_length=6, description="TOTP code")
    mfa_token: str = Field(..., alias="mfaToken", min_length=1, description="Token from login")


@router.post(
    "/mfa/verify",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[LoginResponse],
)
async def verify_mfa(
    request: VerifyMfaRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(extract_request_context),
):
    """
    Verify MFA code during login

    Raises:
        - 400 Bad Request: Wrong code or wrong token purpose
        - 401 Unauthorized: Invalid/expired MFA token or user not eligible
        - 500 Internal Server Error: Server error
    """
    use_case = VerifyMfaUseCase(uow)
    result = await use_case.execute(request.mfa_token, request.code.strip(), context)

    # Handle errors
    if result.is_err():
        error = result.error
        if error.code == UNAUTHORIZED:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == VALIDATION_ERROR:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return ApiResponse(data=result.value, message="MFA verification successful")


@router.post(
    "/logout", status_code=status.HTTP_200_OK, response_model=ApiResponse[MessageResponse]
)
async def logout(
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(extract_request_context),
):
    """
    Logout

    Records a LOGOUT event for the bearer. The client discards its token.
    """
    use_case = LogoutUseCase(uow)
    result = await use_case.execute(caller, context)

    if result.is_err():
        raise ServerError(result.error)

    return ApiResponse(data=result.value)


class ChangePasswordRequest(BaseModel):
    """
    Change password HTTP request payload
    """

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=8)


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MessageResponse],
)
async def change_password(
    request: ChangePasswordRequest,
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(extract_request_context),
):
    """
    Change Password

    Raises:
        - 400 Bad Request: Wrong current password or invalid new password
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: Account no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = ChangePasswordUseCase(uow)
    result = await use_case.execute(
        caller, request.current_password, request.new_password, context
    )

    if result.is_err():
        error = result.error
        if error.code == VALIDATION_ERROR:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return ApiResponse(data=result.value)
