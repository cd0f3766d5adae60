from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.schemas import ApiResponse
from src.app.services.access_control import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.security import (
    AlertDetail,
    AlertView,
    ListAlertsUseCase,
    UpdateAlertStatusUseCase,
)
from src.depends import get_caller, get_unit_of_work
from src.domain.error_codes import AUTHORIZATION_ERROR, NOT_FOUND, VALIDATION_ERROR

router = APIRouter(prefix="/security", tags=["Security Alerts"])


@router.get(
    "/alerts",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[List[AlertDetail]],
)
async def list_alerts(
    alert_status: Optional[str] = Query(None, alias="status"),
    severity: Optional[str] = Query(None),
    alert_type: Optional[str] = Query(None, alias="type"),
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List security alerts (admin only)

    Filters that do not name a known value match nothing.

    Raises:
        - 401 Unauthorized: Missing or invalid JWT
        - 403 Forbidden: Caller is not an admin
    """
    use_case = ListAlertsUseCase(uow)
    result = await use_case.execute(
        caller, status=alert_status, severity=severity, alert_type=alert_type
    )

    if result.is_err():
        error = result.error
        if error.code == AUTHORIZATION_ERROR:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return ApiResponse(data=result.value)


class UpdateAlertStatusRequest(BaseModel):
    status: Optional[str] = Field(None, description="OPEN, ACKNOWLEDGED or RESOLVED")


@router.patch(
    "/alerts/{alert_id}",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AlertView],
)
async def update_alert_status(
    alert_id: str,
    request: UpdateAlertStatusRequest,
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Move an alert to another status (admin only)

    Resolving stamps resolvedAt; any other status clears it.

    Raises:
        - 400 Bad Request: Missing or unknown status
        - 401 Unauthorized: Missing or invalid JWT
        - 403 Forbidden: Caller is not an admin
        - 404 Not Found: Alert does not exist
    """
    use_case = UpdateAlertStatusUseCase(uow)
    result = await use_case.execute(caller, alert_id, request.status)

    if result.is_err():
        error = result.error
        if error.code == VALIDATION_ERROR:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == AUTHORIZATION_ERROR:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return ApiResponse(data=result.value, message="Alert updated")
