from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.schemas import ApiResponse
from src.app.services.access_control import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.security import (
    ActivityView,
    AlertView,
    GetMySummaryUseCase,
    ListMyActivitiesUseCase,
    MySecuritySummary,
    ReportIncidentUseCase,
)
from src.depends import get_caller, get_unit_of_work
from src.domain.error_codes import NOT_FOUND

router = APIRouter(prefix="/security/me", tags=["Account Security"])


@router.get(
    "/activities",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[List[ActivityView]],
)
async def list_my_activities(
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Recent login activity of the caller, newest first"""
    use_case = ListMyActivitiesUseCase(uow)
    result = await use_case.execute(caller)

    if result.is_err():
        raise ServerError(result.error)

    return ApiResponse(data=result.value)


class ReportIncidentRequest(BaseModel):
    activity_id: Optional[str] = Field(None, alias="activityId")
    note: Optional[str] = None


@router.post(
    "/report-incident",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AlertView],
)
async def report_incident(
    request: ReportIncidentRequest,
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Flag one of the caller's activities as suspicious

    Raises:
        - 401 Unauthorized: Missing or invalid JWT
        - 404 Not Found: Activity missing or owned by someone else
    """
    use_case = ReportIncidentUseCase(uow)
    result = await use_case.execute(caller, request.activity_id, request.note)

    if result.is_err():
        error = result.error
        if error.code == NOT_FOUND:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return ApiResponse(data=result.value, message="Incident reported")


@router.get(
    "/summary",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MySecuritySummary],
)
async def get_my_summary(
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Last login, recent failures and open alerts of the caller"""
    use_case = GetMySummaryUseCase(uow)
    result = await use_case.execute(caller)

    if result.is_err():
        raise ServerError(result.error)

    return ApiResponse(data=result.value)
