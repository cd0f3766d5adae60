from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.error import ClientError, ServerError
from src.api.schemas import ApiResponse
from src.app.services.access_control import Caller
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.security import (
    AuditLogPage,
    AuditLogQuery,
    AuditLogSummary,
    ExportAuditLogsUseCase,
    ListAuditLogsUseCase,
    SummarizeAuditLogsUseCase,
)
from src.depends import get_caller, get_unit_of_work
from src.domain.base import utcnow
from src.domain.error_codes import AUTHORIZATION_ERROR, VALIDATION_ERROR

router = APIRouter(prefix="/security", tags=["Audit Logs"])


def get_audit_log_query(
    event_type: Optional[str] = Query(None, alias="eventType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    q: Optional[str] = Query(None),
    ip_address: Optional[str] = Query(None, alias="ipAddress"),
    severity: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
) -> AuditLogQuery:
    return AuditLogQuery(
        event_type=event_type,
        user_id=user_id,
        q=q,
        ip_address=ip_address,
        severity=severity,
        date_from=date_from,
        date_to=date_to,
    )


def _raise_for(error):
    if error.code == AUTHORIZATION_ERROR:
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    elif error.code == VALIDATION_ERROR:
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


@router.get(
    "/audit-logs",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AuditLogPage],
)
async def list_audit_logs(
    query: AuditLogQuery = Depends(get_audit_log_query),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Search the audit log (admin only)

    Newest first. Each row carries its user, linked alerts and the highest
    linked alert severity.

    Raises:
        - 401 Unauthorized: Missing or invalid JWT
        - 403 Forbidden: Caller is not an admin
    """
    use_case = ListAuditLogsUseCase(uow)
    result = await use_case.execute(caller, query, page=page, limit=limit)

    if result.is_err():
        _raise_for(result.error)

    return ApiResponse(data=result.value)


@router.get("/audit-logs/export.csv", status_code=status.HTTP_200_OK)
async def export_audit_logs(
    query: AuditLogQuery = Depends(get_audit_log_query),
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Download the filtered audit log as CSV (admin only)
    """
    use_case = ExportAuditLogsUseCase(uow)
    result = await use_case.execute(caller, query)

    if result.is_err():
        _raise_for(result.error)

    filename = f"audit-logs-{utcnow().strftime('%Y%m%dT%H%M%SZ')}.csv"
    return Response(
        content=result.value,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/audit-logs/summary",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AuditLogSummary],
)
async def summarize_audit_logs(
    window: Optional[str] = Query(None, description="24h or 7d"),
    caller: Caller = Depends(get_caller),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Dashboard aggregates over a recent window (admin only)

    Raises:
        - 400 Bad Request: Unknown window
        - 401 Unauthorized: Missing or invalid JWT
        - 403 Forbidden: Caller is not an admin
    """
    use_case = SummarizeAuditLogsUseCase(uow)
    result = await use_case.execute(caller, window)

    if result.is_err():
        _raise_for(result.error)

    return ApiResponse(data=result.value)
