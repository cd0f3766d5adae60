"""
Use Cases

Organized into domain folders:
- auth/: Login-flow operations that produce audit events
- security/: Alert triage, audit log reads, self-service security views

Import from subdirectories for better organization.
"""

from .auth import (
    LoginUseCase,
    VerifyMfaUseCase,
    LogoutUseCase,
    ChangePasswordUseCase,
)
from .security import (
    ListAlertsUseCase,
    UpdateAlertStatusUseCase,
    ListAuditLogsUseCase,
    ExportAuditLogsUseCase,
    SummarizeAuditLogsUseCase,
    ListMyActivitiesUseCase,
    ReportIncidentUseCase,
    GetMySummaryUseCase,
)

__all__ = [
    # Auth
    "LoginUseCase",
    "VerifyMfaUseCase",
    "LogoutUseCase",
    "ChangePasswordUseCase",
    # Security
    "ListAlertsUseCase",
    "UpdateAlertStatusUseCase",
    "ListAuditLogsUseCase",
    "ExportAuditLogsUseCase",
    "SummarizeAuditLogsUseCase",
    "ListMyActivitiesUseCase",
    "ReportIncidentUseCase",
    "GetMySummaryUseCase",
]
