"""
Security Use Cases

Alert triage, audit log reads and self-service security views.
"""

from .list_alerts_use_case import ListAlertsUseCase
from .update_alert_status_use_case import UpdateAlertStatusUseCase
from .list_audit_logs_use_case import ListAuditLogsUseCase
from .export_audit_logs_use_case import ExportAuditLogsUseCase
from .summarize_audit_logs_use_case import SummarizeAuditLogsUseCase
from .list_my_activities_use_case import ListMyActivitiesUseCase
from .report_incident_use_case import ReportIncidentUseCase
from .get_my_summary_use_case import GetMySummaryUseCase
from .dtos import (
    AuditLogQuery,
    AlertView,
    AlertDetail,
    AuditLogRow,
    AuditLogPage,
    AuditLogSummary,
    ActivityView,
    MySecuritySummary,
)

__all__ = [
    # Use Cases
    "ListAlertsUseCase",
    "UpdateAlertStatusUseCase",
    "ListAuditLogsUseCase",
    "ExportAuditLogsUseCase",
    "SummarizeAuditLogsUseCase",
    "ListMyActivitiesUseCase",
    "ReportIncidentUseCase",
    "GetMySummaryUseCase",
    # DTOs - Queries
    "AuditLogQuery",
    # DTOs - Responses
    "AlertView",
    "AlertDetail",
    "AuditLogRow",
    "AuditLogPage",
    "AuditLogSummary",
    "ActivityView",
    "MySecuritySummary",
]
