from src.domain.entities import (
    AlertSeverity,
    AlertStatus,
    AuditEventType,
    highest_severity,
    parse_enum,
)


def test_highest_severity_picks_worst():
    severities = [AlertSeverity.LOW, AlertSeverity.HIGH, AlertSeverity.MEDIUM]

    assert highest_severity(severities) == AlertSeverity.HIGH


def test_highest_severity_of_nothing_is_none():
    assert highest_severity([]) is None


def test_parse_enum_accepts_members():
    assert parse_enum(AlertStatus, "RESOLVED") == AlertStatus.RESOLVED
    assert parse_enum(AuditEventType, " LOGOUT ") == AuditEventType.LOGOUT


def test_parse_enum_rejects_unknown_values():
    assert parse_enum(AlertStatus, "DONE") is None
    assert parse_enum(AlertStatus, "resolved") is None
    assert parse_enum(AlertStatus, None) is None
