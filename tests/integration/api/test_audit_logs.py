import csv
import io
import json
from datetime import timedelta

import pytest
from httpx import AsyncClient

from src.domain.base import utcnow
from src.domain.entities import AlertSeverity, AlertType, AuditEventType, UserRole
from tests.utils.factories import auth_headers, create_alert, create_event, create_user


async def _admin(db_session):
    return await create_user(db_session, email="admin@acme.com", role=UserRole.ADMIN)


async def _seed_failures(db_session, user, count):
    now = utcnow()
    events = []
    for i in range(count):
        events.append(
            await create_event(
                db_session,
                AuditEventType.LOGIN_FAILURE,
                user=user,
                ip_address="198.51.100.9",
                created_at=now - timedelta(minutes=i + 1),
            )
        )
    return events


@pytest.mark.asyncio
async def test_audit_logs_require_admin(client: AsyncClient, db_session):
    user = await create_user(db_session)

    for path in (
        "/api/security/audit-logs",
        "/api/security/audit-logs/export.csv",
        "/api/security/audit-logs/summary",
    ):
        response = await client.get(path, headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["code"] == "AUTHORIZATION_ERROR"


@pytest.mark.asyncio
async def test_audit_logs_pagination(client: AsyncClient, db_session):
    """Audit Log Pagination

    Given 7 events
    When I request pages of 3
    Then total is 7 and totalPages is 3, newest first
    And a page past the end is empty but keeps the totals
    """
    admin = await _admin(db_session)
    events = await _seed_failures(db_session, admin, 7)

    first = await client.get(
        "/api/security/audit-logs", params={"page": 1, "limit": 3}, headers=auth_headers(admin)
    )
    assert first.status_code == 200
    page = first.json()["data"]
    assert page["total"] == 7
    assert page["totalPages"] == 3
    assert page["page"] == 1
    assert page["limit"] == 3
    assert [r["id"] for r in page["rows"]] == [str(e.id) for e in events[:3]]

    last = await client.get(
        "/api/security/audit-logs", params={"page": 3, "limit": 3}, headers=auth_headers(admin)
    )
    assert len(last.json()["data"]["rows"]) == 1

    beyond = await client.get(
        "/api/security/audit-logs", params={"page": 5, "limit": 3}, headers=auth_headers(admin)
    )
    assert beyond.status_code == 200
    assert beyond.json()["data"]["rows"] == []
    assert beyond.json()["data"]["total"] == 7


@pytest.mark.asyncio
async def test_audit_logs_limit_is_clamped(client: AsyncClient, db_session):
    admin = await _admin(db_session)

    response = await client.get(
        "/api/security/audit-logs", params={"limit": 100000}, headers=auth_headers(admin)
    )

    assert response.json()["data"]["limit"] == 200


@pytest.mark.asyncio
async def test_audit_logs_event_type_filter(client: AsyncClient, db_session):
    admin = await _admin(db_session)
    await create_event(db_session, AuditEventType.LOGIN_SUCCESS, user=admin)
    await create_event(db_session, AuditEventType.LOGIN_FAILURE, user=admin)
    await create_event(db_session, AuditEventType.LOGOUT, user=admin)

    both = await client.get(
        "/api/security/audit-logs",
        params={"eventType": "LOGIN_SUCCESS,LOGIN_FAILURE"},
        headers=auth_headers(admin),
    )
    assert both.json()["data"]["total"] == 2
    assert {r["eventType"] for r in both.json()["data"]["rows"]} == {
        "LOGIN_SUCCESS",
        "LOGIN_FAILURE",
    }

    unknown = await client.get(
        "/api/security/audit-logs",
        params={"eventType": "NOT_A_TYPE"},
        headers=auth_headers(admin),
    )
    assert unknown.status_code == 200
    assert unknown.json()["data"]["total"] == 0
    assert unknown.json()["data"]["rows"] == []


@pytest.mark.asyncio
async def test_audit_logs_search_and_ip_filters(client: AsyncClient, db_session):
    admin = await _admin(db_session)
    alice = await create_user(db_session, email="alice@acme.com", last_name="Liddell")
    bob = await create_user(db_session, email="bob@acme.com")
    await create_event(
        db_session, AuditEventType.LOGIN_SUCCESS, user=alice, ip_address="203.0.113.7"
    )
    await create_event(
        db_session, AuditEventType.LOGIN_SUCCESS, user=bob, ip_address="192.0.2.1"
    )

    by_name = await client.get(
        "/api/security/audit-logs", params={"q": "liddell"}, headers=auth_headers(admin)
    )
    rows = by_name.json()["data"]["rows"]
    assert len(rows) == 1
    assert rows[0]["user"]["email"] == "alice@acme.com"

    by_ip = await client.get(
        "/api/security/audit-logs",
        params={"ipAddress": "192.0.2"},
        headers=auth_headers(admin),
    )
    assert [r["userId"] for r in by_ip.json()["data"]["rows"]] == [str(bob.id)]

    by_user = await client.get(
        "/api/security/audit-logs",
        params={"userId": str(alice.id)},
        headers=auth_headers(admin),
    )
    assert by_user.json()["data"]["total"] == 1

    bad_user = await client.get(
        "/api/security/audit-logs", params={"userId": "nope"}, headers=auth_headers(admin)
    )
    assert bad_user.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_audit_logs_page_far_past_the_end_is_empty(client: AsyncClient, db_session):
    admin = await _admin(db_session)
    victim = await create_user(db_session, email="victim@acme.com")
    await _seed_failures(db_session, victim, 3)

    response = await client.get(
        "/api/security/audit-logs",
        params={"page": 10**17, "limit": 200},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["rows"] == []
    assert data["total"] == 3
    assert data["page"] == 10**17


@pytest.mark.asyncio
async def test_audit_logs_wildcards_in_search_are_literal(client: AsyncClient, db_session):
    admin = await _admin(db_session)
    alice = await create_user(db_session, email="alice@acme.com")
    await create_event(
        db_session, AuditEventType.LOGIN_SUCCESS, user=alice, ip_address="203.0.113.7"
    )

    for params in ({"q": "%"}, {"q": "_"}, {"ipAddress": "%"}, {"ipAddress": "_"}):
        response = await client.get(
            "/api/security/audit-logs", params=params, headers=auth_headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["total"] == 0, params


@pytest.mark.asyncio
async def test_audit_logs_date_range(client: AsyncClient, db_session):
    admin = await _admin(db_session)
    now = utcnow()
    await create_event(
        db_session, AuditEventType.LOGIN_SUCCESS, user=admin, created_at=now - timedelta(days=3)
    )
    recent = await create_event(
        db_session, AuditEventType.LOGIN_SUCCESS, user=admin, created_at=now - timedelta(hours=1)
    )

    response = await client.get(
        "/api/security/audit-logs",
        params={"from": (now - timedelta(days=1)).isoformat() + "Z"},
        headers=auth_headers(admin),
    )

    assert [r["id"] for r in response.json()["data"]["rows"]] == [str(recent.id)]


@pytest.mark.asyncio
async def test_audit_logs_severity_is_highest_alert(client: AsyncClient, db_session):
    """Given an event with LOW, HIGH and MEDIUM alerts, its row severity is HIGH"""
    admin = await _admin(db_session)
    flagged = await create_event(db_session, AuditEventType.LOGIN_FAILURE, user=admin)
    await create_event(db_session, AuditEventType.LOGIN_SUCCESS, user=admin)
    for severity in (AlertSeverity.LOW, AlertSeverity.HIGH, AlertSeverity.MEDIUM):
        await create_alert(db_session, event=flagged, user=admin, severity=severity)

    response = await client.get("/api/security/audit-logs", headers=auth_headers(admin))
    rows = {r["id"]: r for r in response.json()["data"]["rows"]}

    assert rows[str(flagged.id)]["severity"] == "HIGH"
    assert rows[str(flagged.id)]["alertCount"] == 3
    others = [r for r in rows.values() if r["id"] != str(flagged.id)]
    assert others[0]["severity"] is None
    assert others[0]["alertCount"] == 0

    high_only = await client.get(
        "/api/security/audit-logs", params={"severity": "HIGH"}, headers=auth_headers(admin)
    )
    assert [r["id"] for r in high_only.json()["data"]["rows"]] == [str(flagged.id)]


@pytest.mark.asyncio
async def test_export_csv(client: AsyncClient, db_session):
    admin = await _admin(db_session)
    victim = await create_user(db_session, email="victim@acme.com")
    event = await create_event(
        db_session,
        AuditEventType.LOGIN_FAILURE,
        user=victim,
        ip_address="198.51.100.9",
        metadata={"reason": "INVALID_PASSWORD", "note": 'said "hi", left'},
    )
    await create_alert(db_session, event=event, user=victim, alert_type=AlertType.BRUTE_FORCE)

    response = await client.get(
        "/api/security/audit-logs/export.csv",
        params={"eventType": "LOGIN_FAILURE"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="audit-logs-')
    assert disposition.endswith('.csv"')

    records = list(csv.reader(io.StringIO(response.text)))
    assert records[0] == [
        "createdAt",
        "eventType",
        "userEmail",
        "ipAddress",
        "userAgent",
        "geoLocation",
        "alertCount",
        "alertTypes",
        "metadata",
    ]
    assert len(records) == 2
    row = records[1]
    assert row[1] == "LOGIN_FAILURE"
    assert row[2] == "victim@acme.com"
    assert row[3] == "198.51.100.9"
    assert row[6] == "1"
    assert row[7] == "BRUTE_FORCE"
    assert json.loads(row[8])["note"] == 'said "hi", left'


@pytest.mark.asyncio
async def test_summary_24h(client: AsyncClient, db_session):
    """Dashboard Summary

    Given failures 26h, 20h and 5h ago and a success 1h ago
    When I request the 24h summary
    Then only the two recent failures are bucketed by hour
    And the top source IPs and event type breakdown cover the window only
    """
    admin = await _admin(db_session)
    now = utcnow()
    await create_event(
        db_session, AuditEventType.LOGIN_FAILURE, ip_address="10.0.0.1",
        created_at=now - timedelta(hours=26),
    )
    await create_event(
        db_session, AuditEventType.LOGIN_FAILURE, ip_address="10.0.0.2",
        created_at=now - timedelta(hours=20),
    )
    await create_event(
        db_session, AuditEventType.LOGIN_FAILURE, ip_address="10.0.0.2",
        created_at=now - timedelta(hours=5),
    )
    await create_event(
        db_session, AuditEventType.LOGIN_SUCCESS, user=admin,
        created_at=now - timedelta(hours=1),
    )

    response = await client.get(
        "/api/security/audit-logs/summary", params={"window": "24h"}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    summary = response.json()["data"]
    assert summary["window"] == "24h"
    buckets = summary["failedLoginsOverTime"]
    assert [b["c"] for b in buckets] == [1, 1]
    assert buckets[0]["t"] < buckets[1]["t"]
    assert all(b["t"].endswith(":00:00Z") for b in buckets)
    assert summary["topSourceIps"] == [{"ipAddress": "10.0.0.2", "count": 2}]
    assert {b["eventType"]: b["count"] for b in summary["eventTypeBreakdown"]} == {
        "LOGIN_FAILURE": 2,
        "LOGIN_SUCCESS": 1,
    }


@pytest.mark.asyncio
async def test_summary_defaults_to_24h_and_rejects_unknown_window(
    client: AsyncClient, db_session
):
    admin = await _admin(db_session)

    default = await client.get("/api/security/audit-logs/summary", headers=auth_headers(admin))
    assert default.json()["data"]["window"] == "24h"

    bad = await client.get(
        "/api/security/audit-logs/summary", params={"window": "1y"}, headers=auth_headers(admin)
    )
    assert bad.status_code == 400
    assert bad.json()["code"] == "VALIDATION_ERROR"
