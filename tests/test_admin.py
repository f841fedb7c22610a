"""
Tests for admin bulk operations.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from passsync.models import AdminActions, Candidates, TimelineEntries
from passsync.services.admin_actions import AdminService

NOW = datetime(2026, 12, 1, 9, 0, 0)


def _candidate(db, code="PASS-001", timeline=()):
    candidate = Candidates(code=code, name="Sarah Al-Mansouri", title="Senior UX Designer", email="s@example.com")
    db.add(candidate)
    db.flush()
    for order, (title, date, status) in enumerate(timeline, start=1):
        db.add(TimelineEntries(candidate_id=candidate.id, title=title, date=date, status=status, order=order))
    db.commit()
    return candidate


def test_broadcast_reaches_each_target_once(db, broadcaster, connect):
    _, x = connect(pass_code="PASS-001")
    _, y = connect(pass_code="PASS-001")
    _, z = connect(pass_code="PASS-002")
    _, w = connect()

    action, count = asyncio.run(AdminService(db, broadcaster).broadcast(
        ["PASS-001", "PASS-002", "PASS-001"], "Office closed", "Friday is a holiday",
    ))

    assert count == 2
    for transport in (x, y, z):
        assert [m["type"] for m in transport.messages] == ["notification"]
    assert x.messages[0]["data"]["type"] == "broadcast"
    assert w.sent == []

    assert action.action_type == "broadcast"
    assert action.target_codes == ["PASS-001", "PASS-002"]
    assert action.payload == {"title": "Office closed", "message": "Friday is a holiday", "notificationCount": 2}


def test_batch_onboard(db, broadcaster, connect):
    _candidate(db, "PASS-001")
    _, inbox = connect(pass_code="PASS-001")

    action, results = asyncio.run(AdminService(db, broadcaster).batch_onboard(["PASS-001", "PASS-404"]))

    assert [(r.code, r.status) for r in results] == [("PASS-001", "onboarded"), ("PASS-404", "not_found")]
    db.expire_all()
    assert db.query(Candidates).filter_by(code="PASS-001").one().status == "Onboarding"

    assert [m["type"] for m in inbox.messages] == ["notification", "admin_action"]
    assert inbox.messages[0]["data"]["title"] == "Welcome to Onboarding!"
    assert inbox.messages[0]["data"]["priority"] == "high"
    assert inbox.messages[1]["data"]["id"] == action.id
    assert db.query(AdminActions).count() == 1


def test_milestone_reminders_for_candidate(db, broadcaster, connect):
    candidate = _candidate(db, timeline=[
        ("Application Received", "Nov 25", "completed"),
        ("Team Interview", (NOW + timedelta(minutes=10)).isoformat() + "Z", "upcoming"),
        ("Offer Call", (NOW + timedelta(days=2)).isoformat() + "Z", "upcoming"),
    ])
    _, inbox = connect(pass_code="PASS-001")

    code, reminders = asyncio.run(AdminService(db, broadcaster).milestone_reminders(candidate.id, NOW))

    assert code == "PASS-001"
    assert [r.title for r in reminders] == ["Upcoming: Team Interview", "Upcoming: Offer Call"]
    # inside the lead window: delivered right away; the other waits for the scheduler
    assert [r.delivered for r in reminders] == [True, False]
    assert len(inbox.messages) == 1


def test_interview_reminder_in_past_is_skipped(db, broadcaster):
    service = AdminService(db, broadcaster)
    assert asyncio.run(service.interview_reminder("PASS-001", "Final", NOW + timedelta(minutes=5), now=NOW)) is None

    reminder = asyncio.run(service.interview_reminder("PASS-001", "Final", NOW + timedelta(hours=2), 60, now=NOW))
    assert reminder.scheduled_for == NOW + timedelta(hours=1)
    assert reminder.delivered is False


def test_admin_http(app_client, db):
    _app, client = app_client
    _candidate(db, "PASS-002")

    res = client.post("/api/admin/batch-onboard", json={"candidateCodes": ["PASS-002"]})
    assert res.status_code == 200
    assert res.json()["results"] == [{"code": "PASS-002", "status": "onboarded"}]

    res = client.post("/api/admin/broadcast", json={
        "targetCodes": ["PASS-002"], "title": "Hi", "message": "Welcome",
    })
    assert res.json()["notificationCount"] == 1

    res = client.post("/api/admin/schedule-reminder", json={
        "passCode": "PASS-002", "title": "Docs", "message": "Upload your ID", "scheduledFor": "2999-01-01T08:00:00Z",
    })
    assert res.status_code == 201
    assert res.json()["type"] == "reminder"
    assert res.json()["delivered"] is False

    actions = client.get("/api/admin/actions?limit=1").json()
    assert len(actions) == 1
    assert client.get("/api/admin/actions?limit=500").status_code == 400

    res = client.post("/api/admin/candidates/999/milestone-reminders")
    assert res.status_code == 404

    res = client.post("/api/admin/announce", json={"payload": {"text": "hello"}})
    assert res.json() == {"type": "announcement", "delivered": 0}

    res = client.post("/api/admin/broadcast", json={"targetCodes": [], "title": "Hi", "message": "x"})
    assert res.status_code == 400


def test_milestone_reminders_on_both_paths(app_client, db):
    _app, client = app_client
    candidate = _candidate(db, "PASS-003", timeline=[
        ("Executive Interview", "2999-01-01T10:00:00Z", "upcoming"),
    ])

    res = client.post(f"/api/admin/milestone-reminders/{candidate.id}")
    assert res.status_code == 200
    assert res.json()["candidateCode"] == "PASS-003"
    assert res.json()["remindersScheduled"] == 1

    res = client.post(f"/api/admin/candidates/{candidate.id}/milestone-reminders")
    assert res.json()["remindersScheduled"] == 1
    assert len(client.get("/api/notifications/PASS-003?includePending=true").json()) == 2
