"""
Tests for slot persistence, booking rules and slot_update fan-out.
"""
from __future__ import annotations

import asyncio

import pytest

from passsync.errors import NotFoundError, ValidationFailedError
from passsync.schemas.slots import SlotCreate
from passsync.services.slots import SlotStore, SlotSyncService, build_default_slots


def _create(store, link_id="L1", label="Morning", status="open", candidate_code=None):
    return store.create_slot(SlotCreate(
        link_id=link_id,
        label=label,
        date="Dec 05",
        time="09:30",
        manager_code="REQ-001",
        status=status,
        candidate_code=candidate_code,
    ))


# ── Store ────────────────────────────────────────────────────────────────

def test_create_and_list_in_insertion_order(db):
    store = SlotStore(db)
    first = _create(store, label="Morning")
    second = _create(store, label="Morning")  # duplicates allowed
    _create(store, link_id="L2")

    listed = store.list_by_link("L1")
    assert [s.id for s in listed] == [first.id, second.id]
    assert len(store.list_by_manager("REQ-001")) == 3


def test_create_open_slot_drops_candidate(db):
    slot = _create(SlotStore(db), status="open", candidate_code="PASS-001")
    assert slot.candidate_code is None


def test_create_booked_slot_requires_candidate(db):
    with pytest.raises(ValidationFailedError):
        _create(SlotStore(db), status="booked")


def test_update_unknown_slot(db):
    with pytest.raises(NotFoundError):
        SlotStore(db).update_slot(999, {"status": "held"})


def test_booking_releases_other_booking_in_same_link(db):
    store = SlotStore(db)
    a = _create(store)
    b = _create(store)
    other_link = _create(store, link_id="L2", status="booked", candidate_code="PASS-001")

    store.update_slot(a.id, {"status": "booked", "candidate_code": "PASS-001"})
    updated, released = store.update_slot(b.id, {"status": "booked", "candidate_code": "PASS-001"})

    assert updated.candidate_code == "PASS-001"
    assert [s.id for s in released] == [a.id]
    assert store.get(a.id).status == "open"
    assert store.get(a.id).candidate_code is None
    assert store.get(other_link.id).status == "booked"
    assert [s.id for s in store.list_by_candidate("PASS-001")] == [b.id, other_link.id]


def test_delete_returns_last_state(db):
    store = SlotStore(db)
    slot = _create(store, status="held")
    deleted = store.delete_slot(slot.id)
    assert deleted.status == "held"
    assert store.list_by_link("L1") == []


def test_build_default_interview_slots():
    specs = build_default_slots("L9", "REQ-001")
    assert [(s.label, s.time, s.status) for s in specs] == [
        ("Morning", "09:30", "open"),
        ("Midday", "12:00", "held"),
        ("Late", "16:00", "open"),
    ]
    assert all(s.link_id == "L9" and s.manager_code == "REQ-001" for s in specs)


# ── Sync ─────────────────────────────────────────────────────────────────

def test_booking_pushes_one_slot_update_to_link_subscribers(db, broadcaster, connect):
    service = SlotSyncService(db, broadcaster)
    slot = _create(service.store)
    _, watcher = connect(links=("L1",))
    _, other = connect(links=("L2",))

    asyncio.run(service.update_slot(slot.id, {"status": "booked", "candidate_code": "PASS-001"}))

    assert len(watcher.messages) == 1
    message = watcher.messages[0]
    assert message["type"] == "slot_update"
    assert message["linkId"] == "L1"
    assert message["action"] == "updated"
    assert message["data"]["status"] == "booked"
    assert message["data"]["candidateCode"] == "PASS-001"
    assert other.messages == []


def test_failed_mutation_pushes_nothing(db, broadcaster, connect):
    service = SlotSyncService(db, broadcaster)
    slot = _create(service.store)
    _, watcher = connect(links=("L1",))

    with pytest.raises(ValidationFailedError):
        asyncio.run(service.update_slot(slot.id, {"status": "booked"}))
    assert watcher.sent == []


def test_released_slot_is_pushed_before_booked_slot(db, broadcaster, connect):
    service = SlotSyncService(db, broadcaster)
    a = _create(service.store)
    b = _create(service.store)
    service.store.update_slot(a.id, {"status": "booked", "candidate_code": "PASS-001"})
    _, watcher = connect(links=("L1",))

    asyncio.run(service.update_slot(b.id, {"status": "booked", "candidate_code": "PASS-001"}))

    assert [(m["data"]["id"], m["data"]["status"]) for m in watcher.messages] == [
        (a.id, "open"),
        (b.id, "booked"),
    ]


def test_create_and_delete_carry_action(db, broadcaster, connect):
    service = SlotSyncService(db, broadcaster)
    _, watcher = connect(links=("L1",))

    async def scenario():
        slot = await service.create_slot(SlotCreate(
            link_id="L1", label="Late", date="Dec 05", time="16:00", manager_code="REQ-001",
        ))
        await service.delete_slot(slot.id)

    asyncio.run(scenario())
    assert [m["action"] for m in watcher.messages] == ["created", "deleted"]


def test_closed_subscriber_does_not_fail_mutation(db, broadcaster, connect):
    service = SlotSyncService(db, broadcaster)
    slot = _create(service.store)
    _, closed = connect(links=("L1",))
    _, broken = connect(links=("L1",), fail=True)
    _, live = connect(links=("L1",))
    closed.close()

    updated = asyncio.run(service.update_slot(slot.id, {"status": "held"}))

    assert updated.status == "held"
    assert closed.sent == []
    assert len(live.messages) == 1


# ── HTTP ─────────────────────────────────────────────────────────────────

def test_slot_http_flow(app_client, live_connect):
    _app, client = app_client
    _, watcher = live_connect(links=("link-final-interview",))

    res = client.post("/api/slots", json={
        "linkId": "link-final-interview",
        "label": "Morning",
        "date": "Dec 05",
        "time": "09:30",
        "managerCode": "REQ-001",
    })
    assert res.status_code == 201
    slot = res.json()
    assert slot["status"] == "open"
    assert slot["createdAt"].endswith("Z")

    res = client.patch(f"/api/slots/{slot['id']}", json={"status": "booked", "candidateCode": "PASS-001"})
    assert res.status_code == 200
    assert res.json()["candidateCode"] == "PASS-001"

    res = client.get("/api/slots/candidate/PASS-001")
    assert [s["id"] for s in res.json()] == [slot["id"]]

    res = client.delete(f"/api/slots/{slot['id']}")
    assert res.status_code == 204
    assert client.get("/api/slots/link/link-final-interview").json() == []

    assert [m["action"] for m in watcher.messages] == ["created", "updated", "deleted"]


def test_patch_booked_without_candidate_is_400(app_client):
    _app, client = app_client
    slot = client.post("/api/slots", json={
        "linkId": "L1", "label": "Morning", "date": "Dec 05", "time": "09:30", "managerCode": "REQ-001",
    }).json()

    res = client.patch(f"/api/slots/{slot['id']}", json={"status": "booked"})
    assert res.status_code == 400
    assert res.json()["details"][0]["loc"] == ["candidateCode"]


def test_missing_slot_is_404(app_client):
    _app, client = app_client
    res = client.patch("/api/slots/12345", json={"status": "held"})
    assert res.status_code == 404
    assert res.json() == {"detail": "Slot not found"}


def test_invalid_body_is_400(app_client):
    _app, client = app_client
    res = client.post("/api/slots", json={"linkId": "L1"})
    assert res.status_code == 400
    assert res.json()["details"]


def test_seed_link(app_client, live_connect):
    _app, client = app_client
    _, watcher = live_connect(links=("L7",))

    res = client.post("/api/slots/link/L7/seed", json={"managerCode": "REQ-001"})
    assert res.status_code == 201
    assert [s["label"] for s in res.json()] == ["Morning", "Midday", "Late"]
    assert len(watcher.messages) == 3
