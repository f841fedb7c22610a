"""
Tests for the scheduled delivery loop.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from passsync.schemas.notifications import NotificationCreate
from passsync.services.notifications import NotificationStore
from passsync.services.reminder_checker import ReminderScheduler

T0 = datetime(2026, 12, 1, 9, 0, 0)
TICK = timedelta(seconds=60)


def _scheduler(broadcaster, session_factory):
    return ReminderScheduler(broadcaster, session_factory=session_factory, interval_seconds=60)


def test_notification_delivered_on_the_tick_it_comes_due(db, session_factory, broadcaster, connect):
    _, inbox = connect(pass_code="PASS-001")
    _, stranger = connect(pass_code="PASS-002")
    store = NotificationStore(db)
    created = store.create(NotificationCreate(
        pass_code="PASS-001",
        type="reminder",
        title="Interview soon",
        message="Be ready",
        scheduled_for=T0 + 2 * TICK,
    ))
    scheduler = _scheduler(broadcaster, session_factory)

    assert asyncio.run(scheduler.tick(T0 + TICK)) == 0
    assert inbox.sent == []

    assert asyncio.run(scheduler.tick(T0 + 2 * TICK)) == 1
    assert len(inbox.messages) == 1
    assert inbox.messages[0]["data"]["id"] == created.id
    assert stranger.sent == []

    db.expire_all()
    assert store.get(created.id).delivered is True

    assert asyncio.run(scheduler.tick(T0 + 3 * TICK)) == 0
    assert len(inbox.messages) == 1


def test_failure_on_one_notification_does_not_stop_batch(
    db, session_factory, broadcaster, connect, monkeypatch
):
    _, inbox = connect(pass_code="PASS-001")
    store = NotificationStore(db)
    first = store.create(NotificationCreate(pass_code="PASS-001", type="reminder", title="A", message="a"))
    second = store.create(NotificationCreate(pass_code="PASS-001", type="reminder", title="B", message="b"))
    scheduler = _scheduler(broadcaster, session_factory)

    original = NotificationStore.mark_delivered

    def flaky(self, notification_id, now=None):
        if notification_id == first.id:
            raise RuntimeError("disk full")
        return original(self, notification_id, now)

    monkeypatch.setattr(NotificationStore, "mark_delivered", flaky)
    assert asyncio.run(scheduler.tick(T0)) == 1
    assert [m["data"]["id"] for m in inbox.messages] == [second.id]

    monkeypatch.setattr(NotificationStore, "mark_delivered", original)
    assert asyncio.run(scheduler.tick(T0 + TICK)) == 1
    assert [m["data"]["id"] for m in inbox.messages] == [second.id, first.id]


def test_start_and_stop(session_factory, broadcaster):
    scheduler = ReminderScheduler(
        broadcaster,
        session_factory=session_factory,
        interval_seconds=0.01,
        initial_delay_seconds=0,
    )

    async def scenario():
        task = scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()
        return task

    task = asyncio.run(scenario())
    assert task.done()
