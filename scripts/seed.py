"""
Demo data: candidates with timelines, the two default links' slots and
milestone reminders for upcoming timeline steps.

Wipes slots, notifications, settings, admin actions and candidates first.
Reminders are stored pending; the server's scheduler delivers them.

    python -m scripts.seed
"""

from datetime import timedelta

from passsync.config import settings
from passsync.database import SessionLocal, init_db
from passsync.models import (
    AdminActions,
    Candidates,
    InterviewSlots,
    Notifications,
    PassSettings,
    TimelineEntries,
)
from passsync.services.notifications import NotificationStore, derive_milestone_reminders
from passsync.services.slots import SlotStore, build_default_slots
from passsync.utils.clock import utcnow


# ======================================================
# DEMO DATA
# ======================================================

def _iso(delta: timedelta) -> str:
    return (utcnow() + delta).replace(microsecond=0).isoformat() + "Z"


CANDIDATES = [
    {
        "code": "PASS-001",
        "name": "Sarah Al-Mansouri",
        "title": "Senior UX Designer",
        "email": "sarah.m@example.com",
        "phone": "+971 50 123 4567",
        "department": "Design",
        "location": "Abu Dhabi, UAE",
        "timeline": [
            ("Application Received", "Nov 25", "completed"),
            ("Screening Call", "Nov 26", "completed"),
            ("Portfolio Review", "Nov 28", "completed"),
            ("Final Interview", _iso(timedelta(hours=3)), "current"),
        ],
    },
    {
        "code": "PASS-002",
        "name": "Ahmed Hassan",
        "title": "Full Stack Developer",
        "email": "ahmed.h@example.com",
        "phone": "+971 55 234 5678",
        "department": "Engineering",
        "location": "Dubai, UAE",
        "timeline": [
            ("Application Received", "Nov 20", "completed"),
            ("Technical Screening", "Nov 22", "completed"),
            ("Coding Challenge", "Nov 24", "completed"),
            ("Team Interview", _iso(timedelta(days=2)), "upcoming"),
        ],
    },
    {
        "code": "PASS-003",
        "name": "Fatima Al-Nuaimi",
        "title": "Product Manager",
        "email": "fatima.n@example.com",
        "phone": "+971 52 345 6789",
        "department": "Product",
        "location": "Abu Dhabi, UAE",
        "timeline": [
            ("Application Received", "Nov 18", "completed"),
            ("Phone Screen", "Nov 19", "completed"),
            ("Case Study", "Nov 23", "completed"),
            ("Executive Interview", _iso(timedelta(days=5)), "upcoming"),
        ],
    },
]

# (link id, manager code, template)
LINKS = [
    ("link-final-interview", "REQ-001", "interview"),
    ("link-onboarding-kit", "ONB-001", "onboarding"),
]


# ======================================================
# MAIN LOGIC
# ======================================================

def main():
    init_db()
    db = SessionLocal()
    try:
        for model in (TimelineEntries, Candidates, InterviewSlots, Notifications, PassSettings, AdminActions):
            db.query(model).delete()
        db.commit()

        now = utcnow()
        notifications = NotificationStore(db)

        for data in CANDIDATES:
            data = dict(data)
            timeline = data.pop("timeline")

            candidate = Candidates(**data, status="Active", created_at=now)
            db.add(candidate)
            db.flush()

            for order, (title, date, status) in enumerate(timeline, start=1):
                db.add(TimelineEntries(
                    candidate_id=candidate.id,
                    title=title,
                    date=date,
                    status=status,
                    order=order,
                    created_at=now,
                ))
            db.commit()

            steps = [{"title": t, "date": d, "status": s} for t, d, s in timeline]
            reminders = derive_milestone_reminders(
                candidate.code, steps, now, settings.reminder_lead_minutes
            )
            for spec in reminders:
                notifications.create(spec)

            print(f"✔ {candidate.code} {candidate.name}: {len(reminders)} reminders")

        slots = SlotStore(db)
        for link_id, manager_code, template in LINKS:
            specs = build_default_slots(link_id, manager_code, template)
            for spec in specs:
                slots.create_slot(spec)
            print(f"✔ {link_id}: {len(specs)} slots")

    finally:
        db.close()

    print("Database seeded.")


if __name__ == "__main__":
    main()
