# passsync/services/notifications/reminders.py
"""
Reminder derivation. Pure functions: timeline state in, creation specs out.

Every place that turns milestones into reminders (admin endpoint, seed
script, any future automatic trigger) goes through derive_milestone_reminders
so they cannot drift apart.
"""

from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from ...schemas.notifications import NotificationCreate
from ...utils.clock import parse_instant, to_naive_utc

DEFAULT_LEAD_MINUTES = 30
UPCOMING = "upcoming"


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def derive_milestone_reminders(
    pass_code: str,
    timeline: Iterable[Any],
    now: datetime,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
) -> list[NotificationCreate]:
    """
    One reminder per upcoming milestone, due `lead_minutes` before it.

    - status != "upcoming" or unparseable date → skipped
    - milestone already past → skipped
    - milestone still ahead but inside the lead window → reminder due now
      (scheduled_for in the past, picked up immediately)
    """
    lead = timedelta(minutes=lead_minutes)
    specs = []

    for milestone in timeline:
        if _field(milestone, "status") != UPCOMING:
            continue

        milestone_at = parse_instant(_field(milestone, "date"))
        if milestone_at is None or milestone_at <= now:
            continue

        title = _field(milestone, "title") or "Milestone"
        specs.append(NotificationCreate(
            pass_code=pass_code,
            type="milestone_reminder",
            title=f"Upcoming: {title}",
            message=f"Your {title} is scheduled for {_field(milestone, 'date')}. Please prepare accordingly.",
            priority="high",
            scheduled_for=milestone_at - lead,
        ))

    return specs


def build_interview_reminder(
    pass_code: str,
    interview_title: str,
    interview_at: datetime,
    now: datetime,
    minutes_before: int = DEFAULT_LEAD_MINUTES,
) -> Optional[NotificationCreate]:
    """Reminder `minutes_before` an interview, or None if that moment has passed."""
    reminder_at = to_naive_utc(interview_at) - timedelta(minutes=minutes_before)
    if reminder_at <= now:
        return None

    return NotificationCreate(
        pass_code=pass_code,
        type="interview_reminder",
        title=f"Reminder: {interview_title}",
        message=(
            f'Your interview "{interview_title}" starts in {minutes_before} minutes. '
            "Please be prepared."
        ),
        priority="high",
        scheduled_for=reminder_at,
    )
