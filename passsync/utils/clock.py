"""
Time helpers.

All persisted timestamps are naive UTC; the wire format marks them with "Z".
"""

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_ms() -> int:
    """Unix time in milliseconds (envelope `timestamp`)."""
    return int(time.time() * 1000)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_instant(value) -> datetime | None:
    """
    Parse a timeline date into naive UTC.

    Accepts datetime objects and ISO 8601 strings (with or without offset / "Z").
    Anything else (e.g. "Dec 05", "Today, 2:00 PM") → None.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    try:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except (ValueError, TypeError):
        return None
    return to_naive_utc(parsed)
