# passsync/services/slots/transitions.py
"""
Slot status rules. Pure functions, no session access.

    open ──book(C)──► booked(C)
    held ──book(C)──► booked(C)
    booked ─────────► open | held      (occupant cleared)
    open ◄──────────► held

Booking does not compare-and-swap: booking an already booked slot replaces
the occupant (last write wins). Subscribers converge on the next
slot_update for the link.
"""

from typing import Any, Optional

from ...errors import ValidationFailedError

OPEN = "open"
HELD = "held"
BOOKED = "booked"

STATUSES = (OPEN, HELD, BOOKED)


def resolve_occupancy(
    current_status: str,
    current_candidate: Optional[str],
    changes: dict[str, Any],
) -> tuple[str, Optional[str]]:
    """
    Compute (status, candidate_code) after applying `changes`.

    - resulting status booked → candidate from changes, else the current one;
      none at all is a validation error
    - resulting status open / held → candidate cleared, whatever was sent
    """
    status = changes.get("status") or current_status
    if status not in STATUSES:
        raise ValidationFailedError(
            "Invalid slot status",
            [{"loc": ["status"], "msg": f"must be one of {', '.join(STATUSES)}"}],
        )

    if status != BOOKED:
        return status, None

    candidate = changes.get("candidate_code") or current_candidate
    if not candidate:
        raise ValidationFailedError(
            "candidateCode is required when status is booked",
            [{"loc": ["candidateCode"], "msg": "required when status is booked"}],
        )
    return status, candidate


def apply_changes(slot, changes: dict[str, Any]) -> None:
    """Apply a partial update to a slot-like object in place."""
    status, candidate = resolve_occupancy(slot.status, slot.candidate_code, changes)

    for field in ("label", "date", "time", "notes"):
        if field in changes and changes[field] is not None:
            setattr(slot, field, changes[field])

    slot.status = status
    slot.candidate_code = candidate


def is_booking_by(slot, candidate_code: Optional[str]) -> bool:
    return bool(candidate_code) and slot.status == BOOKED and slot.candidate_code == candidate_code
