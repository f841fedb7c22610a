# passsync/services/slots/store.py
"""
SlotStore: the only writer of interview_slots rows.

Every method returns SlotRead snapshots, never live ORM rows, so results
can cross thread boundaries (threadpool → event loop) safely.
"""

import logging
import threading
from typing import Any

from sqlalchemy.orm import Session

from ...errors import NotFoundError
from ...models import InterviewSlots
from ...schemas.slots import SlotCreate, SlotRead
from ...utils.clock import utcnow
from .transitions import BOOKED, OPEN, apply_changes, is_booking_by, resolve_occupancy

logger = logging.getLogger(__name__)


class SlotStore:
    """Slot persistence + transition enforcement."""

    # One mutex for the whole store; mutations are short and cardinality is small.
    _lock = threading.Lock()

    def __init__(self, db: Session):
        self.db = db

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, slot_id: int) -> SlotRead:
        return SlotRead.model_validate(self._get_row(slot_id))

    def list_by_link(self, link_id: str) -> list[SlotRead]:
        return self._list(InterviewSlots.link_id == link_id)

    def list_by_manager(self, manager_code: str) -> list[SlotRead]:
        return self._list(InterviewSlots.manager_code == manager_code)

    def list_by_candidate(self, candidate_code: str) -> list[SlotRead]:
        return self._list(InterviewSlots.candidate_code == candidate_code)

    # ── Write ────────────────────────────────────────────────────────────

    def create_slot(self, data: SlotCreate) -> SlotRead:
        status, candidate = resolve_occupancy(data.status, None, data.model_dump())
        now = utcnow()
        with self._lock:
            row = InterviewSlots(
                link_id=data.link_id,
                label=data.label,
                date=data.date,
                time=data.time,
                status=status,
                manager_code=data.manager_code,
                candidate_code=candidate,
                notes=data.notes,
                created_at=now,
                updated_at=now,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            created = SlotRead.model_validate(row)

        logger.info(f"Slot created: id={created.id} link={created.link_id} status={created.status}")
        return created

    def update_slot(
        self,
        slot_id: int,
        changes: dict[str, Any],
    ) -> tuple[SlotRead, list[SlotRead]]:
        """
        Apply a partial change.

        Returns (updated slot, slots released as a side effect). When the
        slot becomes booked by C, any other slot of the same link booked by
        C goes back to open: one booking per candidate per link.
        """
        with self._lock:
            row = self._get_row(slot_id)
            previous = row.status
            apply_changes(row, changes)
            now = utcnow()
            row.updated_at = now

            released_rows = []
            if row.status == BOOKED:
                siblings = (
                    self.db.query(InterviewSlots)
                    .filter(
                        InterviewSlots.link_id == row.link_id,
                        InterviewSlots.id != row.id,
                        InterviewSlots.candidate_code == row.candidate_code,
                    )
                    .all()
                )
                for sibling in siblings:
                    if is_booking_by(sibling, row.candidate_code):
                        sibling.status = OPEN
                        sibling.candidate_code = None
                        sibling.updated_at = now
                        released_rows.append(sibling)

            self.db.commit()
            self.db.refresh(row)
            updated = SlotRead.model_validate(row)
            released = [SlotRead.model_validate(r) for r in released_rows]

        logger.info(
            f"Slot updated: id={slot_id} {previous} → {updated.status} "
            f"candidate={updated.candidate_code} released={[s.id for s in released]}"
        )
        return updated, released

    def delete_slot(self, slot_id: int) -> SlotRead:
        """Remove the slot. Returns the last state it had."""
        with self._lock:
            row = self._get_row(slot_id)
            snapshot = SlotRead.model_validate(row)
            self.db.delete(row)
            self.db.commit()

        logger.info(f"Slot deleted: id={slot_id} link={snapshot.link_id}")
        return snapshot

    # ── Internals ────────────────────────────────────────────────────────

    def _get_row(self, slot_id: int) -> InterviewSlots:
        row = self.db.get(InterviewSlots, slot_id)
        if not row:
            raise NotFoundError("Slot", slot_id)
        return row

    def _list(self, criterion) -> list[SlotRead]:
        rows = (
            self.db.query(InterviewSlots)
            .filter(criterion)
            .order_by(InterviewSlots.id)
            .all()
        )
        return [SlotRead.model_validate(r) for r in rows]
