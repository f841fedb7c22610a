# passsync/services/notifications/store.py
"""
NotificationStore: the only writer of notification rows.

States:
    pending (delivered=False) ──mark_delivered──► delivered ──mark_read──► read

A notification without scheduled_for counts as due immediately. Rows are
never deleted (audit trail).
"""

import logging
import threading
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import InvalidStateError, NotFoundError
from ...models import Notifications
from ...schemas.notifications import NotificationCreate, NotificationRead
from ...utils.clock import utcnow

logger = logging.getLogger(__name__)


def is_due(scheduled_for: Optional[datetime], now: datetime) -> bool:
    return scheduled_for is None or scheduled_for <= now


class NotificationStore:

    _lock = threading.Lock()

    def __init__(self, db: Session):
        self.db = db

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, notification_id: int) -> NotificationRead:
        return NotificationRead.model_validate(self._get_row(notification_id))

    def list_pending(self, now: Optional[datetime] = None) -> list[NotificationRead]:
        """Undelivered notifications whose time has come (full scan, oldest first)."""
        now = now or utcnow()
        rows = (
            self.db.query(Notifications)
            .filter(
                Notifications.delivered.is_(False),
                or_(
                    Notifications.scheduled_for.is_(None),
                    Notifications.scheduled_for <= now,
                ),
            )
            .order_by(Notifications.scheduled_for, Notifications.id)
            .all()
        )
        return [NotificationRead.model_validate(r) for r in rows]

    def list_for_code(self, pass_code: str, include_pending: bool = False) -> list[NotificationRead]:
        """Newest first. Pending (not yet delivered) rows only on request."""
        q = self.db.query(Notifications).filter(Notifications.pass_code == pass_code)
        if not include_pending:
            q = q.filter(Notifications.delivered.is_(True))
        rows = q.order_by(Notifications.created_at.desc(), Notifications.id.desc()).all()
        return [NotificationRead.model_validate(r) for r in rows]

    def list_unread(self, pass_code: str) -> list[NotificationRead]:
        rows = (
            self.db.query(Notifications)
            .filter(
                Notifications.pass_code == pass_code,
                Notifications.delivered.is_(True),
                Notifications.read.is_(False),
            )
            .order_by(Notifications.created_at.desc(), Notifications.id.desc())
            .all()
        )
        return [NotificationRead.model_validate(r) for r in rows]

    # ── Write ────────────────────────────────────────────────────────────

    def create(self, data: NotificationCreate) -> NotificationRead:
        """Store as pending. Delivery (immediate or scheduled) is the caller's move."""
        with self._lock:
            row = Notifications(
                pass_code=data.pass_code,
                type=data.type,
                title=data.title,
                message=data.message,
                priority=data.priority,
                read=False,
                delivered=False,
                scheduled_for=data.scheduled_for,
                created_at=utcnow(),
            )
            self.db.add(row)
            self._commit()
            self.db.refresh(row)
            created = NotificationRead.model_validate(row)

        logger.info(
            f"Notification created: id={created.id} passCode={created.pass_code} "
            f"type={created.type} scheduledFor={created.scheduled_for}"
        )
        return created

    def mark_delivered(
        self,
        notification_id: int,
        now: Optional[datetime] = None,
    ) -> tuple[NotificationRead, bool]:
        """
        Flip delivered. Idempotent.

        Returns (notification, changed); changed is False when it was already
        delivered, so callers push only on the first promotion.
        """
        with self._lock:
            row = self._get_row(notification_id)
            if row.delivered:
                return NotificationRead.model_validate(row), False

            row.delivered = True
            row.delivered_at = now or utcnow()
            self._commit()
            self.db.refresh(row)
            return NotificationRead.model_validate(row), True

    def mark_read(self, notification_id: int) -> NotificationRead:
        with self._lock:
            row = self._get_row(notification_id)
            if not row.delivered:
                raise InvalidStateError("Notification has not been delivered yet")
            if not row.read:
                row.read = True
                self._commit()
                self.db.refresh(row)
            return NotificationRead.model_validate(row)

    # ── Internals ────────────────────────────────────────────────────────

    def _get_row(self, notification_id: int) -> Notifications:
        row = self.db.get(Notifications, notification_id)
        if not row:
            raise NotFoundError("Notification", notification_id)
        return row

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
