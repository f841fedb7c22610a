# passsync/services/notifications/service.py
"""
Notification creation + delivery.

Delivery = mark delivered, then push to the pass-code's subscribers.
The push happens only for the call that actually flipped the flag, so a
notification is pushed at most once even if the scheduler and an API call
race on it.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...schemas.notifications import NotificationCreate, NotificationRead
from ...utils.clock import utcnow
from ..realtime import BroadcastRouter
from .store import NotificationStore, is_due

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, db: Session, broadcaster: BroadcastRouter):
        self.store = NotificationStore(db)
        self.broadcaster = broadcaster

    async def create(
        self,
        data: NotificationCreate,
        now: Optional[datetime] = None,
    ) -> NotificationRead:
        """Store; deliver right away when already due, otherwise leave it to the scheduler."""
        now = now or utcnow()
        created = await asyncio.to_thread(self.store.create, data)
        if is_due(created.scheduled_for, now):
            return await self.deliver(created.id, now)
        return created

    async def create_many(
        self,
        specs: list[NotificationCreate],
        now: Optional[datetime] = None,
    ) -> list[NotificationRead]:
        return [await self.create(spec, now) for spec in specs]

    async def deliver(
        self,
        notification_id: int,
        now: Optional[datetime] = None,
    ) -> NotificationRead:
        notification, changed = await asyncio.to_thread(
            self.store.mark_delivered, notification_id, now
        )
        if changed:
            await self.broadcaster.publish_notification(notification.pass_code, notification)
        else:
            logger.debug(f"Notification {notification_id} already delivered, not pushed again")
        return notification

    async def mark_read(self, notification_id: int) -> NotificationRead:
        return await asyncio.to_thread(self.store.mark_read, notification_id)
