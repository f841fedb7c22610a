"""
Scheduled notification delivery.

Wakes on a fixed interval (plus one early run shortly after start to drain
anything that came due while the process was down), scans for due
notifications, marks each one delivered and pushes it to its pass-code.

Runs as an asyncio task in the app lifespan.
Uses the synchronous DB session via asyncio.to_thread.

Per-notification failures are logged and do not stop the batch. A
notification whose mark-delivered step failed stays pending and is picked
up again on the next tick. Marking happens before the push, so a push that
reaches nobody is not retried.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..database import SessionLocal
from ..utils.clock import utcnow
from .notifications import NotificationService
from .realtime import BroadcastRouter

logger = logging.getLogger(__name__)

CHECK_INTERVAL = 60  # seconds between checks
INITIAL_DELAY = 5  # seconds before the first check


class ReminderScheduler:

    def __init__(
        self,
        broadcaster: BroadcastRouter,
        session_factory: Callable[[], Session] = SessionLocal,
        interval_seconds: float = CHECK_INTERVAL,
        initial_delay_seconds: float = INITIAL_DELAY,
    ):
        self.broadcaster = broadcaster
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self._task: Optional[asyncio.Task] = None

    async def tick(self, now: Optional[datetime] = None) -> int:
        """One scan. Returns how many notifications were promoted."""
        now = now or utcnow()
        db = self.session_factory()
        try:
            service = NotificationService(db, self.broadcaster)
            pending = await asyncio.to_thread(service.store.list_pending, now)
            if not pending:
                return 0

            logger.info(f"Processing {len(pending)} scheduled notifications")

            delivered = 0
            for notification in pending:
                try:
                    await service.deliver(notification.id, now)
                    delivered += 1
                    logger.info(
                        f"Sent scheduled notification {notification.id} "
                        f"to {notification.pass_code}"
                    )
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception(f"Failed to send notification {notification.id}")
            return delivered
        finally:
            db.close()

    async def run(self) -> None:
        logger.info(
            f"reminder scheduler started (every {self.interval_seconds}s, "
            f"first check in {self.initial_delay_seconds}s)"
        )
        try:
            await asyncio.sleep(self.initial_delay_seconds)
            while True:
                try:
                    await self.tick()
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception("reminder scheduler error")

                await asyncio.sleep(self.interval_seconds)
        except asyncio.CancelledError:
            logger.info("reminder scheduler cancelled")

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="reminder-scheduler")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
