# passsync/services/slots/sync.py
"""
SlotSyncService: every successful slot mutation is pushed to the link's
subscribers before the call returns.

Store work runs in a worker thread (sync SQLAlchemy session); the fan-out
runs on the event loop. Unreachable subscribers never fail the mutation.
"""

import asyncio
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ...schemas.slots import SlotCreate, SlotRead
from ..realtime import BroadcastRouter
from .defaults import build_default_slots
from .store import SlotStore

logger = logging.getLogger(__name__)


class SlotSyncService:

    def __init__(self, db: Session, broadcaster: BroadcastRouter):
        self.store = SlotStore(db)
        self.broadcaster = broadcaster

    async def create_slot(self, data: SlotCreate) -> SlotRead:
        slot = await asyncio.to_thread(self.store.create_slot, data)
        await self.broadcaster.publish_slot(slot.link_id, slot, action="created")
        return slot

    async def update_slot(self, slot_id: int, changes: dict[str, Any]) -> SlotRead:
        slot, released = await asyncio.to_thread(self.store.update_slot, slot_id, changes)
        # Released siblings first so the booked slot is the last word for the link
        for other in released:
            await self.broadcaster.publish_slot(other.link_id, other)
        await self.broadcaster.publish_slot(slot.link_id, slot)
        return slot

    async def delete_slot(self, slot_id: int) -> SlotRead:
        slot = await asyncio.to_thread(self.store.delete_slot, slot_id)
        await self.broadcaster.publish_slot(slot.link_id, slot, action="deleted")
        return slot

    async def seed_defaults(
        self,
        link_id: str,
        manager_code: str,
        template: str = "interview",
        date: Optional[str] = None,
    ) -> list[SlotRead]:
        created = []
        for spec in build_default_slots(link_id, manager_code, template, date):
            created.append(await self.create_slot(spec))

        logger.info(f"Seeded {len(created)} '{template}' slots for link={link_id}")
        return created
