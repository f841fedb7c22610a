"""
Client-side mirror of one link's slots.

Local edits are provisional: they show up immediately but the next
authoritative slot_update for the same slot replaces them. After
(re)subscribing, call resync() to fetch the full list, since anything
pushed while the socket was down is gone.
"""

import json
import logging
from typing import Any, Optional

import httpx

from .schemas.slots import SlotRead

logger = logging.getLogger(__name__)


class SlotMirror:

    def __init__(
        self,
        base_url: str,
        link_id: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.link_id = link_id
        self._client = client
        self.timeout = timeout
        self.slots: dict[int, SlotRead] = {}
        self.provisional: set[int] = set()

    def subscribe_message(self) -> dict[str, str]:
        return {"type": "subscribe_slots", "linkId": self.link_id}

    async def resync(self) -> list[SlotRead]:
        """Replace the local copy with the server's list."""
        url = f"{self.base_url}/api/slots/link/{self.link_id}"
        if self._client is not None:
            resp = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url)
        resp.raise_for_status()

        self.slots = {s.id: s for s in (SlotRead.model_validate(item) for item in resp.json())}
        self.provisional.clear()
        logger.info(f"Resynced {len(self.slots)} slots for link={self.link_id}")
        return self.ordered()

    def edit(self, slot_id: int, **changes: Any) -> SlotRead:
        """Optimistic local change, pending confirmation from the server."""
        slot = self.slots[slot_id].model_copy(update=changes)
        self.slots[slot_id] = slot
        self.provisional.add(slot_id)
        return slot

    def apply(self, message: dict[str, Any] | str) -> bool:
        """Apply one inbound frame. Returns False when it is not for this link."""
        if isinstance(message, str):
            message = json.loads(message)

        if message.get("type") != "slot_update" or message.get("linkId") != self.link_id:
            return False

        slot = SlotRead.model_validate(message["data"])
        if message.get("action") == "deleted":
            self.slots.pop(slot.id, None)
        else:
            self.slots[slot.id] = slot
        self.provisional.discard(slot.id)
        return True

    def ordered(self) -> list[SlotRead]:
        return [self.slots[k] for k in sorted(self.slots)]
