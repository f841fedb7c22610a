# passsync/services/realtime/broadcast.py
"""
Broadcast router: one publish method per event class.

Push-only, fire-and-forget per connection. A connection that is not open
(or whose send fails) is skipped for that event: no queue, no retry, no
error to the caller. The next event for the same key supersedes it.
"""

import logging
from typing import Any, Iterable

from ...errors import TransportUnavailableError
from ...schemas.admin import AdminActionRead
from ...schemas.messages import (
    AdminActionMessage,
    AnnouncementMessage,
    NotificationMessage,
    OutboundMessage,
    SettingsUpdateMessage,
    SlotUpdateMessage,
    encode,
)
from ...schemas.notifications import NotificationRead
from ...schemas.pass_settings import PassSettingsRead
from ...schemas.slots import SlotRead
from .registry import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)


class BroadcastRouter:

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def publish_slot(self, link_id: str, slot: SlotRead, action: str = "updated") -> int:
        message = SlotUpdateMessage(link_id=link_id, action=action, data=slot)
        sent = await self._fan_out(self.registry.for_link(link_id), message)
        logger.info(f"Broadcast slot {action} id={slot.id} linkId={link_id} to {sent} subscribers")
        return sent

    async def publish_settings(self, pass_code: str, settings: PassSettingsRead) -> int:
        message = SettingsUpdateMessage(pass_code=pass_code, data=settings)
        return await self._fan_out(self.registry.for_pass_code(pass_code), message)

    async def publish_notification(self, pass_code: str, notification: NotificationRead) -> int:
        message = NotificationMessage(pass_code=pass_code, data=notification)
        sent = await self._fan_out(self.registry.for_pass_code(pass_code), message)
        logger.info(f"Broadcast notification id={notification.id} passCode={pass_code} to {sent} subscribers")
        return sent

    async def publish_admin_action(self, action: AdminActionRead, affected_codes: Iterable[str]) -> int:
        codes = list(affected_codes)
        message = AdminActionMessage(data=action)
        sent = await self._fan_out(self.registry.for_pass_codes(codes), message)
        logger.info(f"Broadcast admin action {action.action_type} to {len(codes)} affected codes ({sent} connections)")
        return sent

    async def publish_all(self, event_type: str, payload: dict[str, Any] | None = None) -> int:
        message = AnnouncementMessage(type=event_type, data=payload or {})
        return await self._fan_out(self.registry.all(), message)

    async def _fan_out(self, targets: list[Connection], message: OutboundMessage) -> int:
        text = encode(message)
        sent = 0
        for connection in targets:
            try:
                await connection.send_text(text)
                sent += 1
            except TransportUnavailableError as e:
                logger.debug(f"Skipping {connection!r} for {message.type}: {e.detail}")
        return sent
