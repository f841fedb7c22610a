# passsync/services/realtime/protocol.py
"""
Inbound control messages.

subscribe          → set pass-code and/or add a link subscription
subscribe_slots    → add a link subscription
unsubscribe(_slots)→ remove a link subscription
ping               → pong to the sender only

Frames that are not valid JSON or have an unknown type are logged and
ignored; the sender gets no error.
"""

import logging

from pydantic import ValidationError

from ...errors import TransportUnavailableError
from ...schemas.messages import (
    PingMessage,
    PongMessage,
    SubscribeMessage,
    SubscribeSlotsMessage,
    UnsubscribeMessage,
    parse_inbound,
)
from .registry import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)


async def handle_inbound(registry: ConnectionRegistry, connection: Connection, raw: str | bytes) -> None:
    """Process one inbound frame to completion."""
    try:
        message = parse_inbound(raw)
    except ValidationError as e:
        logger.info(f"Ignoring websocket message: {_describe(e)} raw={raw[:200]!r}")
        return

    if isinstance(message, SubscribeMessage):
        if message.pass_code:
            registry.subscribe_to_pass_code(connection, message.pass_code)
        if message.link_id:
            registry.subscribe_to_link(connection, message.link_id)
        logger.info(
            f"Client subscribed: passCode={connection.pass_code}, "
            f"links={','.join(sorted(connection.links))}"
        )

    elif isinstance(message, SubscribeSlotsMessage):
        registry.subscribe_to_link(connection, message.link_id)
        logger.info(f"Client subscribed to slots: linkId={message.link_id}")

    elif isinstance(message, UnsubscribeMessage):
        registry.unsubscribe_from_link(connection, message.link_id)
        logger.info(f"Client unsubscribed from: linkId={message.link_id}")

    elif isinstance(message, PingMessage):
        try:
            await connection.send(PongMessage())
        except TransportUnavailableError as e:
            logger.debug(f"pong not delivered: {e.detail}")


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{first['msg']} at {loc}" if loc else first["msg"]
