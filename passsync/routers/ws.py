"""
WebSocket endpoint.

Every socket is registered on accept, greeted with `connected`, and then
each inbound frame, text or binary, is handled in arrival order. The
connection leaves every index when the socket closes, however it closes.
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..config import settings
from ..schemas.messages import ConnectedMessage
from ..services.realtime import Connection, handle_inbound, registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ws"])


@router.websocket(settings.ws_path)
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()
    connection = registry.register(Connection(websocket))

    try:
        await connection.send(ConnectedMessage())
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            # text or binary frames carry the same JSON envelope
            raw = message.get("text") or message.get("bytes")
            if raw:
                await handle_inbound(registry, connection, raw)
    except WebSocketDisconnect as e:
        logger.info(f"Client disconnected (code={e.code})")
    except Exception:
        logger.exception("WebSocket error")
    finally:
        registry.unregister(connection)
