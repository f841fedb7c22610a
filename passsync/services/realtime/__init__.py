"""
Real-time delivery over WebSocket.

One process-wide registry and broadcaster, shared by the socket endpoint,
the HTTP routers and the reminder scheduler.
"""

from .broadcast import BroadcastRouter
from .protocol import handle_inbound
from .registry import Connection, ConnectionRegistry

registry = ConnectionRegistry()
broadcaster = BroadcastRouter(registry)


def get_broadcaster() -> BroadcastRouter:
    """FastAPI dependency."""
    return broadcaster


__all__ = [
    "BroadcastRouter",
    "Connection",
    "ConnectionRegistry",
    "broadcaster",
    "get_broadcaster",
    "handle_inbound",
    "registry",
]
