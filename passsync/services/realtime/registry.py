# passsync/services/realtime/registry.py
"""
Live connection registry.

Indices:
- all connections
- pass-code → connections (a connection watches at most one pass-code)
- link id → connections (a connection may watch many links)

Every index change happens under one lock, so the broadcaster never sees a
half-registered or half-removed connection. Fan-out reads take snapshots.
"""

import logging
import threading
from typing import Iterable, Optional

from starlette.websockets import WebSocketState

from ...errors import TransportUnavailableError
from ...schemas.messages import OutboundMessage, encode

logger = logging.getLogger(__name__)


class Connection:
    """One client socket plus its subscriptions."""

    def __init__(self, transport):
        self.transport = transport
        self.pass_code: Optional[str] = None
        self.links: set[str] = set()

    @property
    def is_open(self) -> bool:
        return (
            self.transport.application_state == WebSocketState.CONNECTED
            and self.transport.client_state == WebSocketState.CONNECTED
        )

    async def send_text(self, text: str) -> None:
        """Push one frame. Raises TransportUnavailableError, never queues."""
        if not self.is_open:
            raise TransportUnavailableError("connection is not open")
        try:
            await self.transport.send_text(text)
        except Exception as e:
            raise TransportUnavailableError(f"send failed: {e}") from e

    async def send(self, message: OutboundMessage) -> None:
        await self.send_text(encode(message))

    def __repr__(self) -> str:
        return f"<Connection pass_code={self.pass_code} links={sorted(self.links)}>"


class ConnectionRegistry:

    def __init__(self):
        self._lock = threading.RLock()
        self._connections: set[Connection] = set()
        self._by_pass_code: dict[str, set[Connection]] = {}
        self._by_link: dict[str, set[Connection]] = {}

    # ── Lifecycle ────────────────────────────────────────────────────────

    def register(self, connection: Connection) -> Connection:
        with self._lock:
            self._connections.add(connection)
            total = len(self._connections)
        logger.info(f"Connection registered ({total} live)")
        return connection

    def unregister(self, connection: Connection) -> None:
        """Drop the connection from every index. Safe to call twice."""
        with self._lock:
            if connection not in self._connections:
                return
            self._connections.discard(connection)

            if connection.pass_code is not None:
                self._discard(self._by_pass_code, connection.pass_code, connection)
            for link_id in connection.links:
                self._discard(self._by_link, link_id, connection)

            connection.pass_code = None
            connection.links = set()
            total = len(self._connections)
        logger.info(f"Connection unregistered ({total} live)")

    # ── Subscriptions ────────────────────────────────────────────────────

    def subscribe_to_pass_code(self, connection: Connection, pass_code: str) -> bool:
        """Replace the connection's pass-code subscription."""
        with self._lock:
            if connection not in self._connections:
                logger.warning("subscribe_to_pass_code on unregistered connection ignored")
                return False
            if connection.pass_code is not None:
                self._discard(self._by_pass_code, connection.pass_code, connection)
            connection.pass_code = pass_code
            self._by_pass_code.setdefault(pass_code, set()).add(connection)
        return True

    def subscribe_to_link(self, connection: Connection, link_id: str) -> bool:
        with self._lock:
            if connection not in self._connections:
                logger.warning("subscribe_to_link on unregistered connection ignored")
                return False
            connection.links.add(link_id)
            self._by_link.setdefault(link_id, set()).add(connection)
        return True

    def unsubscribe_from_link(self, connection: Connection, link_id: str) -> None:
        with self._lock:
            connection.links.discard(link_id)
            self._discard(self._by_link, link_id, connection)

    # ── Lookups (snapshots) ──────────────────────────────────────────────

    def for_link(self, link_id: str) -> list[Connection]:
        with self._lock:
            return list(self._by_link.get(link_id, ()))

    def for_pass_code(self, pass_code: str) -> list[Connection]:
        with self._lock:
            return list(self._by_pass_code.get(pass_code, ()))

    def for_pass_codes(self, pass_codes: Iterable[str]) -> list[Connection]:
        with self._lock:
            found: set[Connection] = set()
            for code in set(pass_codes):
                found.update(self._by_pass_code.get(code, ()))
            return list(found)

    def all(self) -> list[Connection]:
        with self._lock:
            return list(self._connections)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def __contains__(self, connection: Connection) -> bool:
        with self._lock:
            return connection in self._connections

    @staticmethod
    def _discard(index: dict[str, set[Connection]], key: str, connection: Connection) -> None:
        members = index.get(key)
        if not members:
            return
        members.discard(connection)
        if not members:
            del index[key]
