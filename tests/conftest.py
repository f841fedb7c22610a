from __future__ import annotations

import json
import os

# Must be set before passsync is imported: settings and the engine are module level.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.websockets import WebSocketState

from passsync.database import create_db_engine, get_db, init_db
from passsync.main import app
from passsync.services import realtime
from passsync.services.realtime import BroadcastRouter, Connection, ConnectionRegistry


class FakeTransport:
    """Stands in for a starlette WebSocket: records frames, can be closed or made to fail."""

    def __init__(self, fail: bool = False):
        self.application_state = WebSocketState.CONNECTED
        self.client_state = WebSocketState.CONNECTED
        self.fail = fail
        self.sent: list[str] = []

    async def send_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("socket write failed")
        self.sent.append(text)

    def close(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED

    @property
    def messages(self) -> list[dict]:
        return [json.loads(t) for t in self.sent]


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry):
    return BroadcastRouter(registry)


@pytest.fixture
def connect(registry):
    """Register a connection on a fake transport: connect(pass_code=..., links=[...])."""

    def _connect(pass_code: str | None = None, links: tuple[str, ...] = (), fail: bool = False):
        transport = FakeTransport(fail=fail)
        connection = registry.register(Connection(transport))
        if pass_code:
            registry.subscribe_to_pass_code(connection, pass_code)
        for link_id in links:
            registry.subscribe_to_link(connection, link_id)
        return connection, transport

    return _connect


@pytest.fixture
def app_client(session_factory):
    """TestClient against the real app, sharing the in-memory database with the test."""

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as client:
        yield app, client
    app.dependency_overrides.clear()

    for connection in realtime.registry.all():
        realtime.registry.unregister(connection)


@pytest.fixture
def live_connect():
    """Like `connect`, but on the process-wide registry the app broadcasts through."""

    def _connect(pass_code: str | None = None, links: tuple[str, ...] = ()):
        transport = FakeTransport()
        connection = realtime.registry.register(Connection(transport))
        if pass_code:
            realtime.registry.subscribe_to_pass_code(connection, pass_code)
        for link_id in links:
            realtime.registry.subscribe_to_link(connection, link_id)
        return connection, transport

    yield _connect

    for connection in realtime.registry.all():
        realtime.registry.unregister(connection)
