import asyncio
import json

import pytest

from amc_portal.client import RealtimeClient
from amc_portal.config import ClientSettings


class FakeConnection:
    def __init__(self, frames):
        self.frames = list(frames)
        self.sent = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def send(self, message):
        self.sent.append(json.loads(message))

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self.frames:
            raise StopAsyncIteration
        return self.frames.pop(0)

    async def close(self):
        self.frames = []


class Connector:
    """Hands out the scripted connections, then refuses"""

    def __init__(self, connections):
        self.connections = list(connections)
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        if not self.connections:
            raise ConnectionRefusedError("server down")
        return self.connections.pop(0)


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("AMC_WS_URL", "ws://api.test/ws")
    monkeypatch.setenv("AMC_WS_MAX_RECONNECT_ATTEMPTS", "5")
    monkeypatch.setenv("AMC_WS_RECONNECT_DELAY", "1")
    return ClientSettings()


def test_backoff_doubles(settings):
    client = RealtimeClient(settings)

    assert [client.backoff_delay(n) for n in range(1, 6)] == [1, 2, 4, 8, 16]


def test_gives_up_after_max_attempts(settings):
    delays = []

    async def sleep(delay):
        delays.append(delay)

    connector = Connector([])
    client = RealtimeClient(settings, connect=connector, sleep=sleep)

    asyncio.run(client.run("u1", lambda event, data: None))

    assert delays == [1, 2, 4, 8, 16]
    assert len(connector.urls) == 6
    assert client.connected is False


def test_joins_room_and_dispatches_events(settings):
    events = []
    connection = FakeConnection([
        json.dumps({"event": "room-joined", "data": {"userId": "u1"}}),
        "not json",
        json.dumps({"event": "task-updated", "data": {"action": "created"}}),
    ])
    connector = Connector([connection])

    async def on_event(event, data):
        events.append((event, data))

    async def sleep(delay):
        pass

    client = RealtimeClient(settings, connect=connector, sleep=sleep)
    client.max_attempts = 0
    asyncio.run(client.run("u1", on_event, token="abc"))

    assert connection.sent == [{"event": "join-user-room", "data": {"userId": "u1"}}]
    assert events == [("room-joined", {"userId": "u1"}), ("task-updated", {"action": "created"})]
    assert connector.urls == ["ws://api.test/ws?token=abc"]


def test_successful_reconnect_resets_attempts(settings):
    delays = []

    async def sleep(delay):
        delays.append(delay)

    # refused, connected, refused x5
    connector = Connector([])
    connections = [None, FakeConnection([])]

    def connect(url):
        if connections:
            conn = connections.pop(0)
            if conn is not None:
                return conn
        return connector(url)

    client = RealtimeClient(settings, connect=connect, sleep=sleep)
    asyncio.run(client.run("u1", lambda event, data: None))

    assert delays == [1, 1, 2, 4, 8, 16]


def test_stop_ends_the_loop(settings):
    client = RealtimeClient(settings)

    async def on_event(event, data):
        await client.stop()

    connection = FakeConnection([json.dumps({"event": "connected", "data": {}}), json.dumps({"event": "x"})])
    client._connect = Connector([connection])

    asyncio.run(client.run("u1", on_event))

    assert connection.frames == []
    assert client.reconnect_attempts == 0
