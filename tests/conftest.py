import itertools
import json

import pytest

from connection_registry import ConnectionRegistry, PeerConnection
from message_router import MessageRouter
from room_manager import Room, RoomManager


class FakeWebSocket:
    """Records frames sent to it; can be told to fail every send."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(text)

    def frames(self):
        return [json.loads(text) for text in self.sent]

    def clear(self):
        self.sent.clear()


def make_peer(registry, peer_id, fail=False):
    connection = PeerConnection(peer_id, FakeWebSocket(fail=fail))
    registry.register(peer_id, connection)
    connection.open()
    return connection


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def router(registry):
    return MessageRouter(registry)


@pytest.fixture
def peer_id_factory():
    counter = itertools.count(1)
    return lambda: f"peer_test_{next(counter)}"


@pytest.fixture
def room(peer_id_factory):
    return Room("lobby", peer_id_factory=peer_id_factory)


@pytest.fixture
def room_manager(peer_id_factory):
    return RoomManager(peer_id_factory=peer_id_factory)
