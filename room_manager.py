import asyncio
import logging
import uuid
from typing import Callable, Dict, Optional, Union

from fastapi import WebSocket

from connection_registry import ConnectionRegistry, PeerConnection
from message_router import MessageRouter
from models.messages import Join, Leave, PeerList, decode_frame, parse_message

logger = logging.getLogger(__name__)

PeerIdFactory = Callable[[], str]


def generate_peer_id(prefix: str = "peer_") -> str:
    return f"{prefix}{uuid.uuid4()}"


class Room:
    """
    One signaling room.

    Connect, message and disconnect handling for a room run one at a time
    under the room's lock, so the registry is never mutated while a message
    is being routed against it.
    """

    def __init__(self, room_id: str, peer_id_factory: Optional[PeerIdFactory] = None):
        self.room_id = room_id
        self.registry = ConnectionRegistry()
        self.router = MessageRouter(self.registry)
        self.peer_id_factory = peer_id_factory or generate_peer_id
        self.sessions = 0
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, peer_id: Optional[str] = None) -> PeerConnection:
        async with self._lock:
            connection = PeerConnection(peer_id or self.peer_id_factory(), websocket)
            self.registry.register(connection.peer_id, connection)
            connection.open()
            logger.info(f"Peer {connection.peer_id} joined room {self.room_id} ({len(self.registry)} peers)")

            # New peer gets everyone else, everyone else hears about the new peer
            others = [pid for pid, _ in self.registry.list() if pid != connection.peer_id]
            await connection.send(PeerList(peers=others).to_json())
            await self.router.broadcast(
                Join(room_id=self.room_id, peer_id=connection.peer_id),
                exclude=connection.peer_id,
            )
            return connection

    async def receive(self, connection: PeerConnection, data: Union[str, bytes]) -> int:
        message = parse_message(decode_frame(data))
        if message is None:
            return 0
        async with self._lock:
            if connection.is_closed:
                return 0
            return await self.router.route(connection.peer_id, message)

    async def disconnect(self, connection: PeerConnection):
        async with self._lock:
            if connection.is_closed:
                return
            connection.close()
            self.registry.unregister(connection)
            logger.info(f"Peer {connection.peer_id} left room {self.room_id} ({len(self.registry)} peers)")
            await self.router.broadcast(Leave(peer_id=connection.peer_id), exclude=connection.peer_id)

    def peer_ids(self):
        return self.registry.peer_ids()

    def is_empty(self) -> bool:
        return self.sessions == 0 and len(self.registry) == 0


class RoomManager:
    def __init__(self, peer_id_factory: Optional[PeerIdFactory] = None):
        self.rooms: Dict[str, Room] = {}
        self.peer_id_factory = peer_id_factory

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def get_or_create(self, room_id: str) -> Room:
        if room_id not in self.rooms:
            self.rooms[room_id] = Room(room_id, peer_id_factory=self.peer_id_factory)
            logger.info(f"Opened room {room_id}")
        return self.rooms[room_id]

    async def connect(self, room_id: str, websocket: WebSocket, peer_id: Optional[str] = None):
        room = self.get_or_create(room_id)
        # Counted before awaiting the room lock so the room can't be released under us
        room.sessions += 1
        try:
            connection = await room.connect(websocket, peer_id)
        except Exception:
            room.sessions -= 1
            self._release(room)
            raise
        return room, connection

    async def disconnect(self, room: Room, connection: PeerConnection):
        try:
            await room.disconnect(connection)
        finally:
            room.sessions -= 1
            self._release(room)

    def _release(self, room: Room):
        if room.is_empty() and self.rooms.get(room.room_id) is room:
            del self.rooms[room.room_id]
            logger.info(f"Closed room {room.room_id}, no peers left")
