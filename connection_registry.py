from enum import Enum
from typing import Dict, List, Optional, Tuple
from fastapi import WebSocket
import logging

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class PeerConnection:
    """A peer's WebSocket together with the id it was registered under."""

    def __init__(self, peer_id: str, websocket: WebSocket):
        self.peer_id = peer_id
        self.websocket = websocket
        self.state = ConnectionState.CONNECTING

    def open(self):
        if self.state is ConnectionState.CONNECTING:
            self.state = ConnectionState.OPEN

    def close(self):
        self.state = ConnectionState.CLOSED

    @property
    def is_closed(self) -> bool:
        return self.state is ConnectionState.CLOSED

    async def send(self, text: str) -> bool:
        """Send a frame; failures are logged and reported as False, never raised."""
        if self.is_closed:
            return False
        try:
            await self.websocket.send_text(text)
            return True
        except Exception as e:
            logger.warning(f"Failed to send to peer {self.peer_id}: {e}")
            return False

    def __repr__(self):
        return f"PeerConnection(peer_id={self.peer_id!r}, state={self.state.value})"


class ConnectionRegistry:
    def __init__(self):
        self._peers: Dict[str, PeerConnection] = {}

    def register(self, peer_id: str, connection: PeerConnection):
        # A later registration shadows an earlier one with the same id
        if peer_id in self._peers:
            logger.warning(f"Peer id {peer_id} registered again, shadowing the earlier connection")
            del self._peers[peer_id]
        self._peers[peer_id] = connection

    def unregister(self, connection: PeerConnection) -> bool:
        for peer_id, registered in self._peers.items():
            if registered is connection:
                del self._peers[peer_id]
                return True
        return False

    def list(self) -> List[Tuple[str, PeerConnection]]:
        return list(self._peers.items())

    def lookup(self, peer_id: str) -> Optional[PeerConnection]:
        return self._peers.get(peer_id)

    def peer_ids(self) -> List[str]:
        return list(self._peers)

    def __len__(self):
        return len(self._peers)

    def __contains__(self, peer_id):
        return peer_id in self._peers
