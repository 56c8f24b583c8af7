import logging
from typing import Optional

from connection_registry import ConnectionRegistry
from models.messages import (
    Answer,
    IceCandidate,
    Offer,
    Reachability,
    Relay,
    RelayRequest,
    RelayResponse,
    SignalBase,
    encode_message,
)

logger = logging.getLogger(__name__)

# Variants forwarded to the peer named in their `to` field
ADDRESSED_TYPES = (Offer, Answer, IceCandidate, RelayRequest, RelayResponse)


class MessageRouter:
    """
    Decides where an inbound client message goes.

    The router keeps no state of its own; every decision is made against the
    room's registry as it stands when the message is routed. The sender field
    of every forwarded message is replaced with the id the sending connection
    was registered under, whatever the client put there.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def route(self, sender_id: str, message: SignalBase) -> int:
        """Route one message and return the number of peers it was delivered to."""
        if isinstance(message, ADDRESSED_TYPES):
            stamped = message.model_copy(update={"from_peer": sender_id})
            return await self.send_to(message.to, stamped)

        if isinstance(message, Relay):
            # The relay peer forwards on to the destination, anyone else
            # (the originator) hands the envelope to the relay peer.
            target = message.to if sender_id == message.via else message.via
            stamped = message.model_copy(update={"from_peer": sender_id})
            return await self.send_to(target, stamped)

        if isinstance(message, Reachability):
            stamped = message.model_copy(update={"from_peer": sender_id})
            return await self.broadcast(stamped, exclude=sender_id)

        logger.debug(f"Ignoring {message.type} from peer {sender_id}: not accepted from clients")
        return 0

    async def send_to(self, peer_id: str, message: SignalBase) -> int:
        connection = self.registry.lookup(peer_id)
        if connection is None:
            logger.debug(f"Dropping {message.type}: peer {peer_id} is not in the room")
            return 0
        delivered = await connection.send(encode_message(message))
        return int(delivered)

    async def broadcast(self, message: SignalBase, exclude: Optional[str] = None) -> int:
        text = encode_message(message)
        delivered = 0
        for peer_id, connection in self.registry.list():
            if peer_id != exclude:
                delivered += int(await connection.send(text))
        return delivered
