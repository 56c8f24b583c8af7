# models/messages.py
"""
Signaling wire protocol.

Every frame is a single JSON object whose ``type`` field names the variant.
Unknown fields are ignored and optional fields may be absent. The sender
field is spelled ``from`` on the wire and ``from_peer`` in Python.
"""
import logging
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class SignalBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", strict=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class RelayCandidate(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    peer_id: str
    rtt_ms: int = Field(ge=0)
    reliability: float


# Server-emitted notifications
class Join(SignalBase):
    type: Literal["Join"] = "Join"
    room_id: str
    peer_id: str


class PeerList(SignalBase):
    type: Literal["PeerList"] = "PeerList"
    peers: List[str]


class Leave(SignalBase):
    type: Literal["Leave"] = "Leave"
    peer_id: str


class Error(SignalBase):
    type: Literal["Error"] = "Error"
    message: str


# Peer-addressed negotiation
class Offer(SignalBase):
    type: Literal["Offer"] = "Offer"
    from_peer: str = Field(alias="from")
    to: str
    sdp: Optional[str] = None
    sdp_compressed: Optional[str] = None


class Answer(SignalBase):
    type: Literal["Answer"] = "Answer"
    from_peer: str = Field(alias="from")
    to: str
    sdp: Optional[str] = None
    sdp_compressed: Optional[str] = None


class IceCandidate(SignalBase):
    type: Literal["IceCandidate"] = "IceCandidate"
    from_peer: str = Field(alias="from")
    to: str
    candidate: str


# Relay path
class Relay(SignalBase):
    type: Literal["Relay"] = "Relay"
    from_peer: str = Field(alias="from")
    to: str
    via: str
    payload: str
    hop_count: int = Field(ge=0)
    timestamp: int = Field(ge=0)


class RelayRequest(SignalBase):
    type: Literal["RelayRequest"] = "RelayRequest"
    from_peer: str = Field(alias="from")
    to: str
    target_peer: str


class RelayResponse(SignalBase):
    type: Literal["RelayResponse"] = "RelayResponse"
    from_peer: str = Field(alias="from")
    to: str
    candidates: List[RelayCandidate]


class Reachability(SignalBase):
    type: Literal["Reachability"] = "Reachability"
    from_peer: str = Field(alias="from")
    reachable_peers: List[str]


SignalingMessage = Annotated[
    Union[
        Join,
        Offer,
        Answer,
        IceCandidate,
        PeerList,
        Leave,
        Error,
        Relay,
        RelayRequest,
        RelayResponse,
        Reachability,
    ],
    Field(discriminator="type"),
]

_message_adapter = TypeAdapter(SignalingMessage)


def decode_frame(data: Union[str, bytes]) -> str:
    """Binary frames are read as UTF-8, replacing invalid bytes"""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def parse_message(text: str) -> Optional[SignalBase]:
    """
    Parse one frame into its message variant.

    Returns None for anything that is not valid JSON, is missing the
    discriminant, names an unknown variant or fails field validation.
    """
    try:
        return _message_adapter.validate_json(text)
    except ValidationError as e:
        logger.debug(f"Ignoring unparsable message: {e.error_count()} validation error(s)")
        return None


def encode_message(message: SignalBase) -> str:
    return message.to_json()
