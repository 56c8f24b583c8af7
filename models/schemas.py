# models/schemas.py
from pydantic import BaseModel
from typing import List


# Room-related models
class RoomSummary(BaseModel):
    room_id: str
    num_peers: int


class RoomListResponse(BaseModel):
    rooms: List[RoomSummary]
    total: int


# Peer-related models
class RoomPeersResponse(BaseModel):
    room_id: str
    peers: List[str]
    total: int
