from fastapi import APIRouter, HTTPException, Request, status
import logging
from models.schemas import RoomListResponse, RoomPeersResponse, RoomSummary

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/rooms", response_model=RoomListResponse)
async def list_rooms(request: Request):
    """
    List all live signaling rooms
    """
    room_manager = request.app.state.room_manager
    room_list = [
        RoomSummary(room_id=room_id, num_peers=len(room.registry))
        for room_id, room in list(room_manager.rooms.items())
    ]
    return RoomListResponse(rooms=room_list, total=len(room_list))


@router.get("/room/{room_id:path}/peers", response_model=RoomPeersResponse)
async def get_room_peers(room_id: str, request: Request):
    """
    Get the ids of the peers currently registered in a room
    """
    room = request.app.state.room_manager.get_room(room_id)
    if room is None:
        logger.debug(f"Peer listing requested for unknown room {room_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room '{room_id}' not found"
        )

    peers = room.peer_ids()
    return RoomPeersResponse(room_id=room_id, peers=peers, total=len(peers))
