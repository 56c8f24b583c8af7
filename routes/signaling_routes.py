# routes/signaling_routes.py
from fastapi import APIRouter, WebSocket
from fastapi.responses import PlainTextResponse
from typing import Optional
from signaling import signaling_endpoint

router = APIRouter()

ROOM_ENDPOINT_INFO = "Room - WebSocket endpoint"
WEBSOCKET_SUFFIX = "/websocket"
DEFAULT_ROOM_ID = "default"


def room_key(path: str) -> str:
    """Room id from the path after /room/, with an optional /websocket suffix removed"""
    if path.endswith(WEBSOCKET_SUFFIX):
        path = path[: -len(WEBSOCKET_SUFFIX)]
    return path or DEFAULT_ROOM_ID


@router.websocket("/room/{room_path:path}")
async def room_websocket(websocket: WebSocket, room_path: str, peer_id: Optional[str] = None):
    """
    Join a signaling room at /room/{room_id} or /room/{room_id}/websocket.
    The optional peer_id query parameter names the peer; without it the room
    assigns a fresh id.
    """
    await signaling_endpoint(websocket, websocket.app.state.room_manager, room_key(room_path), peer_id)


@router.get("/room/{room_path:path}", response_class=PlainTextResponse)
async def room_info(room_path: str):
    """Plain HTTP requests to a room path get an informational reply instead of a connection"""
    return ROOM_ENDPOINT_INFO
