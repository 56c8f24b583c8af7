from typing import Optional
from fastapi import WebSocket, WebSocketDisconnect
from room_manager import RoomManager
import logging

logger = logging.getLogger(__name__)


async def signaling_endpoint(websocket: WebSocket, room_manager: RoomManager, room_id: str, peer_id: Optional[str] = None):
    await websocket.accept()
    room, connection = await room_manager.connect(room_id, websocket, peer_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            data = message.get("text")
            if data is None:
                data = message.get("bytes")
            if data is None:
                continue
            await room.receive(connection, data)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Error on connection for peer {connection.peer_id} in room {room_id}: {e}", exc_info=True)
    finally:
        await room_manager.disconnect(room, connection)
