# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# Realtime endpoint for comment rooms.
#
# Connect: ws://host/ws
#
# Client frames ({"type": ..., "data": {...}}):
#   - join_room     {"contentType": "movie", "contentId": "42"}
#   - leave_room    {"contentType": "movie", "contentId": "42"}
#   - send_comment  <comment JSON>  -> relayed as new_comment
#   - like_comment  <comment JSON>  -> relayed as comment_liked
#   - plain text "ping" is answered with "pong"
#
# Bad frames (binary included) are logged and ignored; the channel never
# returns errors.
# =============================================================================

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from core.models.room import RELAYED_EVENTS, ClientEventType, RoomKey, RoomMessage
from app.websocket.manager import ClientConnection, RoomManager, room_manager

logger = logging.getLogger(__name__)

router = APIRouter()


async def handle_client_message(
    connection: ClientConnection,
    raw: str,
    manager: RoomManager,
) -> None:
    """Apply one client frame to the room registry."""
    try:
        message = RoomMessage.model_validate(json.loads(raw))
        event = ClientEventType(message.type)
    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.debug(f"Ignoring frame from {connection.id}: {e}")
        return

    if event in RELAYED_EVENTS:
        await manager.publish(connection, RELAYED_EVENTS[event], message.data)
        return

    try:
        room = RoomKey.from_payload(message.data)
    except ValueError as e:
        logger.debug(f"Ignoring {event.value} from {connection.id}: {e}")
        return

    if event is ClientEventType.JOIN_ROOM:
        await manager.join(connection, room)
    else:
        await manager.leave(connection, room)


@router.websocket("/ws")
async def rooms_websocket(websocket: WebSocket):
    """
    WebSocket endpoint for realtime comment rooms.

    No authentication: any client may join any room.

    Connection URL:
        ws://localhost:8000/ws

    Events received:
        - new_comment: Another viewer posted a comment
        - comment_liked: Another viewer liked a comment

    Example event:
        {
            "type": "new_comment",
            "data": {"id": "...", "contentType": "movie", "contentId": "42", ...}
        }
    """
    await websocket.accept()
    connection = ClientConnection(websocket)
    await room_manager.register(connection)

    try:
        # Send welcome message
        await connection.send({
            "type": "connected",
            "connection_id": connection.id,
        })

        # Keep connection alive and handle incoming frames
        while True:
            try:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))

                data = frame.get("text")
                if data is None:
                    logger.debug(f"Ignoring binary frame from {connection.id}")
                    continue

                # Handle ping/pong for keepalive
                if data == "ping":
                    await websocket.send_text("pong")
                else:
                    await handle_client_message(connection, data, room_manager)

            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.warning(f"WebSocket receive error: {e}")
                break

    except WebSocketDisconnect:
        logger.info(f"WebSocket client {connection.id} disconnected")
    finally:
        await room_manager.disconnect(connection)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics.

    Returns:
        dict: Connection counts and active rooms
    """
    rooms = room_manager.get_active_rooms()
    return {
        "total_connections": room_manager.get_connection_count(),
        "active_rooms": rooms,
        "room_count": len(rooms),
    }
