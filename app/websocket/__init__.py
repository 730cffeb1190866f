# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Realtime comment rooms.
#
# Usage:
#   # Relay an event to the rest of a room (from the WebSocket handler)
#   from app.websocket import room_manager
#
#   await room_manager.publish(connection, RoomEventType.NEW_COMMENT, comment)
#
#   # Share rooms across API processes (enabled in app.main when REDIS_URL is set)
#   from app.websocket.broadcast import publish_room_event
#   room_manager.relay = publish_room_event
# =============================================================================

from app.websocket.manager import ClientConnection, RoomManager, room_manager
from app.websocket.broadcast import (
    INSTANCE_ID,
    WEBSOCKET_CHANNEL,
    handle_relay_message,
    publish_room_event,
)

__all__ = [
    "ClientConnection",
    "RoomManager",
    "room_manager",
    "INSTANCE_ID",
    "WEBSOCKET_CHANNEL",
    "handle_relay_message",
    "publish_room_event",
]
