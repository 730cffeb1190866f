# =============================================================================
# app/websocket/broadcast.py - Cross-Process Room Relay
# =============================================================================
# Lets several API processes share rooms. Members of "movie_42" may be
# connected to different processes; each process only holds its own sockets.
#
# Uses Redis pub/sub for cross-process communication:
# - After a local publish, the process calls publish_room_event()
# - Every process subscribes (see app.main) and calls handle_relay_message()
#   to deliver events that came from OTHER processes to its local members
#
# Message on the channel:
#   {"instance_id": "...", "room": "movie_42", "type": "new_comment", "data": {...}}
# =============================================================================

import json
import logging
from typing import Any
from uuid import uuid4

from core.models.room import RoomEventType
from app.websocket.manager import RoomManager

logger = logging.getLogger(__name__)

# Redis channel for room events
WEBSOCKET_CHANNEL = "cinethread:rooms:events"

# Identifies this process on the channel so it skips its own messages
INSTANCE_ID = uuid4().hex

_redis_client = None


def get_redis_client():
    """Get (and cache) an asyncio Redis client for pub/sub operations."""
    global _redis_client
    if _redis_client is None:
        import redis.asyncio as aioredis
        from app.config import settings
        _redis_client = aioredis.from_url(settings.REDIS_URL)
    return _redis_client


async def close_redis_client() -> None:
    """Close the cached publisher client, if any."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


async def publish_room_event(room: str, event: RoomEventType, data: dict[str, Any]) -> bool:
    """
    Publish a room event for the other API processes.

    Args:
        room: Room key, e.g. "movie_42"
        event: new_comment or comment_liked
        data: The comment payload

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()

        message = json.dumps({
            "instance_id": INSTANCE_ID,
            "room": room,
            "type": event.value,
            "data": data,
        })

        # Publish to Redis channel
        await client.publish(WEBSOCKET_CHANNEL, message)

        logger.debug(f"Published {event.value} event for room {room}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish room event: {e}")
        return False


async def handle_relay_message(raw: bytes | str, manager: RoomManager) -> int:
    """
    Deliver one message received from the channel to local room members.

    Messages published by this process are ignored (they were already
    delivered locally, minus the sender).

    Returns:
        int: Number of local clients the event was sent to
    """
    try:
        message = json.loads(raw)
        event = RoomEventType(message["type"])
        room = message["room"]
        data = message.get("data") or {}
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid room event on {WEBSOCKET_CHANNEL}: {e}")
        return 0

    if message.get("instance_id") == INSTANCE_ID:
        return 0

    return await manager.deliver(room, event, data)
