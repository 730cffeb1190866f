# =============================================================================
# core/models/room.py - Realtime Room Schemas
# =============================================================================
# These models define the realtime (WebSocket) contract:
# - RoomKey: (contentType, contentId) pair identifying a room, e.g. "movie_42"
# - ClientEventType: Frames a client may send
# - RoomEventType: Events relayed to room members
# - RoomMessage: Envelope of every frame: {"type": ..., "data": {...}}
#
# Flow:
# 1. Client sends join_room {"contentType": "movie", "contentId": "42"}
# 2. Client creates/likes a comment over HTTP
# 3. Client sends send_comment / like_comment with the returned comment
# 4. Other members of movie_42 receive new_comment / comment_liked
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .comment import ContentType, coerce_content_id


class ClientEventType(str, Enum):
    """
    Frames accepted from clients.

    - join_room / leave_room: Membership changes
    - send_comment / like_comment: Relay a comment to the rest of the room
    """
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    SEND_COMMENT = "send_comment"
    LIKE_COMMENT = "like_comment"


class RoomEventType(str, Enum):
    """Events delivered to room members."""
    NEW_COMMENT = "new_comment"
    COMMENT_LIKED = "comment_liked"


# Client frame -> event delivered to the rest of the room
RELAYED_EVENTS: dict[ClientEventType, RoomEventType] = {
    ClientEventType.SEND_COMMENT: RoomEventType.NEW_COMMENT,
    ClientEventType.LIKE_COMMENT: RoomEventType.COMMENT_LIKED,
}


@dataclass(frozen=True)
class RoomKey:
    """
    Identity of a room.

    Rendered as "{contentType}_{contentId}" wherever a single string
    key is needed (registry, logs, Redis relay).
    """

    content_type: ContentType
    content_id: str

    def __str__(self) -> str:
        return f"{self.content_type.value}_{self.content_id}"

    @classmethod
    def from_payload(cls, payload: Any) -> "RoomKey":
        """
        Build the key from a dict carrying contentType and contentId.

        Works for join/leave bodies and for full comment payloads alike.

        Raises:
            ValueError: If either field is missing or contentType is unknown
        """
        if not isinstance(payload, dict):
            raise ValueError("Room payload must be an object")

        content_type = ContentType.parse(payload.get("contentType"))
        if content_type is None:
            raise ValueError(f"Invalid contentType: {payload.get('contentType')!r}")

        content_id = coerce_content_id(payload.get("contentId"))
        if content_id is None or not str(content_id).strip():
            raise ValueError("contentId is required")

        return cls(content_type, str(content_id))


class RoomMessage(BaseModel):
    """
    Envelope for every realtime frame, in both directions.

    Example:
        {"type": "new_comment", "data": {"id": "...", "contentType": "movie", ...}}
    """

    type: str = Field(
        ...,
        description="Event name"
    )

    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Event payload"
    )
