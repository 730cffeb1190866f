# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - comment.py: Comment schemas and the ContentType enum
# - room.py: Realtime room keys and event envelopes
# - contact.py: Contact form schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Comment Models
# -----------------------------------------------------------------------------
from .comment import (
    CommentCreate,
    CommentResponse,
    ContentType,
)

# -----------------------------------------------------------------------------
# Room Models - Realtime channel
# -----------------------------------------------------------------------------
from .room import (
    RELAYED_EVENTS,
    ClientEventType,
    RoomEventType,
    RoomKey,
    RoomMessage,
)

# -----------------------------------------------------------------------------
# Contact Models
# -----------------------------------------------------------------------------
from .contact import (
    ContactRequest,
    ContactResponse,
)

__all__ = [
    # Comment
    "CommentCreate",
    "CommentResponse",
    "ContentType",
    # Room
    "RELAYED_EVENTS",
    "ClientEventType",
    "RoomEventType",
    "RoomKey",
    "RoomMessage",
    # Contact
    "ContactRequest",
    "ContactResponse",
]
