# =============================================================================
# core/models/comment.py - Comment Schemas
# =============================================================================
# These models define the API contract for comment operations:
# - ContentType: Closed set of title kinds a comment can belong to
# - CommentCreate: Body of POST /comments (fields checked by the service)
# - CommentResponse: A stored comment as returned to clients
#
# Database rows use snake_case columns; the JSON contract uses camelCase
# (contentId, contentType, createdAt...). The alias generator bridges both.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ContentType(str, Enum):
    """
    Kind of title a comment thread belongs to.

    - movie: A film
    - tv: A TV show
    """
    MOVIE = "movie"
    TV = "tv"

    @classmethod
    def values(cls) -> list[str]:
        """All accepted string values, in declaration order."""
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: Any) -> "ContentType | None":
        """Return the matching member, or None for anything else."""
        try:
            return cls(value)
        except ValueError:
            return None


def coerce_content_id(value: Any) -> Any:
    """Title ids arrive as numbers from some clients; store them as strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value


# Shared config: camelCase on the wire, snake_case in Python
CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


class CommentCreate(BaseModel):
    """
    Schema for creating a comment.

    Every field is optional at the schema level: missing or empty fields
    are reported together by CommentService as a 400, rather than as a
    FastAPI 422.

    Example:
        {
            "contentId": "603",
            "contentType": "movie",
            "username": "neo",
            "comment": "Still holds up."
        }
    """

    model_config = CAMEL_CONFIG

    content_id: str | None = Field(
        default=None,
        description="Id of the movie/show being discussed"
    )

    content_type: str | None = Field(
        default=None,
        description="Kind of title: movie or tv"
    )

    username: str | None = Field(
        default=None,
        description="Display name of the author"
    )

    comment: str | None = Field(
        default=None,
        description="Comment text"
    )

    @field_validator("content_id", mode="before")
    @classmethod
    def _coerce_content_id(cls, value: Any) -> Any:
        return coerce_content_id(value)


class CommentResponse(BaseModel):
    """
    Schema for returning a comment to clients.

    Returned by:
    - GET /comments/{contentType}/{contentId} (as a list)
    - POST /comments
    - POST /comments/like/{commentId}

    The same JSON is what clients relay over the realtime channel.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "contentId": "603",
            "contentType": "movie",
            "username": "neo",
            "comment": "Still holds up.",
            "likes": 0,
            "createdAt": "2024-01-15T10:30:00Z",
            "updatedAt": "2024-01-15T10:30:00Z"
        }
    """

    model_config = CAMEL_CONFIG

    # Assigned by the store on insert
    id: str = Field(
        ...,
        description="Unique comment identifier"
    )

    content_id: str = Field(
        ...,
        description="Id of the movie/show being discussed"
    )

    content_type: ContentType = Field(
        ...,
        description="Kind of title: movie or tv"
    )

    username: str = Field(
        ...,
        description="Display name of the author"
    )

    comment: str = Field(
        ...,
        min_length=1,
        description="Comment text"
    )

    likes: int = Field(
        default=0,
        ge=0,
        description="Number of likes"
    )

    created_at: datetime = Field(
        ...,
        description="When the comment was created"
    )

    updated_at: datetime | None = Field(
        default=None,
        description="When the comment was last changed"
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("content_id", mode="before")
    @classmethod
    def _coerce_content_id(cls, value: Any) -> Any:
        return coerce_content_id(value)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CommentResponse":
        """Build from a comments table row (snake_case keys)."""
        return cls.model_validate(row)
