# =============================================================================
# core/services/comment_service.py - Comment Business Logic
# =============================================================================
# Handles listing, creating and liking comments.
# Separates HTTP concerns from database/business logic.
#
# The service does not publish realtime events: clients relay the returned
# comment over the WebSocket channel themselves.
# =============================================================================

import logging
from typing import Any

from pydantic.alias_generators import to_camel

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import is_uuid
from core.models.comment import CommentCreate, CommentResponse, ContentType
from app.exceptions import (
    CommentNotFoundError,
    InvalidContentTypeError,
    MissingFieldsError,
    StorageError,
)

logger = logging.getLogger(__name__)

# Order matters: reported in this order when several are missing
REQUIRED_COMMENT_FIELDS = ("content_id", "content_type", "username", "comment")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_content_type(value: Any) -> ContentType:
    content_type = ContentType.parse(value)
    if content_type is None:
        raise InvalidContentTypeError(value, ContentType.values())
    return content_type


class CommentService:
    """
    Service for comment operations.

    Provides a clean interface between API routes and the comment store.
    """

    @staticmethod
    def list_comments(content_type: str, content_id: str) -> list[CommentResponse]:
        """
        List comments for one title, newest first.

        Args:
            content_type: "movie" or "tv"
            content_id: The title's id

        Returns:
            Comments sorted by created_at descending (empty if none)

        Raises:
            InvalidContentTypeError: If content_type is unknown
            StorageError: If the store cannot be read
        """
        kind = _require_content_type(content_type)

        try:
            rows = SupabaseClient.fetch_comments(kind.value, str(content_id))
        except SupabaseClientError as e:
            logger.error(f"Failed to list comments for {kind.value}_{content_id}: {e}")
            raise StorageError("fetching comments", str(e))

        return [CommentResponse.from_row(row) for row in rows]

    @staticmethod
    def create_comment(request: CommentCreate) -> CommentResponse:
        """
        Validate and persist a new comment.

        Args:
            request: Incoming fields (any may be missing)

        Returns:
            The stored comment with id, likes=0 and timestamps

        Raises:
            MissingFieldsError: If any required field is missing or blank
            InvalidContentTypeError: If content_type is not movie/tv
            StorageError: If the insert fails
        """
        missing = [
            field for field in REQUIRED_COMMENT_FIELDS
            if _is_blank(getattr(request, field))
        ]
        if missing:
            # Report the wire names the client actually sent
            raise MissingFieldsError([to_camel(field) for field in missing])

        kind = _require_content_type(request.content_type)

        data = {
            "content_id": request.content_id.strip(),
            "content_type": kind.value,
            "username": request.username.strip(),
            "comment": request.comment,
        }

        try:
            row = SupabaseClient.insert_comment(data)
        except SupabaseClientError as e:
            logger.error(f"Failed to create comment: {e}")
            raise StorageError("saving comment", str(e))

        comment = CommentResponse.from_row(row)
        logger.info(f"Created comment {comment.id} on {kind.value}_{comment.content_id}")
        return comment

    @staticmethod
    def like_comment(comment_id: str) -> CommentResponse:
        """
        Add exactly one like to a comment.

        Uses the store's atomic increment, so concurrent likes are all counted.

        Args:
            comment_id: The comment UUID

        Returns:
            The updated comment

        Raises:
            CommentNotFoundError: If no comment has that id
            StorageError: If the update fails
        """
        # Not a UUID means it cannot exist; skip the round trip
        if not is_uuid(comment_id):
            raise CommentNotFoundError(str(comment_id))

        try:
            row = SupabaseClient.increment_comment_likes(comment_id)
        except SupabaseClientError as e:
            logger.error(f"Failed to like comment {comment_id}: {e}")
            raise StorageError("liking comment", str(e))

        if row is None:
            raise CommentNotFoundError(str(comment_id))

        comment = CommentResponse.from_row(row)
        logger.info(f"Comment {comment.id} now has {comment.likes} likes")
        return comment
