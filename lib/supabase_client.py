# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for the comment store. It implements
# the singleton pattern to reuse a single client connection and provides
# specialized methods for:
# - Listing comments for one title (newest first)
# - Inserting a comment
# - Fetching a comment by id
# - Atomically incrementing a comment's like counter
#
# It also picks WHICH Supabase project to talk to at startup: the hosted
# (primary) project when online, or a local stack when offline.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   comments = SupabaseClient.fetch_comments("movie", "42")
#
# The atomic like counter relies on this Postgres function (see
# supabase/schema.sql):
#
#   increment_comment_likes(comment_id uuid) returns setof comments
# =============================================================================

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse
from uuid import UUID

from supabase import create_client, Client

from app.config import Settings, settings
from lib.utils import ApplicationError, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

COMMENTS_TABLE = "comments"
INCREMENT_LIKES_FUNCTION = "increment_comment_likes"


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


# =============================================================================
# Datastore Selection
# =============================================================================

@dataclass(frozen=True)
class DatastoreTarget:
    """A Supabase project the API can connect to."""

    name: str  # "primary" or "local"
    url: str
    key: str


def is_online(host: str) -> bool:
    """Return True if `host` resolves through DNS."""
    try:
        socket.getaddrinfo(host, None)
        return True
    except OSError:
        return False


def select_datastore(config: Settings) -> DatastoreTarget:
    """
    Pick the Supabase project to use.

    - production: always the primary (hosted) project
    - otherwise: the primary when the probe host resolves, else the
      local stack if one is configured

    Raises:
        SupabaseClientError: If no usable project is configured
    """
    primary = DatastoreTarget("primary", config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)

    if config.is_production:
        logger.info("Production mode -> connecting only to the primary Supabase project")
        return primary

    if is_online(config.CONNECTIVITY_PROBE_HOST) and config.SUPABASE_URL:
        logger.info("Online -> using the primary Supabase project")
        return primary

    if config.SUPABASE_LOCAL_URL:
        logger.info("Offline -> using the local Supabase stack")
        return DatastoreTarget(
            "local",
            config.SUPABASE_LOCAL_URL,
            config.SUPABASE_LOCAL_SERVICE_KEY or config.SUPABASE_SERVICE_KEY,
        )

    raise SupabaseClientError(
        message="No reachable Supabase project available",
        code="NO_DATASTORE",
        suggestion="Check network access or set SUPABASE_LOCAL_URL for offline development",
        details={"probe_host": config.CONNECTIVITY_PROBE_HOST},
    )


def _host_of(url: str) -> str:
    return urlparse(url).hostname or url


class SupabaseClient:
    """
    Typed wrapper for comment store operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        comment = SupabaseClient.insert_comment({
            "content_id": "42",
            "content_type": "movie",
            "username": "ana",
            "comment": "Loved it",
        })
        updated = SupabaseClient.increment_comment_likes(comment["id"])
    """

    _instance: Client | None = None
    target: DatastoreTarget | None = None

    @classmethod
    def connect(cls, target: DatastoreTarget | None = None) -> Client:
        """
        Create the singleton client for `target` (selected if omitted).

        Raises:
            SupabaseClientError: If no target is available or creation fails
        """
        target = target or select_datastore(settings)
        try:
            cls._instance = create_client(target.url, target.key)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
                details={"target": target.name, "host": _host_of(target.url)},
            )
        cls.target = target
        logger.info(f"Connected to {target.name} Supabase project ({_host_of(target.url)})")
        return cls._instance

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key, which bypasses Row Level Security.
        This is appropriate for server-side operations.
        """
        if cls._instance is None:
            return cls.connect()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (next call reconnects)."""
        cls._instance = None
        cls.target = None

    @classmethod
    def target_name(cls) -> str:
        """Name of the connected project, for request logging."""
        return cls.target.name if cls.target else "unknown"

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_comments(cls, content_type: str, content_id: str) -> list[dict[str, Any]]:
        """
        Fetch all comments for one title, newest first.

        Args:
            content_type: "movie" or "tv"
            content_id: The title's id

        Returns:
            List of comment rows (possibly empty)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(COMMENTS_TABLE)
                .select("*")
                .eq("content_type", content_type)
                .eq("content_id", content_id)
                .order("created_at", desc=True)
                .execute()
            )

            comments = response.data or []
            logger.debug(f"Fetched {len(comments)} comments for {content_type}_{content_id}")
            return comments

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch comments: {e}",
                code="FETCH_COMMENTS_FAILED",
                suggestion="Check that the comments table exists and is reachable",
                details={"content_type": content_type, "content_id": content_id},
            )

    @classmethod
    def insert_comment(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new comment.

        Args:
            data: Row with content_id, content_type, username, comment

        Returns:
            Inserted row with generated id, likes and timestamps

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(COMMENTS_TABLE)
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert comment: {e}",
                code="INSERT_COMMENT_FAILED",
                details={
                    "content_type": data.get("content_type"),
                    "content_id": data.get("content_id"),
                },
            )

    @classmethod
    def increment_comment_likes(cls, comment_id: str | UUID) -> dict[str, Any] | None:
        """
        Atomically add one like to a comment.

        The increment runs inside Postgres (UPDATE ... SET likes = likes + 1
        RETURNING *), so concurrent likes never overwrite each other.

        Returns:
            The updated row, or None if no comment has that id

        Raises:
            SupabaseClientError: If the call fails
        """
        client = cls.get_client()
        comment_id_str = normalize_uuid(comment_id)

        try:
            response = client.rpc(
                INCREMENT_LIKES_FUNCTION,
                {"comment_id": comment_id_str},
            ).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to like comment: {e}",
                code="INCREMENT_LIKES_FAILED",
                suggestion=f"Check that the {INCREMENT_LIKES_FUNCTION} function is installed",
                details={"comment_id": comment_id_str},
            )

        rows = response.data
        if isinstance(rows, dict):
            return rows
        return rows[0] if rows else None

    @classmethod
    def ping(cls) -> None:
        """
        Run a trivial query against the comments table.

        Raises:
            Exception: Whatever the client raises when the store is unreachable
        """
        cls.get_client().table(COMMENTS_TABLE).select("id").limit(1).execute()
