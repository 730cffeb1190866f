# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-in for the Supabase comment store
# - Recording email transport
# =============================================================================

import os
import uuid
from datetime import datetime, timedelta, timezone

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:5173")

from unittest.mock import patch

import pytest

from lib.email_transport import EmailTransportError


# =============================================================================
# Fakes
# =============================================================================

class InMemoryCommentStore:
    """
    Implements the SupabaseClient comment methods over a dict.

    Timestamps advance one second per write so ordering is deterministic.
    """

    def __init__(self):
        self.rows: dict[str, dict] = {}
        self.clock = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        self.fail = False

    def _tick(self) -> str:
        self.clock += timedelta(seconds=1)
        return self.clock.isoformat()

    def _check(self):
        if self.fail:
            from lib.supabase_client import SupabaseClientError
            raise SupabaseClientError("connection refused", code="TEST_OUTAGE")

    def fetch_comments(self, content_type, content_id):
        self._check()
        rows = [
            dict(r) for r in self.rows.values()
            if r["content_type"] == content_type and r["content_id"] == content_id
        ]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    def insert_comment(self, data):
        self._check()
        now = self._tick()
        row = {
            "id": str(uuid.uuid4()),
            "likes": 0,
            "created_at": now,
            "updated_at": now,
            **data,
        }
        self.rows[row["id"]] = row
        return dict(row)

    def increment_comment_likes(self, comment_id):
        self._check()
        row = self.rows.get(str(comment_id))
        if row is None:
            return None
        row["likes"] += 1
        row["updated_at"] = self._tick()
        return dict(row)


class RecordingEmailTransport:
    """Collects messages; raises if `error` is set."""

    def __init__(self, error: Exception | None = None):
        self.sent = []
        self.error = error

    def send(self, message):
        if self.error is not None:
            raise self.error
        self.sent.append(message)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def comment_store():
    """In-memory store patched in place of SupabaseClient for the services."""
    store = InMemoryCommentStore()
    with patch("core.services.comment_service.SupabaseClient", store):
        yield store


@pytest.fixture
def email_transport():
    """Email transport that records what would have been sent."""
    return RecordingEmailTransport()


@pytest.fixture
def failing_email_transport():
    """Email transport whose send always fails."""
    return RecordingEmailTransport(error=EmailTransportError("535 authentication failed"))


@pytest.fixture
def sample_comment_row():
    """A comments table row as Supabase returns it."""
    return {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "content_id": "603",
        "content_type": "movie",
        "username": "neo",
        "comment": "Still holds up.",
        "likes": 3,
        "created_at": "2024-01-15T10:30:00+00:00",
        "updated_at": "2024-01-15T10:45:00+00:00",
    }


@pytest.fixture
def sample_comment_payload():
    """The same comment as clients see and relay it (camelCase)."""
    return {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "contentId": "42",
        "contentType": "movie",
        "username": "neo",
        "comment": "Still holds up.",
        "likes": 0,
        "createdAt": "2024-01-15T10:30:00Z",
        "updatedAt": "2024-01-15T10:30:00Z",
    }
