# =============================================================================
# tests/test_comment_service.py - Comment Service Tests
# =============================================================================
# Tests for listing, creating and liking comments against an in-memory
# store (see conftest.comment_store).
# =============================================================================

import uuid

import pytest

from app.exceptions import (
    CommentNotFoundError,
    InvalidContentTypeError,
    MissingFieldsError,
    StorageError,
)
from core.models.comment import CommentCreate, ContentType
from core.services.comment_service import CommentService


def make_request(**overrides) -> CommentCreate:
    fields = {
        "content_id": "42",
        "content_type": "movie",
        "username": "neo",
        "comment": "Whoa.",
    }
    fields.update(overrides)
    return CommentCreate(**fields)


# =============================================================================
# Create
# =============================================================================

class TestCreateComment:
    """Tests for CommentService.create_comment."""

    def test_create_returns_stored_comment(self, comment_store):
        comment = CommentService.create_comment(make_request())

        assert comment.id
        assert comment.likes == 0
        assert comment.created_at is not None
        assert comment.content_type is ContentType.MOVIE
        assert comment.id in comment_store.rows

    def test_created_comment_is_listed(self, comment_store):
        comment = CommentService.create_comment(make_request())

        listed = CommentService.list_comments("movie", "42")

        assert [c.id for c in listed] == [comment.id]

    @pytest.mark.parametrize("field,wire_name", [
        ("content_id", "contentId"),
        ("content_type", "contentType"),
        ("username", "username"),
        ("comment", "comment"),
    ])
    def test_missing_field(self, comment_store, field, wire_name):
        with pytest.raises(MissingFieldsError) as exc_info:
            CommentService.create_comment(make_request(**{field: None}))

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["missing_fields"] == [wire_name]
        assert comment_store.rows == {}

    def test_empty_and_blank_fields_count_as_missing(self, comment_store):
        with pytest.raises(MissingFieldsError) as exc_info:
            CommentService.create_comment(make_request(username="", comment="   "))

        assert exc_info.value.details["missing_fields"] == ["username", "comment"]

    def test_missing_checked_before_enum(self, comment_store):
        with pytest.raises(MissingFieldsError):
            CommentService.create_comment(make_request(content_type="anime", comment=None))

    def test_invalid_content_type(self, comment_store):
        with pytest.raises(InvalidContentTypeError) as exc_info:
            CommentService.create_comment(make_request(content_type="anime"))

        assert exc_info.value.code == "INVALID_ENUM"
        assert exc_info.value.status_code == 400
        assert comment_store.rows == {}

    def test_storage_failure(self, comment_store):
        comment_store.fail = True

        with pytest.raises(StorageError) as exc_info:
            CommentService.create_comment(make_request())

        assert exc_info.value.status_code == 500


# =============================================================================
# List
# =============================================================================

class TestListComments:
    """Tests for CommentService.list_comments."""

    def test_empty(self, comment_store):
        assert CommentService.list_comments("tv", "7") == []

    def test_newest_first(self, comment_store):
        first = CommentService.create_comment(make_request(comment="first"))
        second = CommentService.create_comment(make_request(comment="second"))
        third = CommentService.create_comment(make_request(comment="third"))

        listed = CommentService.list_comments("movie", "42")

        assert [c.id for c in listed] == [third.id, second.id, first.id]
        assert all(
            a.created_at > b.created_at for a, b in zip(listed, listed[1:])
        )

    def test_scoped_to_title(self, comment_store):
        CommentService.create_comment(make_request())
        CommentService.create_comment(make_request(content_type="tv"))
        CommentService.create_comment(make_request(content_id="43"))

        listed = CommentService.list_comments("movie", "42")

        assert len(listed) == 1
        assert listed[0].content_type is ContentType.MOVIE
        assert listed[0].content_id == "42"

    def test_invalid_content_type(self, comment_store):
        with pytest.raises(InvalidContentTypeError):
            CommentService.list_comments("anime", "42")

    def test_storage_failure(self, comment_store):
        comment_store.fail = True

        with pytest.raises(StorageError):
            CommentService.list_comments("movie", "42")


# =============================================================================
# Like
# =============================================================================

class TestLikeComment:
    """Tests for CommentService.like_comment."""

    def test_like_increments_by_one(self, comment_store):
        created = CommentService.create_comment(make_request())

        liked = CommentService.like_comment(created.id)

        assert liked.likes == 1
        assert liked.id == created.id
        assert liked.comment == created.comment
        assert liked.username == created.username
        assert liked.content_id == created.content_id
        assert liked.created_at == created.created_at
        assert liked.updated_at > created.updated_at

    def test_two_likes(self, comment_store):
        created = CommentService.create_comment(make_request())

        CommentService.like_comment(created.id)
        liked = CommentService.like_comment(created.id)

        assert liked.likes == 2

    def test_unknown_id(self, comment_store):
        created = CommentService.create_comment(make_request())

        with pytest.raises(CommentNotFoundError) as exc_info:
            CommentService.like_comment(str(uuid.uuid4()))

        assert exc_info.value.status_code == 404
        assert comment_store.rows[created.id]["likes"] == 0

    def test_malformed_id_is_not_found(self, comment_store):
        with pytest.raises(CommentNotFoundError):
            CommentService.like_comment("not-a-uuid")

    def test_storage_failure(self, comment_store):
        created = CommentService.create_comment(make_request())
        comment_store.fail = True

        with pytest.raises(StorageError):
            CommentService.like_comment(created.id)
