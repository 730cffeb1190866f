# =============================================================================
# app/routers/comments.py - Comment Endpoints
# =============================================================================
# List, create and like comments for a movie or TV show.
#
# Responses are the stored comment; clients relay them to the room over
# the WebSocket channel themselves (send_comment / like_comment).
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path
from starlette.concurrency import run_in_threadpool

from core.models.comment import CommentCreate, CommentResponse
from core.services.comment_service import CommentService

router = APIRouter()


@router.get("/{content_type}/{content_id}", response_model=list[CommentResponse])
async def list_comments(
    content_type: Annotated[str, Path(description="movie or tv")],
    content_id: Annotated[str, Path(description="Id of the movie/show")],
):
    """
    List all comments for a title, newest first.

    No pagination. Returns an empty list if nobody has commented yet.
    """
    return await run_in_threadpool(CommentService.list_comments, content_type, content_id)


@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(request: CommentCreate):
    """
    Create a comment.

    All of contentId, contentType, username and comment are required;
    contentType must be movie or tv.
    """
    return await run_in_threadpool(CommentService.create_comment, request)


@router.post("/like/{comment_id}", response_model=CommentResponse)
async def like_comment(
    comment_id: Annotated[str, Path(description="Comment UUID")],
):
    """
    Add one like to a comment and return the updated comment.
    """
    return await run_in_threadpool(CommentService.like_comment, comment_id)
