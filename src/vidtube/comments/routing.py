import logging

from fastapi import APIRouter, Depends

from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.errors import ForbiddenError, NotFoundError
from vidtube.query.pagination import PageRequest
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore
from vidtube.utils import is_valid_id
from .models import CommentContent
from .queries import list_video_comments

# Set up logging
logger = logging.getLogger("comments")

router = APIRouter(tags=["comments"])


def _existing_video(store: DocumentStore, video_id: str) -> Document:
    video = store.find_by_id("videos", video_id) if is_valid_id(video_id) else None
    if video is None:
        raise NotFoundError("Video does not exist")
    return video


def _owned_comment(store: DocumentStore, comment_id: str, user: Document, action: str) -> Document:
    comment = store.find_by_id("comments", comment_id) if is_valid_id(comment_id) else None
    if comment is None:
        raise NotFoundError("Comment does not exist")
    if comment["owner"] != user["_id"]:
        raise ForbiddenError(f"Not authorized to {action} this comment")
    return comment


@router.get("/video/{video_id}")
def get_video_comments(
    video_id: str,
    page: str = "1",
    limit: str = "10",
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Get comments for a video, newest first.
    - Query params: page (default 1), limit (default 10)
    """
    _existing_video(store, video_id)
    result = list_video_comments(store, video_id, PageRequest.from_query(page, limit))
    if result.is_exhausted:
        raise NotFoundError("Comments exhausted")
    if result.is_empty:
        raise NotFoundError("No comments found for this video")
    return api_response(result.items, "Comments fetched successfully")


@router.post("/video/{video_id}", status_code=201)
def add_comment(
    video_id: str,
    payload: CommentContent,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _existing_video(store, video_id)
    comment = store.insert(
        "comments",
        {"content": payload.content, "video": video_id, "owner": current_user["_id"]},
    )
    logger.info(f"User {current_user['_id']} commented on video {video_id}")
    return api_response(comment, "Comment added successfully", 201)


@router.patch("/comment/{comment_id}")
def update_comment(
    comment_id: str,
    payload: CommentContent,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_comment(store, comment_id, current_user, "edit")
    comment = store.update_by_id("comments", comment_id, {"content": payload.content})
    logger.info(f"User {current_user['_id']} updated comment {comment_id}")
    return api_response(comment, "Comment updated successfully")


@router.delete("/comment/{comment_id}")
def delete_comment(
    comment_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_comment(store, comment_id, current_user, "delete")
    with store.transaction():
        store.delete_many("likes", {"targetKind": "comment", "targetId": comment_id})
        store.delete_by_id("comments", comment_id)
    logger.info(f"User {current_user['_id']} deleted comment {comment_id}")
    return api_response({}, "Comment deleted successfully")
