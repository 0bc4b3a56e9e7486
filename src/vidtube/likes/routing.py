import logging

from fastapi import APIRouter, Depends

from vidtube.auth.utils import get_current_user
from vidtube.db.models import LikeTarget
from vidtube.db.session import get_store
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore
from .queries import list_liked_videos, toggle_like

logger = logging.getLogger("likes")

router = APIRouter(tags=["likes"])


def _toggle(store: DocumentStore, kind: LikeTarget, target_id: str, user: Document) -> dict:
    like = toggle_like(store, kind, target_id, user["_id"])
    state = "liked" if like else "unliked"
    logger.info(f"User {user['_id']} {state} {kind.value} {target_id}")
    return api_response(like or {}, f"Like toggled on {kind.value} successfully")


@router.post("/toggle/v/{video_id}")
def toggle_video_like(
    video_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    return _toggle(store, LikeTarget.video, video_id, current_user)


@router.post("/toggle/c/{comment_id}")
def toggle_comment_like(
    comment_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    return _toggle(store, LikeTarget.comment, comment_id, current_user)


@router.post("/toggle/t/{tweet_id}")
def toggle_tweet_like(
    tweet_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    return _toggle(store, LikeTarget.tweet, tweet_id, current_user)


@router.get("/videos")
def get_liked_videos(
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    videos = list_liked_videos(store, current_user["_id"])
    return api_response(videos, "All videos liked by the user fetched successfully")
