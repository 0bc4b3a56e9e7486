from fastapi import APIRouter, Depends

from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore
from vidtube.subscriptions.queries import existing_channel
from .queries import channel_stats, channel_videos

router = APIRouter(tags=["dashboard"])


@router.get("/stats")
def get_current_user_channel_stats(
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Channel totals for the dashboard: videos, views, video likes and subscribers.
    """
    stats = channel_stats(store, current_user["_id"])
    return api_response(stats, "All channel stats fetched successfully")


@router.get("/videos")
def get_current_user_channel_videos(
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    videos = channel_videos(store, current_user["_id"], published_only=False)
    return api_response(videos, "All videos of the channel fetched successfully")


@router.get("/videos/channel/{channel_id}")
def get_channel_videos(
    channel_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    existing_channel(store, channel_id)
    published_only = channel_id != current_user["_id"]
    videos = channel_videos(store, channel_id, published_only=published_only)
    return api_response(videos, "All videos of the channel fetched successfully")
