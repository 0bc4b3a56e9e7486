import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.errors import ForbiddenError, NotFoundError, ValidationError
from vidtube.media.storage import LocalMediaStorage, get_media_storage
from vidtube.query.pagination import PageRequest
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore
from vidtube.utils import is_blank, is_valid_id
from .models import VideoDetailsUpdate, VideoPublish
from .queries import get_video_detail, list_videos, record_view

logger = logging.getLogger("videos")

router = APIRouter(tags=["videos"])


def owned_video(store: DocumentStore, video_id: str, user: Document, action: str) -> Document:
    video = store.find_by_id("videos", video_id) if is_valid_id(video_id) else None
    if video is None:
        raise NotFoundError("Video does not exist")
    if video["owner"] != user["_id"]:
        raise ForbiddenError(f"Not authorized to {action} this video")
    return video


@router.get("/")
def get_all_videos(
    page: str = "1",
    limit: str = "10",
    query: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    userId: Optional[str] = None,
    sortBy: Optional[str] = None,
    sortType: Optional[str] = None,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """
    List published videos.
    - Query params: page, limit, title/query, description, userId, sortBy, sortType (asc|desc)
    """
    if userId is not None and not is_valid_id(userId):
        raise NotFoundError("Channel does not exist")
    result = list_videos(
        store,
        PageRequest.from_query(page, limit),
        title=title or query,
        description=description,
        owner=userId,
        sort_by=sortBy,
        sort_type=sortType,
    )
    if result.is_exhausted:
        raise NotFoundError("Videos exhausted")
    if result.is_empty:
        raise NotFoundError("No video found")
    return api_response(result.items, "Videos fetched successfully")


@router.post("/", status_code=201)
def publish_a_video(
    title: str = Form(""),
    description: str = Form(""),
    duration: float = Form(0),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    media: LocalMediaStorage = Depends(get_media_storage),
):
    details = VideoPublish.parse(title=title, description=description, duration=duration)
    if videoFile is None or not videoFile.filename:
        raise ValidationError("Video is required")
    if thumbnail is None or not thumbnail.filename:
        raise ValidationError("Thumbnail is required")

    video_asset = media.upload(videoFile, "video")
    thumbnail_asset = media.upload(thumbnail, "image")

    video = store.insert(
        "videos",
        {
            "owner": current_user["_id"],
            "title": details.title,
            "description": details.description,
            "duration": details.duration,
            "videoFile": video_asset.url,
            "videoFilePublicId": video_asset.public_id,
            "thumbnail": thumbnail_asset.url,
            "thumbnailPublicId": thumbnail_asset.public_id,
        },
    )
    logger.info(f"User {current_user['_id']} published video {video['_id']}")
    return api_response(video, "Video published successfully", 201)


@router.get("/{video_id}")
def get_video_by_id(
    video_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    video = get_video_detail(store, video_id)
    if not video["isPublished"] and video["owner"] != current_user["_id"]:
        raise NotFoundError("Video does not exist")
    record_view(store, video_id, current_user["_id"])
    video["views"] += 1
    return api_response(video, "Video fetched successfully")


@router.patch("/{video_id}")
def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    media: LocalMediaStorage = Depends(get_media_storage),
):
    video = owned_video(store, video_id, current_user, "edit")
    if is_blank(title) and is_blank(description) and (thumbnail is None or not thumbnail.filename):
        raise ValidationError("All fields are required")
    changes = VideoDetailsUpdate.parse(title=title, description=description).changes()

    old_thumbnail = None
    if thumbnail is not None and thumbnail.filename:
        asset = media.upload(thumbnail, "image")
        changes.update(thumbnail=asset.url, thumbnailPublicId=asset.public_id)
        old_thumbnail = video["thumbnailPublicId"]

    updated = store.update_by_id("videos", video_id, changes)
    if old_thumbnail and not media.delete(old_thumbnail, "image"):
        logger.warning(f"Old thumbnail {old_thumbnail} of video {video_id} was already gone")
    logger.info(f"User {current_user['_id']} updated video {video_id}")
    return api_response(updated, "Video updated successfully")


@router.delete("/{video_id}")
def delete_video(
    video_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    media: LocalMediaStorage = Depends(get_media_storage),
):
    owned_video(store, video_id, current_user, "delete")
    comment_ids = [c["_id"] for c in store.find("comments", {"video": video_id})]
    with store.transaction():
        if comment_ids:
            store.delete_many("likes", {"targetKind": "comment", "targetId": {"$in": comment_ids}})
            store.delete_many("comments", {"video": video_id})
        store.delete_many("likes", {"targetKind": "video", "targetId": video_id})
        store.pull_all("users", "watchHistory", video_id)
        store.pull_all("playlists", "videos", video_id)
        deleted = store.delete_by_id("videos", video_id)

    for public_id, kind in ((deleted["videoFilePublicId"], "video"), (deleted["thumbnailPublicId"], "image")):
        if not media.delete(public_id, kind):
            logger.warning(f"Media {public_id} of video {video_id} was already gone")

    logger.info(f"User {current_user['_id']} deleted video {video_id}")
    return api_response({}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
def toggle_publish_status(
    video_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    video = owned_video(store, video_id, current_user, "edit")
    updated = store.update_by_id("videos", video_id, {"isPublished": not video["isPublished"]})
    logger.info(f"User {current_user['_id']} set video {video_id} published={updated['isPublished']}")
    return api_response(updated, "Publish status toggled successfully")
