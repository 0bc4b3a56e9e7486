import logging

from fastapi import APIRouter, Depends, File, UploadFile

from vidtube.auth.models import AccountUpdate
from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.errors import ConflictError, NotFoundError, ValidationError
from vidtube.media.storage import LocalMediaStorage, get_media_storage
from vidtube.query.pagination import PageRequest
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore, DuplicateRecord
from .queries import get_channel_profile, get_watch_history

logger = logging.getLogger("users")

router = APIRouter(tags=["users"])


@router.patch("/update-account")
def update_account_details(
    payload: AccountUpdate,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    try:
        user = store.update_by_id(
            "users", current_user["_id"], {"fullName": payload.fullName, "email": payload.email}
        )
    except DuplicateRecord:
        raise ConflictError("Email is already in use")
    logger.info(f"User {user['_id']} updated account details")
    return api_response(user, "Account details updated successfully")


def _replace_image(store, media, user, upload, field_name, label):
    if upload is None or not upload.filename:
        raise ValidationError(f"{label} file is missing")
    previous = user.get(f"{field_name}PublicId")
    asset = media.upload(upload, "image")
    updated = store.update_by_id(
        "users", user["_id"], {field_name: asset.url, f"{field_name}PublicId": asset.public_id}
    )
    if previous:
        media.delete(previous, "image")
    return updated


@router.patch("/avatar")
def update_user_avatar(
    avatar: UploadFile = File(None),
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    media: LocalMediaStorage = Depends(get_media_storage),
):
    user = _replace_image(store, media, current_user, avatar, "avatar", "Avatar")
    logger.info(f"User {user['_id']} updated avatar")
    return api_response(user, "Avatar updated successfully")


@router.patch("/cover-image")
def update_user_cover_image(
    coverImage: UploadFile = File(None),
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    media: LocalMediaStorage = Depends(get_media_storage),
):
    user = _replace_image(store, media, current_user, coverImage, "coverImage", "Cover image")
    logger.info(f"User {user['_id']} updated cover image")
    return api_response(user, "Cover image updated successfully")


@router.get("/c/{username}")
def get_user_channel_profile(
    username: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    if not username.strip():
        raise ValidationError("Username is missing")
    profile = get_channel_profile(store, username, current_user["_id"])
    return api_response(profile, "User channel fetched successfully")


@router.get("/history")
def get_user_watch_history(
    page: str = "1",
    limit: str = "10",
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    result = get_watch_history(store, current_user["_id"], PageRequest.from_query(page, limit))
    if result.is_exhausted:
        raise NotFoundError("Watch history exhausted")
    return api_response(result.items, "Watch history fetched successfully")
