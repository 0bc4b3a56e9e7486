import logging

from fastapi import APIRouter, Depends

from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.errors import ConflictError, ForbiddenError, NotFoundError
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore, DuplicateRecord
from vidtube.utils import is_valid_id
from .models import PlaylistDetails
from .queries import existing_playlist, get_playlist_videos, list_user_playlists

# Set up logging
logger = logging.getLogger("playlists")

router = APIRouter(tags=["playlists"])


def _owned_playlist(store: DocumentStore, playlist_id: str, user: Document, action: str) -> Document:
    playlist = existing_playlist(store, playlist_id)
    if playlist["owner"] != user["_id"]:
        raise ForbiddenError(f"Not authorized to {action} this playlist")
    return playlist


# Playlist CRUD Endpoints
@router.post("/", status_code=201)
def create_playlist(
    payload: PlaylistDetails,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Create a new playlist. Names are unique per owner.
    """
    try:
        playlist = store.insert(
            "playlists",
            {"name": payload.name, "description": payload.description, "owner": current_user["_id"]},
        )
    except DuplicateRecord:
        raise ConflictError("Playlist already exist")
    logger.info(f"User {current_user['_id']} created playlist '{payload.name}'")
    return api_response(playlist, "Playlist created successfully", 201)


@router.get("/")
def get_current_user_playlists(
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    playlists = list_user_playlists(store, current_user["_id"])
    return api_response(playlists, "User playlists fetched successfully")


@router.get("/user/{user_id}")
def get_user_playlists(
    user_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    if not is_valid_id(user_id) or store.find_by_id("users", user_id) is None:
        raise NotFoundError("User does not exist")
    playlists = list_user_playlists(store, user_id)
    return api_response(playlists, "User playlists fetched successfully")


@router.get("/{playlist_id}")
def get_playlist_by_id(
    playlist_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    rows = get_playlist_videos(store, playlist_id)
    if not rows:
        return api_response({}, "Playlist does not have videos yet")
    return api_response(rows, "Playlist details fetched successfully")


@router.patch("/{playlist_id}")
def update_playlist(
    playlist_id: str,
    payload: PlaylistDetails,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_playlist(store, playlist_id, current_user, "edit")
    try:
        playlist = store.update_by_id(
            "playlists", playlist_id, {"name": payload.name, "description": payload.description}
        )
    except DuplicateRecord:
        raise ConflictError("Playlist already exist")
    logger.info(f"User {current_user['_id']} updated playlist {playlist_id}")
    return api_response(playlist, "Playlist updated successfully")


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_playlist(store, playlist_id, current_user, "delete")
    store.delete_by_id("playlists", playlist_id)
    logger.info(f"User {current_user['_id']} deleted playlist {playlist_id}")
    return api_response({}, "Playlist deleted successfully")


# Playlist Item Management
@router.patch("/add/video/{video_id}/playlist/{playlist_id}")
def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_playlist(store, playlist_id, current_user, "modify")
    if not is_valid_id(video_id) or store.find_by_id("videos", video_id) is None:
        raise NotFoundError("Video does not exist")
    added = store.add_to_set("playlists", playlist_id, "videos", video_id)
    playlist = store.update_by_id("playlists", playlist_id, {})
    if added:
        logger.info(f"User {current_user['_id']} added video {video_id} to playlist {playlist_id}")
    return api_response(playlist, "Video added to playlist successfully")


@router.patch("/remove/video/{video_id}/playlist/{playlist_id}")
def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_playlist(store, playlist_id, current_user, "modify")
    if not store.pull("playlists", playlist_id, "videos", video_id):
        raise NotFoundError("Video does not exist in the playlist")
    store.update_by_id("playlists", playlist_id, {})
    logger.info(f"User {current_user['_id']} removed video {video_id} from playlist {playlist_id}")
    return api_response({}, "Video removed from playlist successfully")
