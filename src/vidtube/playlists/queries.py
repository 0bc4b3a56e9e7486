from typing import List

from vidtube.errors import NotFoundError
from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore
from vidtube.users.queries import OWNER
from vidtube.utils import is_valid_id

PLAYLIST_VIDEOS = RelationSpec(
    local_field="videos",
    foreign_collection="videos",
    output_field="playlistVideos",
    projected_fields=("_id", "thumbnail", "title", "description", "views"),
)

PLAYLIST_VIDEO_ROW = Projection(
    unwind="playlistVideos",
    fields={
        "_id": "playlistVideos._id",
        "playlistId": "_id",
        "name": "name",
        "description": "description",
        "thumbnail": "playlistVideos.thumbnail",
        "videoTitle": "playlistVideos.title",
        "videoDescription": "playlistVideos.description",
        "views": "playlistVideos.views",
        "username": "owner.username",
        "fullName": "owner.fullName",
        "avatar": "owner.avatar",
    },
)


def existing_playlist(store: DocumentStore, playlist_id: str) -> Document:
    playlist = store.find_by_id("playlists", playlist_id) if is_valid_id(playlist_id) else None
    if playlist is None:
        raise NotFoundError("Playlist does not exist")
    return playlist


def get_playlist_videos(store: DocumentStore, playlist_id: str) -> List[Document]:
    """One row per video in the playlist, in the order they were added.

    A playlist without videos yields no rows; callers tell that apart from a
    missing playlist, which raises.
    """
    playlist = existing_playlist(store, playlist_id)
    resolved = resolve_relations(store, [playlist], [PLAYLIST_VIDEOS, OWNER])
    return project(resolved, PLAYLIST_VIDEO_ROW)


def list_user_playlists(store: DocumentStore, owner_id: str) -> List[Document]:
    playlists = store.find("playlists", {"owner": owner_id}, sort=[("updatedAt", -1)])
    member_ids = {video_id for playlist in playlists for video_id in playlist["videos"]}
    existing = {v["_id"] for v in store.find("videos", {"_id": {"$in": list(member_ids)}})}
    for playlist in playlists:
        playlist["videos"] = [video_id for video_id in playlist["videos"] if video_id in existing]
        playlist["totalVideos"] = len(playlist["videos"])
    return playlists
