from typing import Optional

from vidtube.errors import NotFoundError
from vidtube.query.pagination import Page, PageRequest, paginate
from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore
from vidtube.users.queries import OWNER
from vidtube.utils import is_valid_id

SORTABLE_FIELDS = {"createdAt", "updatedAt", "views", "title", "duration"}

VIDEO_CARD = Projection(
    fields={
        "_id": "_id",
        "title": "title",
        "description": "description",
        "thumbnail": "thumbnail",
        "duration": "duration",
        "views": "views",
        "createdAt": "createdAt",
        "fullName": "owner.fullName",
        "username": "owner.username",
        "avatar": "owner.avatar",
    }
)

VIDEO_DETAIL = Projection(
    fields={
        **VIDEO_CARD.fields,
        "videoFile": "videoFile",
        "isPublished": "isPublished",
        "owner": "owner._id",
    }
)

DETAIL_OWNER = RelationSpec(
    local_field="owner",
    foreign_collection="users",
    projected_fields=("_id", "username", "fullName", "avatar"),
)


def sort_spec(sort_by: Optional[str], sort_type: Optional[str]):
    """Caller-chosen sort; unknown fields fall back to newest first."""
    if sort_by not in SORTABLE_FIELDS:
        return [("createdAt", -1)]
    return [(sort_by, -1 if (sort_type or "").lower() == "desc" else 1)]


def list_videos(
    store: DocumentStore,
    page_request: PageRequest,
    title: Optional[str] = None,
    description: Optional[str] = None,
    owner: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_type: Optional[str] = None,
) -> Page[Document]:
    query = {"isPublished": True}
    if title:
        query["title"] = {"$contains": title}
    if description:
        query["description"] = {"$contains": description}
    if owner:
        query["owner"] = owner
    sort = sort_spec(sort_by, sort_type)

    def fetch(skip: int, limit: int):
        videos = store.find("videos", query, sort=sort, skip=skip, limit=limit)
        return project(resolve_relations(store, videos, [OWNER]), VIDEO_CARD)

    return paginate(page_request, fetch)


def get_video_detail(store: DocumentStore, video_id: str) -> Document:
    video = store.find_by_id("videos", video_id) if is_valid_id(video_id) else None
    if video is None:
        raise NotFoundError("Video does not exist")
    return project(resolve_relations(store, [video], [DETAIL_OWNER]), VIDEO_DETAIL)[0]


def record_view(store: DocumentStore, video_id: str, viewer_id: str) -> None:
    """Count a view and remember the video in the viewer's watch history."""
    store.increment("videos", video_id, "views")
    store.add_to_set("users", viewer_id, "watchHistory", video_id)
