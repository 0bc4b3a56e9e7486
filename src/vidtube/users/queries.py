from typing import Optional

from vidtube.errors import NotFoundError
from vidtube.query.pagination import Page, PageRequest, paginate
from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore

OWNER = RelationSpec(
    local_field="owner",
    foreign_collection="users",
    projected_fields=("username", "fullName", "avatar"),
)

WATCH_HISTORY = RelationSpec(
    local_field="watchHistory",
    foreign_collection="videos",
    output_field="history",
    projected_fields=("_id", "title", "description", "thumbnail", "duration", "views", "createdAt", "owner"),
    nested=(OWNER,),
)

WATCH_HISTORY_ROW = Projection(
    unwind="history",
    fields={
        "_id": "history._id",
        "title": "history.title",
        "description": "history.description",
        "thumbnail": "history.thumbnail",
        "duration": "history.duration",
        "views": "history.views",
        "createdAt": "history.createdAt",
        "username": "history.owner.username",
        "fullName": "history.owner.fullName",
        "avatar": "history.owner.avatar",
    },
)


def get_channel_profile(store: DocumentStore, username: str, viewer_id: Optional[str]) -> Document:
    channel = store.find_one("users", {"username": username.strip().lower()})
    if channel is None:
        raise NotFoundError("Channel does not exist")
    is_subscribed = bool(viewer_id) and store.count(
        "subscriptions", {"channel": channel["_id"], "subscriber": viewer_id}
    ) > 0
    return {
        "_id": channel["_id"],
        "fullName": channel["fullName"],
        "username": channel["username"],
        "email": channel["email"],
        "avatar": channel["avatar"],
        "coverImage": channel["coverImage"],
        "subscribersCount": store.count("subscriptions", {"channel": channel["_id"]}),
        "channelsSubscribedToCount": store.count("subscriptions", {"subscriber": channel["_id"]}),
        "isSubscribed": is_subscribed,
    }


def get_watch_history(store: DocumentStore, user_id: str, page_request: PageRequest) -> Page[Document]:
    """Watched videos in the order they were first watched, owner attached."""
    user = store.find_by_id("users", user_id)
    if user is None:
        raise NotFoundError("User does not exist")
    # ids of deleted videos would leave holes in the pages
    existing = {v["_id"] for v in store.find("videos", {"_id": {"$in": user["watchHistory"]}})}
    history = [video_id for video_id in user["watchHistory"] if video_id in existing]

    def fetch(skip: int, limit: int):
        window = {"_id": user["_id"], "watchHistory": history[skip:skip + limit]}
        return project(resolve_relations(store, [window], [WATCH_HISTORY]), WATCH_HISTORY_ROW)

    return paginate(page_request, fetch)
