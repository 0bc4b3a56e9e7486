from typing import List

from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore

CHANNEL_OWNER = RelationSpec(
    local_field="owner",
    foreign_collection="users",
    projected_fields=("username", "fullName", "avatar", "coverImage"),
)

CHANNEL_VIDEO_ROW = Projection(
    fields={
        "_id": "_id",
        "thumbnail": "thumbnail",
        "title": "title",
        "description": "description",
        "views": "views",
        "isPublished": "isPublished",
        "createdAt": "createdAt",
        "username": "owner.username",
        "fullName": "owner.fullName",
        "avatar": "owner.avatar",
        "coverImage": "owner.coverImage",
    }
)


def channel_stats(store: DocumentStore, channel_id: str) -> Document:
    video_ids = [v["_id"] for v in store.find("videos", {"owner": channel_id})]
    total_likes = 0
    if video_ids:
        total_likes = store.count("likes", {"targetKind": "video", "targetId": {"$in": video_ids}})
    return {
        "totalVideosCount": len(video_ids),
        "totalViewsCount": store.sum("videos", "views", {"owner": channel_id}),
        "totalVideoLikesCount": total_likes,
        "totalSubscribersCount": store.count("subscriptions", {"channel": channel_id}),
    }


def channel_videos(store: DocumentStore, channel_id: str, published_only: bool) -> List[Document]:
    query = {"owner": channel_id}
    if published_only:
        query["isPublished"] = True
    videos = store.find("videos", query, sort=[("createdAt", -1)])
    return project(resolve_relations(store, videos, [CHANNEL_OWNER]), CHANNEL_VIDEO_ROW)
