from typing import List, Optional

from vidtube.db.models import LikeTarget
from vidtube.errors import NotFoundError
from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore
from vidtube.users.queries import OWNER
from vidtube.utils import is_valid_id

TARGET_COLLECTIONS = {
    LikeTarget.video: "videos",
    LikeTarget.comment: "comments",
    LikeTarget.tweet: "tweets",
}

LIKED_VIDEO = RelationSpec(
    local_field="targetId",
    foreign_collection="videos",
    output_field="likedVideo",
    projected_fields=("_id", "title", "description", "thumbnail", "views", "owner"),
    nested=(OWNER,),
)

LIKED_VIDEO_ROW = Projection(
    unwind="likedVideo",
    fields={
        "_id": "likedVideo._id",
        "thumbnail": "likedVideo.thumbnail",
        "title": "likedVideo.title",
        "description": "likedVideo.description",
        "views": "likedVideo.views",
        "fullName": "likedVideo.owner.fullName",
        "username": "likedVideo.owner.username",
        "avatar": "likedVideo.owner.avatar",
    },
)


def toggle_like(store: DocumentStore, kind: LikeTarget, target_id: str, user_id: str) -> Optional[Document]:
    """Like the target, or remove the like if there already is one.

    Returns the new like, or None when it was removed.
    """
    collection = TARGET_COLLECTIONS[kind]
    if not is_valid_id(target_id) or store.find_by_id(collection, target_id) is None:
        raise NotFoundError(f"{kind.value.capitalize()} does not exist")
    return store.toggle(
        "likes", {"targetKind": kind.value, "targetId": target_id, "likedBy": user_id}
    )


def list_liked_videos(store: DocumentStore, user_id: str) -> List[Document]:
    likes = store.find(
        "likes",
        {"likedBy": user_id, "targetKind": LikeTarget.video.value},
        sort=[("createdAt", -1)],
    )
    return project(resolve_relations(store, likes, [LIKED_VIDEO]), LIKED_VIDEO_ROW)
