from vidtube.query.pagination import Page, PageRequest, paginate
from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore
from vidtube.users.queries import OWNER

COMMENT_VIDEO = RelationSpec(
    local_field="video",
    foreign_collection="videos",
    projected_fields=("_id", "title", "description", "views", "thumbnail"),
)

COMMENT_ROW = Projection(
    fields={
        "_id": "_id",
        "content": "content",
        "createdAt": "createdAt",
        "updatedAt": "updatedAt",
        "username": "owner.username",
        "fullName": "owner.fullName",
        "avatar": "owner.avatar",
        "videoId": "video._id",
        "videoTitle": "video.title",
        "videoDescription": "video.description",
        "videoViews": "video.views",
        "videoThumbnail": "video.thumbnail",
    }
)


def list_video_comments(store: DocumentStore, video_id: str, page_request: PageRequest) -> Page[Document]:
    """Comments on a video, newest first, with author and video attached."""

    def fetch(skip: int, limit: int):
        comments = store.find(
            "comments", {"video": video_id}, sort=[("createdAt", -1)], skip=skip, limit=limit
        )
        return project(resolve_relations(store, comments, [OWNER, COMMENT_VIDEO]), COMMENT_ROW)

    return paginate(page_request, fetch)
