from vidtube.query.pagination import Page, PageRequest, paginate
from vidtube.query.projection import Projection, project
from vidtube.query.relations import resolve_relations
from vidtube.store.adapter import Document, DocumentStore
from vidtube.users.queries import OWNER

TWEET_ROW = Projection(
    fields={
        "_id": "_id",
        "content": "content",
        "createdAt": "createdAt",
        "username": "owner.username",
        "fullName": "owner.fullName",
        "avatar": "owner.avatar",
    }
)


def list_user_tweets(store: DocumentStore, owner_id: str, page_request: PageRequest) -> Page[Document]:
    def fetch(skip: int, limit: int):
        tweets = store.find(
            "tweets", {"owner": owner_id}, sort=[("createdAt", -1)], skip=skip, limit=limit
        )
        return project(resolve_relations(store, tweets, [OWNER]), TWEET_ROW)

    return paginate(page_request, fetch)
