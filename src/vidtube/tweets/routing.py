import logging

from fastapi import APIRouter, Depends

from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.errors import ForbiddenError, NotFoundError
from vidtube.query.pagination import PageRequest
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore
from vidtube.utils import is_valid_id
from .models import TweetContent
from .queries import list_user_tweets

logger = logging.getLogger("tweets")

router = APIRouter(tags=["tweets"])


def _owned_tweet(store: DocumentStore, tweet_id: str, user: Document, action: str) -> Document:
    tweet = store.find_by_id("tweets", tweet_id) if is_valid_id(tweet_id) else None
    if tweet is None:
        raise NotFoundError("Tweet does not exist")
    if tweet["owner"] != user["_id"]:
        raise ForbiddenError(f"Not authorized to {action} this tweet")
    return tweet


@router.post("/", status_code=201)
def create_tweet(
    payload: TweetContent,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    tweet = store.insert("tweets", {"owner": current_user["_id"], "content": payload.content})
    logger.info(f"User {current_user['_id']} tweeted {tweet['_id']}")
    return api_response(tweet, "Tweet created successfully", 201)


@router.get("/")
def get_current_user_tweets(
    page: str = "1",
    limit: str = "10",
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    result = list_user_tweets(store, current_user["_id"], PageRequest.from_query(page, limit))
    if result.is_exhausted:
        raise NotFoundError("Tweets exhausted")
    if result.is_empty:
        return api_response({}, "User does not have any tweets")
    return api_response(result.items, "All tweets fetched successfully")


@router.get("/user/{user_id}")
def get_user_tweets(
    user_id: str,
    page: str = "1",
    limit: str = "10",
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    if not is_valid_id(user_id) or store.find_by_id("users", user_id) is None:
        raise NotFoundError("User does not exist")
    result = list_user_tweets(store, user_id, PageRequest.from_query(page, limit))
    if result.is_exhausted:
        raise NotFoundError("Tweets exhausted")
    return api_response(result.items, "All tweets fetched successfully")


@router.patch("/{tweet_id}")
def update_tweet(
    tweet_id: str,
    payload: TweetContent,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_tweet(store, tweet_id, current_user, "edit")
    tweet = store.update_by_id("tweets", tweet_id, {"content": payload.content})
    logger.info(f"User {current_user['_id']} updated tweet {tweet_id}")
    return api_response(tweet, "Tweet updated successfully")


@router.delete("/{tweet_id}")
def delete_tweet(
    tweet_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    _owned_tweet(store, tweet_id, current_user, "delete")
    with store.transaction():
        store.delete_many("likes", {"targetKind": "tweet", "targetId": tweet_id})
        store.delete_by_id("tweets", tweet_id)
    logger.info(f"User {current_user['_id']} deleted tweet {tweet_id}")
    return api_response({}, "Tweet deleted successfully")
