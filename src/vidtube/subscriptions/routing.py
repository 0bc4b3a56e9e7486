import logging

from fastapi import APIRouter, Depends

from vidtube.auth.utils import get_current_user
from vidtube.db.session import get_store
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore
from .queries import existing_channel, list_subscribed_channels, list_subscribers, toggle_subscription

logger = logging.getLogger("subscriptions")

router = APIRouter(tags=["subscriptions"])


@router.patch("/channel/{channel_id}")
def toggle_channel_subscription(
    channel_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    subscription = toggle_subscription(store, current_user["_id"], channel_id)
    if subscription is None:
        logger.info(f"User {current_user['_id']} unsubscribed from {channel_id}")
        return api_response({}, "Subscription removed successfully")
    logger.info(f"User {current_user['_id']} subscribed to {channel_id}")
    return api_response(subscription, "Subscribed to channel successfully")


@router.get("/channel/{channel_id}")
def get_user_channel_subscribers(
    channel_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    existing_channel(store, channel_id)
    subscribers = list_subscribers(store, channel_id)
    return api_response(subscribers, "All subscribers of the channel fetched successfully")


@router.get("/user/{subscriber_id}")
def get_subscribed_channels(
    subscriber_id: str,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    existing_channel(store, subscriber_id)
    channels = list_subscribed_channels(store, subscriber_id)
    return api_response(channels, "Fetched all user channel subscription")
