from typing import List, Optional

from vidtube.errors import NotFoundError, ValidationError
from vidtube.query.projection import Projection, project
from vidtube.query.relations import RelationSpec, resolve_relations
from vidtube.store.adapter import Document, DocumentStore
from vidtube.utils import is_valid_id

CHANNEL_FIELDS = ("_id", "username", "fullName", "avatar")


def _user_rows(output_field: str) -> Projection:
    return Projection(
        unwind=output_field,
        fields={name: f"{output_field}.{name}" for name in CHANNEL_FIELDS},
    )


SUBSCRIBER = RelationSpec(
    local_field="subscriber",
    foreign_collection="users",
    output_field="subscriberUser",
    projected_fields=CHANNEL_FIELDS,
)

CHANNEL = RelationSpec(
    local_field="channel",
    foreign_collection="users",
    output_field="channelUser",
    projected_fields=CHANNEL_FIELDS,
)


def existing_channel(store: DocumentStore, channel_id: str) -> Document:
    channel = store.find_by_id("users", channel_id) if is_valid_id(channel_id) else None
    if channel is None:
        raise NotFoundError("Channel does not exist")
    return channel


def toggle_subscription(store: DocumentStore, subscriber_id: str, channel_id: str) -> Optional[Document]:
    """Subscribe, or unsubscribe when already subscribed. None means removed."""
    existing_channel(store, channel_id)
    if channel_id == subscriber_id:
        raise ValidationError("You cannot subscribe to your own channel")
    return store.toggle("subscriptions", {"subscriber": subscriber_id, "channel": channel_id})


def list_subscribers(store: DocumentStore, channel_id: str) -> List[Document]:
    subscriptions = store.find("subscriptions", {"channel": channel_id}, sort=[("createdAt", -1)])
    return project(resolve_relations(store, subscriptions, [SUBSCRIBER]), _user_rows("subscriberUser"))


def list_subscribed_channels(store: DocumentStore, subscriber_id: str) -> List[Document]:
    subscriptions = store.find("subscriptions", {"subscriber": subscriber_id}, sort=[("createdAt", -1)])
    return project(resolve_relations(store, subscriptions, [CHANNEL]), _user_rows("channelUser"))
