import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field

from vidtube.utils import generate_id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    username: str = Field(index=True, unique=True, max_length=50)
    email: str = Field(index=True, unique=True, max_length=255)
    full_name: str = Field(max_length=100)
    avatar: str = Field(max_length=500)
    avatar_public_id: Optional[str] = Field(default=None, max_length=255)
    cover_image: str = Field(default="", max_length=500)
    cover_image_public_id: Optional[str] = Field(default=None, max_length=255)
    password: str
    refresh_token: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class WatchHistory(SQLModel, table=True):
    """One row per video in a user's watch history; row id gives the order."""
    __tablename__ = "watch_history"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    video_id: str = Field(index=True, max_length=32)


class Video(SQLModel, table=True):
    __tablename__ = "videos"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    owner: str = Field(foreign_key="users.id", index=True, max_length=32)
    title: str = Field(index=True, max_length=255)
    description: str = Field(default="", max_length=5000)
    video_file: str = Field(max_length=500)
    video_file_public_id: str = Field(max_length=255)
    thumbnail: str = Field(max_length=500)
    thumbnail_public_id: str = Field(max_length=255)
    duration: float = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    is_published: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class Comment(SQLModel, table=True):
    __tablename__ = "comments"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    content: str = Field(max_length=1000)
    video: str = Field(foreign_key="videos.id", index=True, max_length=32)
    owner: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class LikeTarget(str, enum.Enum):
    video = "video"
    comment = "comment"
    tweet = "tweet"


class Like(SQLModel, table=True):
    """A like on exactly one video, comment or tweet."""
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("target_kind", "target_id", "liked_by", name="uq_likes_target_user"),
    )

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    target_kind: LikeTarget = Field(index=True)
    target_id: str = Field(index=True, max_length=32)
    liked_by: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class Subscription(SQLModel, table=True):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber", "channel", name="uq_subscriptions_subscriber_channel"),
    )

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    subscriber: str = Field(foreign_key="users.id", index=True, max_length=32)
    channel: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class Tweet(SQLModel, table=True):
    __tablename__ = "tweets"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    owner: str = Field(foreign_key="users.id", index=True, max_length=32)
    content: str = Field(max_length=280)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class Playlist(SQLModel, table=True):
    __tablename__ = "playlists"
    __table_args__ = (UniqueConstraint("owner", "name", name="uq_playlists_owner_name"),)

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    owner: str = Field(foreign_key="users.id", index=True, max_length=32)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class PlaylistVideo(SQLModel, table=True):
    """Playlist membership; row id gives the order videos were added in."""
    __tablename__ = "playlist_videos"
    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlist_videos_playlist_video"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    playlist_id: str = Field(foreign_key="playlists.id", index=True, max_length=32)
    video_id: str = Field(index=True, max_length=32)
