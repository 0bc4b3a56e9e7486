"""initial tables

Revision ID: 0001_initial
Revises: 
Create Date: 2025-08-10 00:00:00
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _id_column() -> sa.Column:
    return sa.Column("id", sa.String(length=32), primary_key=True)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("avatar", sa.String(length=500), nullable=False),
        sa.Column("avatar_public_id", sa.String(length=255), nullable=True),
        sa.Column("cover_image", sa.String(length=500), nullable=False),
        sa.Column("cover_image_public_id", sa.String(length=255), nullable=True),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("refresh_token", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "videos",
        _id_column(),
        sa.Column("owner", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=5000), nullable=False),
        sa.Column("video_file", sa.String(length=500), nullable=False),
        sa.Column("video_file_public_id", sa.String(length=255), nullable=False),
        sa.Column("thumbnail", sa.String(length=500), nullable=False),
        sa.Column("thumbnail_public_id", sa.String(length=255), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_videos_owner", "videos", ["owner"])
    op.create_index("ix_videos_title", "videos", ["title"])
    op.create_index("ix_videos_is_published", "videos", ["is_published"])
    op.create_index("ix_videos_created_at", "videos", ["created_at"])

    op.create_table(
        "watch_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("video_id", sa.String(length=32), nullable=False),
        sa.UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),
    )
    op.create_index("ix_watch_history_user_id", "watch_history", ["user_id"])
    op.create_index("ix_watch_history_video_id", "watch_history", ["video_id"])

    op.create_table(
        "comments",
        _id_column(),
        sa.Column("content", sa.String(length=1000), nullable=False),
        sa.Column("video", sa.String(length=32), sa.ForeignKey("videos.id"), nullable=False),
        sa.Column("owner", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_video", "comments", ["video"])
    op.create_index("ix_comments_owner", "comments", ["owner"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])

    op.create_table(
        "likes",
        _id_column(),
        sa.Column(
            "target_kind",
            sa.Enum("video", "comment", "tweet", name="liketarget"),
            nullable=False,
        ),
        sa.Column("target_id", sa.String(length=32), nullable=False),
        sa.Column("liked_by", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("target_kind", "target_id", "liked_by", name="uq_likes_target_user"),
    )
    op.create_index("ix_likes_target_kind", "likes", ["target_kind"])
    op.create_index("ix_likes_target_id", "likes", ["target_id"])
    op.create_index("ix_likes_liked_by", "likes", ["liked_by"])

    op.create_table(
        "subscriptions",
        _id_column(),
        sa.Column("subscriber", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("channel", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("subscriber", "channel", name="uq_subscriptions_subscriber_channel"),
    )
    op.create_index("ix_subscriptions_subscriber", "subscriptions", ["subscriber"])
    op.create_index("ix_subscriptions_channel", "subscriptions", ["channel"])

    op.create_table(
        "tweets",
        _id_column(),
        sa.Column("owner", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.String(length=280), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_tweets_owner", "tweets", ["owner"])
    op.create_index("ix_tweets_created_at", "tweets", ["created_at"])

    op.create_table(
        "playlists",
        _id_column(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("owner", sa.String(length=32), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("owner", "name", name="uq_playlists_owner_name"),
    )
    op.create_index("ix_playlists_owner", "playlists", ["owner"])

    op.create_table(
        "playlist_videos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("playlist_id", sa.String(length=32), sa.ForeignKey("playlists.id"), nullable=False),
        sa.Column("video_id", sa.String(length=32), nullable=False),
        sa.UniqueConstraint("playlist_id", "video_id", name="uq_playlist_videos_playlist_video"),
    )
    op.create_index("ix_playlist_videos_playlist_id", "playlist_videos", ["playlist_id"])
    op.create_index("ix_playlist_videos_video_id", "playlist_videos", ["video_id"])


def downgrade() -> None:
    for table in (
        "playlist_videos",
        "playlists",
        "tweets",
        "subscriptions",
        "likes",
        "comments",
        "watch_history",
        "videos",
        "users",
    ):
        op.drop_table(table)
    sa.Enum(name="liketarget").drop(op.get_bind(), checkfirst=True)
