"""Create the Portal Hub schema.

Revision ID: 20261018_initial_schema
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

_UUID = postgresql.UUID(as_uuid=True)
_JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _user_fk(name: str = "user_id", *, nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(name, _UUID, sa.ForeignKey("users.id", ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_changed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("user_id", _UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("display_name", sa.String(150), nullable=True),
        sa.Column("full_name", sa.String(150), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("is_private", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("followers_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("following_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("nutech_id", sa.String(16), nullable=True),
        sa.Column("department", sa.String(120), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_profiles_username", "profiles", ["username"], unique=True)

    op.create_table(
        "follows",
        sa.Column("id", _UUID, primary_key=True),
        _user_fk("follower_id"),
        _user_fk("following_id"),
        sa.Column("status", sa.String(16), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follows_not_self"),
        sa.CheckConstraint("status IN ('pending', 'accepted')", name="ck_follows_status"),
    )
    op.create_index("ix_follows_follower_id", "follows", ["follower_id"])
    op.create_index("ix_follows_following_id", "follows", ["following_id"])

    op.create_table(
        "posts",
        sa.Column("id", _UUID, primary_key=True),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("video_url", sa.String(1024), nullable=True),
        sa.Column("media_urls", _JSON, nullable=True),
        sa.Column("media_metadata", _JSON, nullable=True),
        sa.Column("is_private", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("visibility", sa.String(20), server_default="public", nullable=False),
        sa.Column("likes_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("comments_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("hashtags", _JSON, nullable=True),
        sa.Column("mentions", _JSON, nullable=True),
        sa.Column("edit_history", _JSON, nullable=False),
        sa.Column("edited_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"])

    for table, extra, unique in (
        ("likes", [], sa.UniqueConstraint("post_id", "user_id", name="uq_likes_post_user")),
        (
            "reactions",
            [sa.Column("reaction_type", sa.String(16), nullable=False)],
            sa.UniqueConstraint("post_id", "user_id", "reaction_type", name="uq_reactions_post_user_type"),
        ),
        ("bookmarks", [], sa.UniqueConstraint("post_id", "user_id", name="uq_bookmarks_post_user")),
    ):
        op.create_table(
            table,
            sa.Column("id", _UUID, primary_key=True),
            sa.Column("post_id", _UUID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
            _user_fk(),
            *extra,
            _created_at(),
            unique,
        )
        op.create_index(f"ix_{table}_post_id", table, ["post_id"])
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    op.create_table(
        "comments",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("post_id", _UUID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        _user_fk(),
        sa.Column("parent_id", _UUID, sa.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])

    op.create_table(
        "stories",
        sa.Column("id", _UUID, primary_key=True),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("video_url", sa.String(1024), nullable=True),
        _created_at(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_stories_user_id", "stories", ["user_id"])
    op.create_index("ix_stories_expires_at", "stories", ["expires_at"])

    op.create_table(
        "collections",
        sa.Column("id", _UUID, primary_key=True),
        _user_fk(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_private", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_collections_user_id", "collections", ["user_id"])

    op.create_table(
        "collection_items",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("collection_id", _UUID, sa.ForeignKey("collections.id", ondelete="CASCADE"), nullable=False),
        sa.Column("post_id", _UUID, sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("collection_id", "post_id", name="uq_collection_items_collection_post"),
    )
    op.create_index("ix_collection_items_collection_id", "collection_items", ["collection_id"])
    op.create_index("ix_collection_items_post_id", "collection_items", ["post_id"])

    op.create_table(
        "groups",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_private", sa.Boolean(), server_default=sa.false(), nullable=False),
        _user_fk("created_by"),
        sa.Column("member_count", sa.Integer(), server_default="0", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_groups_created_by", "groups", ["created_by"])

    op.create_table(
        "group_members",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("group_id", _UUID, sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        _user_fk(),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
    )
    op.create_index("ix_group_members_group_id", "group_members", ["group_id"])
    op.create_index("ix_group_members_user_id", "group_members", ["user_id"])

    op.create_table(
        "messages",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("group_id", _UUID, sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_messages_group_id", "messages", ["group_id"])
    op.create_index("ix_messages_user_id", "messages", ["user_id"])

    op.create_table(
        "projects",
        sa.Column("id", _UUID, primary_key=True),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("repo_url", sa.String(1024), nullable=True),
        sa.Column("github_url", sa.String(1024), nullable=True),
        sa.Column("live_url", sa.String(1024), nullable=True),
        sa.Column("technologies", _JSON, nullable=False),
        sa.Column("image_urls", _JSON, nullable=False),
        sa.Column("stars_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("forks_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("downloads_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_private", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("visibility", sa.String(16), server_default="public", nullable=False),
        sa.Column("readme_content", sa.Text(), nullable=True),
        sa.Column("license", sa.String(64), server_default="MIT", nullable=False),
        sa.Column("forked_from", _UUID, sa.ForeignKey("projects.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_projects_user_id", "projects", ["user_id"])

    op.create_table(
        "project_stars",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("project_id", _UUID, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        _user_fk(),
        _created_at(),
        sa.UniqueConstraint("project_id", "user_id", name="uq_project_stars_project_user"),
    )
    op.create_index("ix_project_stars_project_id", "project_stars", ["project_id"])
    op.create_index("ix_project_stars_user_id", "project_stars", ["user_id"])

    op.create_table(
        "project_files",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("project_id", _UUID, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(1024), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("file_type", sa.String(64), nullable=False),
        sa.Column("content_type", sa.String(255), nullable=True),
        sa.Column("file_url", sa.String(2048), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_project_files_project_id", "project_files", ["project_id"])

    op.create_table(
        "project_downloads",
        sa.Column("id", _UUID, primary_key=True),
        sa.Column("project_id", _UUID, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        _user_fk(nullable=True, ondelete="SET NULL"),
        sa.Column("user_agent", sa.String(512), nullable=True),
        _created_at(),
    )
    op.create_index("ix_project_downloads_project_id", "project_downloads", ["project_id"])


def downgrade() -> None:
    for table in (
        "project_downloads",
        "project_files",
        "project_stars",
        "projects",
        "messages",
        "group_members",
        "groups",
        "collection_items",
        "collections",
        "stories",
        "comments",
        "bookmarks",
        "reactions",
        "likes",
        "posts",
        "follows",
        "profiles",
        "users",
    ):
        op.drop_table(table)
