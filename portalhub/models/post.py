"""SQLAlchemy ORM models for posts and their engagement rows."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from portalhub.constants import PostVisibility
from portalhub.database import Base
from .base import JSONType, TimestampMixin, utcnow


class Post(TimestampMixin, Base):
    __tablename__ = "posts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    video_url = Column(String(1024), nullable=True)
    media_urls = Column(JSONType, nullable=True)
    media_metadata = Column(JSONType, nullable=True)
    is_private = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    visibility = Column(String(20), nullable=False, default=PostVisibility.PUBLIC.value, server_default="public")
    likes_count = Column(Integer, nullable=False, default=0, server_default="0")
    comments_count = Column(Integer, nullable=False, default=0, server_default="0")
    hashtags = Column(JSONType, nullable=True)
    mentions = Column(JSONType, nullable=True)
    edit_history = Column(JSONType, nullable=False, default=list)
    edited_at = Column(DateTime(timezone=True), nullable=True)

    likes = relationship(
        "PostLike", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )
    reactions = relationship(
        "Reaction", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )
    bookmarks = relationship(
        "Bookmark", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )
    comments = relationship(
        "Comment", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )
    collection_items = relationship(
        "CollectionItem", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )


class PostLike(Base):
    __tablename__ = "likes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    post = relationship("Post", back_populates="likes")

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_likes_post_user"),)


class Reaction(Base):
    __tablename__ = "reactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reaction_type = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    post = relationship("Post", back_populates="reactions")

    __table_args__ = (UniqueConstraint("post_id", "user_id", "reaction_type", name="uq_reactions_post_user_type"),)


class Bookmark(Base):
    __tablename__ = "bookmarks"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    post = relationship("Post", back_populates="bookmarks")

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_bookmarks_post_user"),)


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(UUID(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    content = Column(Text, nullable=False)

    post = relationship("Post", back_populates="comments")


__all__ = ["Post", "PostLike", "Reaction", "Bookmark", "Comment"]
