"""Post authoring and per-viewer visibility checks."""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import PostVisibility
from ..models import Post, Profile, User
from ..schemas import PostCreate, PostUpdate
from .follow_service import is_accepted_follower

logger = logging.getLogger(__name__)

HASHTAG_PATTERN = re.compile(r"#(\w+)")
MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_hashtags(content: str | None) -> list[str]:
    return HASHTAG_PATTERN.findall(content or "")


def extract_mentions(content: str | None) -> list[str]:
    return MENTION_PATTERN.findall(content or "")


def _resolve_visibility(visibility: PostVisibility | None, is_private: bool | None) -> PostVisibility:
    if visibility is not None:
        return PostVisibility(visibility)
    if is_private:
        return PostVisibility.PRIVATE
    return PostVisibility.PUBLIC


def _has_body(post: Post) -> bool:
    return bool((post.content or "").strip() or post.image_url or post.video_url or post.media_urls)


def can_view_post(db: Session, post: Post, viewer_id: UUID | None) -> bool:
    """Profile privacy gates first, then the post's own visibility."""

    if viewer_id is not None and post.user_id == viewer_id:
        return True
    if post.visibility == PostVisibility.PRIVATE or post.is_private:
        return False

    author = db.get(Profile, post.user_id)
    needs_follow = post.visibility == PostVisibility.FOLLOWERS_ONLY or bool(author and author.is_private)
    if not needs_follow:
        return True
    if viewer_id is None:
        return False
    return is_accepted_follower(db, follower_id=viewer_id, following_id=post.user_id)


def get_post(db: Session, post_id: UUID, *, viewer_id: UUID | None = None) -> Post:
    post = db.get(Post, post_id)
    if post is None or not can_view_post(db, post, viewer_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def create_post(db: Session, *, author: User, payload: PostCreate) -> Post:
    visibility = _resolve_visibility(payload.visibility, payload.is_private)
    content = payload.content.strip() if payload.content and payload.content.strip() else None

    post = Post(
        user_id=author.id,
        content=content,
        image_url=payload.image_url,
        video_url=payload.video_url,
        media_urls=payload.media_urls,
        media_metadata=(
            payload.media_metadata.model_dump(by_alias=True, exclude_none=True) if payload.media_metadata else None
        ),
        visibility=visibility.value,
        is_private=visibility == PostVisibility.PRIVATE,
        hashtags=extract_hashtags(content) if content else None,
        mentions=extract_mentions(content) if content else None,
        edit_history=[],
        edited_at=None,
        likes_count=0,
        comments_count=0,
    )
    try:
        db.add(post)
        db.commit()
        db.refresh(post)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create post for user %s", author.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to create post") from exc
    return post


def edit_post(db: Session, *, editor: User, post_id: UUID, payload: PostUpdate) -> Post:
    """Apply an owner edit, snapshotting the previous content into the history."""

    post = db.get(Post, post_id)
    if post is None or post.user_id != editor.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or you do not have permission to edit",
        )

    previous_stamp = post.edited_at or post.created_at
    history_entry = {
        "content": post.content,
        "visibility": str(post.visibility),
        "edited_at": previous_stamp.isoformat(),
    }

    updates = payload.model_dump(exclude_unset=True)
    if "content" in updates:
        content = (updates.pop("content") or "").strip() or None
        post.content = content
        post.hashtags = extract_hashtags(content)
        post.mentions = extract_mentions(content)
    if "visibility" in updates:
        visibility = updates.pop("visibility")
        if visibility is not None:
            post.visibility = PostVisibility(visibility).value
            post.is_private = post.visibility == PostVisibility.PRIVATE
    if "media_metadata" in updates:
        metadata = updates.pop("media_metadata")
        post.media_metadata = (
            payload.media_metadata.model_dump(by_alias=True, exclude_none=True) if metadata is not None else None
        )
    for field, value in updates.items():
        setattr(post, field, value)

    if not _has_body(post):
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="A post needs text, an image, a video or media",
        )

    post.edit_history = [*(post.edit_history or []), history_entry]
    post.edited_at = datetime.now(timezone.utc)
    try:
        db.commit()
        db.refresh(post)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to edit post %s", post_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to edit post") from exc
    return post


def delete_post(db: Session, *, actor: User, post_id: UUID) -> None:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    if post.user_id != actor.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only delete your own posts")
    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete post %s", post_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to delete post") from exc


__all__ = [
    "extract_hashtags",
    "extract_mentions",
    "can_view_post",
    "get_post",
    "create_post",
    "edit_post",
    "delete_post",
]
