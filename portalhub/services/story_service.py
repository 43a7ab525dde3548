"""Ephemeral stories with advisory expiry."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Story, User
from ..schemas import StoryCreate, StoryResponse
from .hydration import load_profile_summaries
from .post_service import get_post

logger = logging.getLogger(__name__)


def _persist(db: Session, story: Story) -> Story:
    try:
        db.add(story)
        db.commit()
        db.refresh(story)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create story for user %s", story.user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to create story") from exc
    return story


def _expiry(now: datetime) -> datetime:
    return now + timedelta(hours=get_settings().story_ttl_hours)


def create_story(db: Session, *, author: User, payload: StoryCreate) -> Story:
    now = datetime.now(timezone.utc)
    story = Story(
        user_id=author.id,
        content=payload.content.strip() if payload.content else None,
        image_url=payload.image_url,
        video_url=payload.video_url,
        created_at=now,
        expires_at=_expiry(now),
    )
    return _persist(db, story)


def share_post_to_story(db: Session, *, user: User, post_id: UUID) -> Story:
    """Re-share a visible post as a story carrying the post's media."""

    post = get_post(db, post_id, viewer_id=user.id)
    now = datetime.now(timezone.utc)
    story = Story(
        user_id=user.id,
        content=f"Shared post: {post.id}",
        image_url=post.image_url,
        video_url=post.video_url,
        created_at=now,
        expires_at=_expiry(now),
    )
    return _persist(db, story)


def serialize_stories(db: Session, stories: list[Story], *, now: datetime | None = None) -> list[StoryResponse]:
    reference = now or datetime.now(timezone.utc)
    authors = load_profile_summaries(db, (story.user_id for story in stories))
    return [
        StoryResponse(
            id=story.id,
            user_id=story.user_id,
            content=story.content,
            image_url=story.image_url,
            video_url=story.video_url,
            created_at=story.created_at,
            expires_at=story.expires_at,
            is_active=story.is_active(reference=reference),
            profile=authors.get(story.user_id),
        )
        for story in stories
    ]


def list_stories(db: Session, *, active_only: bool = False, user_id: UUID | None = None) -> list[StoryResponse]:
    """All stories newest first; expiry is reported, never enforced by deletion."""

    stmt = select(Story).order_by(Story.created_at.desc())
    if user_id is not None:
        stmt = stmt.where(Story.user_id == user_id)
    try:
        stories = list(db.scalars(stmt).all())
    except SQLAlchemyError as exc:
        logger.exception("Failed to load stories")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load stories") from exc

    items = serialize_stories(db, stories)
    if active_only:
        items = [item for item in items if item.is_active]
    return items


__all__ = ["create_story", "share_post_to_story", "list_stories", "serialize_stories"]
