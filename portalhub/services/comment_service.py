"""Threaded comments on posts."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Comment, User
from ..models.counters import adjust_post_comments
from ..schemas import CommentResponse
from .hydration import load_profile_summaries
from .post_service import get_post

logger = logging.getLogger(__name__)


def list_comments(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> list[CommentResponse]:
    """Return root comments with their replies nested under ``parent_id``."""

    get_post(db, post_id, viewer_id=viewer_id)
    comments = db.scalars(
        select(Comment).where(Comment.post_id == post_id).order_by(Comment.created_at.asc())
    ).all()
    profiles = load_profile_summaries(db, (comment.user_id for comment in comments))

    by_id: dict[UUID, CommentResponse] = {}
    for comment in comments:
        by_id[comment.id] = CommentResponse(
            id=comment.id,
            post_id=comment.post_id,
            user_id=comment.user_id,
            parent_id=comment.parent_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            profile=profiles.get(comment.user_id),
        )

    roots: list[CommentResponse] = []
    for comment in comments:
        node = by_id[comment.id]
        parent = by_id.get(comment.parent_id) if comment.parent_id else None
        if parent is not None:
            parent.replies.append(node)
        else:
            roots.append(node)
    return roots


def create_comment(
    db: Session,
    *,
    author: User,
    post_id: UUID,
    content: str,
    parent_id: UUID | None = None,
) -> Comment:
    get_post(db, post_id, viewer_id=author.id)

    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Comment cannot be empty")

    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None or parent.post_id != post_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parent comment not found on this post")

    comment = Comment(post_id=post_id, user_id=author.id, content=text, parent_id=parent_id)
    try:
        db.add(comment)
        db.flush()
        adjust_post_comments(db, post_id, 1)
        db.commit()
        db.refresh(comment)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create comment on post %s", post_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to create comment") from exc
    return comment


__all__ = ["list_comments", "create_comment"]
