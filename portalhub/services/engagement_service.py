"""Likes, typed reactions and bookmarks on posts."""
from __future__ import annotations

import logging
from collections import Counter
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ReactionType
from ..models import Bookmark, Post, PostLike, Reaction, User
from ..models.counters import adjust_post_likes
from ..schemas import PostResponse
from .hydration import serialize_posts
from .post_service import can_view_post, get_post

logger = logging.getLogger(__name__)


@contextmanager
def _toggle_write(db: Session, *, detail: str) -> Iterator[None]:
    """Run the writes in the block and commit them as one unit."""

    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Request conflicted with a concurrent change") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc


def _commit_toggle(db: Session, *, detail: str) -> None:
    with _toggle_write(db, detail=detail):
        pass


def toggle_like(db: Session, *, user: User, post_id: UUID) -> bool:
    """Flip the viewer's like; returns True when the post is now liked."""

    get_post(db, post_id, viewer_id=user.id)
    existing = db.scalar(select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user.id))
    if existing is not None:
        db.delete(existing)
        adjust_post_likes(db, post_id, -1)
        _commit_toggle(db, detail="Unable to unlike post")
        return False

    with _toggle_write(db, detail="Unable to like post"):
        db.add(PostLike(post_id=post_id, user_id=user.id))
        db.flush()
        adjust_post_likes(db, post_id, 1)
    return True


def check_like(db: Session, *, user_id: UUID | None, post_id: UUID) -> bool:
    if user_id is None:
        return False
    return db.scalar(
        select(PostLike.id).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
    ) is not None


def toggle_reaction(db: Session, *, user: User, post_id: UUID, reaction_type: ReactionType) -> bool:
    get_post(db, post_id, viewer_id=user.id)
    existing = db.scalar(
        select(Reaction).where(
            Reaction.post_id == post_id,
            Reaction.user_id == user.id,
            Reaction.reaction_type == ReactionType(reaction_type).value,
        )
    )
    if existing is not None:
        db.delete(existing)
        _commit_toggle(db, detail="Unable to remove reaction")
        return False

    db.add(Reaction(post_id=post_id, user_id=user.id, reaction_type=ReactionType(reaction_type).value))
    _commit_toggle(db, detail="Unable to add reaction")
    return True


def list_reactions(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> tuple[list[Reaction], dict[str, int]]:
    get_post(db, post_id, viewer_id=viewer_id)
    reactions = list(
        db.scalars(select(Reaction).where(Reaction.post_id == post_id).order_by(Reaction.created_at)).all()
    )
    counts = Counter(reaction.reaction_type for reaction in reactions)
    return reactions, dict(counts)


def toggle_bookmark(db: Session, *, user: User, post_id: UUID) -> bool:
    get_post(db, post_id, viewer_id=user.id)
    existing = db.scalar(select(Bookmark).where(Bookmark.post_id == post_id, Bookmark.user_id == user.id))
    if existing is not None:
        db.delete(existing)
        _commit_toggle(db, detail="Unable to remove bookmark")
        return False

    db.add(Bookmark(post_id=post_id, user_id=user.id))
    _commit_toggle(db, detail="Unable to bookmark post")
    return True


def check_bookmark(db: Session, *, user_id: UUID | None, post_id: UUID) -> bool:
    if user_id is None:
        return False
    return db.scalar(
        select(Bookmark.id).where(Bookmark.post_id == post_id, Bookmark.user_id == user_id)
    ) is not None


def list_bookmarks(db: Session, *, user: User) -> list[PostResponse]:
    """Bookmarked posts, newest first, fetched in two phases."""

    post_ids = db.scalars(select(Bookmark.post_id).where(Bookmark.user_id == user.id)).all()
    if not post_ids:
        return []
    posts = db.scalars(select(Post).where(Post.id.in_(post_ids)).order_by(Post.created_at.desc())).all()
    visible = [post for post in posts if can_view_post(db, post, user.id)]
    return serialize_posts(db, visible)


__all__ = [
    "toggle_like",
    "check_like",
    "toggle_reaction",
    "list_reactions",
    "toggle_bookmark",
    "check_bookmark",
    "list_bookmarks",
]
