"""Feed composition: which posts a viewer may see in each context.

Every composer is all-or-nothing. A database failure anywhere aborts the
whole feed with "Failed to load <feed>"; partial lists are never returned.
"""
from __future__ import annotations

import logging
from collections import Counter
from contextlib import contextmanager
from typing import Iterator, Sequence
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import (
    ACTIVITY_FEED_LIMIT,
    ACTIVITY_FOLLOW_LIMIT,
    ACTIVITY_SOURCE_LIMIT,
    SEARCH_LIMIT,
    TRENDING_LIMIT,
    FollowStatus,
    PostVisibility,
)
from ..models import Comment, Follow, Post, PostLike, Profile, User
from ..models.base import json_array_has
from ..schemas import ActivityItem, ActivityPostPreview, HashtagCount, PostResponse, ProfileResponse
from .follow_service import accepted_following_ids, is_accepted_follower
from .hydration import load_posts, load_profile_summaries, serialize_posts
from .profile_service import search_profiles

logger = logging.getLogger(__name__)

HASHTAG_SAMPLE_SIZE = 200


@contextmanager
def _feed_guard(feed: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Failed to load %s", feed)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to load {feed}"
        ) from exc


def _public_posts():
    return select(Post).where(Post.visibility == PostVisibility.PUBLIC.value)


def home_feed(db: Session, *, limit: int | None = None) -> list[PostResponse]:
    with _feed_guard("feed"):
        stmt = _public_posts().order_by(Post.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return serialize_posts(db, db.scalars(stmt).all())


def following_feed(db: Session, *, viewer: User) -> list[PostResponse]:
    """Posts by accounts the viewer follows (accepted), minus private posts."""

    with _feed_guard("following feed"):
        author_ids = accepted_following_ids(db, viewer.id)
        if not author_ids:
            return []
        posts = db.scalars(
            select(Post)
            .where(Post.user_id.in_(author_ids), Post.is_private.is_(False))
            .order_by(Post.created_at.desc())
        ).all()
        return serialize_posts(db, posts)


def trending_posts(db: Session, *, limit: int = TRENDING_LIMIT) -> list[PostResponse]:
    with _feed_guard("trending posts"):
        stmt = _public_posts().order_by(Post.likes_count.desc(), Post.created_at.desc()).limit(limit)
        return serialize_posts(db, db.scalars(stmt).all())


def latest_posts(db: Session, *, limit: int = TRENDING_LIMIT) -> list[PostResponse]:
    with _feed_guard("latest posts"):
        stmt = _public_posts().order_by(Post.created_at.desc()).limit(limit)
        return serialize_posts(db, db.scalars(stmt).all())


def _posts_containing(db: Session, column, token: str) -> Sequence[Post]:
    """Non-private posts whose tag array holds ``token``, ignoring case."""

    matches = json_array_has(db.get_bind().dialect.name, column, token, ignore_case=True)
    return db.scalars(
        select(Post).where(Post.is_private.is_(False), matches).order_by(Post.created_at.desc())
    ).all()


def posts_by_hashtag(db: Session, tag: str) -> list[PostResponse]:
    token = tag.strip().lstrip("#")
    if not token:
        return []
    with _feed_guard("hashtag feed"):
        return serialize_posts(db, _posts_containing(db, Post.hashtags, token))


def posts_by_mention(db: Session, username: str) -> list[PostResponse]:
    token = username.strip().lstrip("@")
    if not token:
        return []
    with _feed_guard("mention feed"):
        return serialize_posts(db, _posts_containing(db, Post.mentions, token))


def profile_posts(db: Session, *, owner_id: UUID, viewer_id: UUID | None) -> list[PostResponse]:
    """Posts shown on a profile page.

    Owners see everything. Private profiles show nothing to non-followers,
    whatever the individual post visibility is.
    """

    with _feed_guard("profile posts"):
        stmt = select(Post).where(Post.user_id == owner_id).order_by(Post.created_at.desc())
        if viewer_id is not None and viewer_id == owner_id:
            return serialize_posts(db, db.scalars(stmt).all())

        follower = viewer_id is not None and is_accepted_follower(db, follower_id=viewer_id, following_id=owner_id)
        profile = db.get(Profile, owner_id)
        if profile is not None and profile.is_private and not follower:
            return []

        allowed = [PostVisibility.PUBLIC.value]
        if follower:
            allowed.append(PostVisibility.FOLLOWERS_ONLY.value)
        posts = db.scalars(stmt.where(Post.visibility.in_(allowed), Post.is_private.is_(False))).all()
        return serialize_posts(db, posts)


def activity_feed(db: Session, *, user: User) -> list[ActivityItem]:
    """Likes and comments on the user's posts plus new followers, newest first."""

    with _feed_guard("activity"):
        my_posts = select(Post.id).where(Post.user_id == user.id)

        likes = db.scalars(
            select(PostLike)
            .where(PostLike.post_id.in_(my_posts), PostLike.user_id != user.id)
            .order_by(PostLike.created_at.desc())
            .limit(ACTIVITY_SOURCE_LIMIT)
        ).all()
        comments = db.scalars(
            select(Comment)
            .where(Comment.post_id.in_(my_posts), Comment.user_id != user.id)
            .order_by(Comment.created_at.desc())
            .limit(ACTIVITY_SOURCE_LIMIT)
        ).all()
        follows = db.scalars(
            select(Follow)
            .where(Follow.following_id == user.id, Follow.status == FollowStatus.ACCEPTED.value)
            .order_by(Follow.created_at.desc())
            .limit(ACTIVITY_FOLLOW_LIMIT)
        ).all()

        actors = load_profile_summaries(
            db, [row.user_id for row in (*likes, *comments)] + [row.follower_id for row in follows]
        )
        posts = load_posts(db, [row.post_id for row in (*likes, *comments)])

    def _preview(post_id: UUID) -> ActivityPostPreview | None:
        post = posts.get(post_id)
        if post is None:
            return None
        return ActivityPostPreview(id=post.id, content=post.content, image_url=post.image_url)

    items = [
        ActivityItem(
            id=f"like-{like.id}",
            type="like",
            actor=actors.get(like.user_id),
            post=_preview(like.post_id),
            created_at=like.created_at,
        )
        for like in likes
    ]
    items.extend(
        ActivityItem(
            id=f"comment-{comment.id}",
            type="comment",
            actor=actors.get(comment.user_id),
            post=_preview(comment.post_id),
            comment=comment.content,
            created_at=comment.created_at,
        )
        for comment in comments
    )
    items.extend(
        ActivityItem(
            id=f"follow-{follow.id}",
            type="follow",
            actor=actors.get(follow.follower_id),
            created_at=follow.created_at,
        )
        for follow in follows
    )
    items.sort(key=lambda item: item.created_at, reverse=True)
    return items[:ACTIVITY_FEED_LIMIT]


def trending_hashtags(db: Session, *, limit: int = 10) -> list[HashtagCount]:
    """Most frequent hashtags across the most recent public posts."""

    with _feed_guard("trending hashtags"):
        rows = db.scalars(
            select(Post.hashtags)
            .where(Post.visibility == PostVisibility.PUBLIC.value)
            .order_by(Post.created_at.desc())
            .limit(HASHTAG_SAMPLE_SIZE)
        ).all()
    counts = Counter(tag.casefold() for tags in rows for tag in (tags or []))
    return [HashtagCount(tag=tag, count=count) for tag, count in counts.most_common(limit)]


def search(db: Session, query: str, *, limit: int = SEARCH_LIMIT) -> tuple[list[PostResponse], list[ProfileResponse]]:
    term = (query or "").strip()
    if not term:
        return [], []
    with _feed_guard("search results"):
        posts = db.scalars(
            _public_posts()
            .where(Post.content.ilike(f"%{term}%"))
            .order_by(Post.created_at.desc())
            .limit(limit)
        ).all()
        users = [ProfileResponse.model_validate(profile) for profile in search_profiles(db, term, limit=limit)]
        return serialize_posts(db, posts), users


__all__ = [
    "home_feed",
    "following_feed",
    "trending_posts",
    "latest_posts",
    "posts_by_hashtag",
    "posts_by_mention",
    "profile_posts",
    "activity_feed",
    "trending_hashtags",
    "search",
]
