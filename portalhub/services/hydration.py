"""Fetch-then-hydrate helpers.

Records are loaded first as plain rows; the public profile fields of every
referenced user are then fetched with one ``IN (...)`` lookup and merged in
memory. Relationships between tables are never assumed to be joinable.
"""
from __future__ import annotations

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Post, Profile
from ..schemas import PostResponse, ProfileSummary


def load_profiles(db: Session, user_ids: Iterable[UUID]) -> dict[UUID, Profile]:
    ids = {user_id for user_id in user_ids if user_id is not None}
    if not ids:
        return {}
    rows = db.scalars(select(Profile).where(Profile.user_id.in_(ids))).all()
    return {row.user_id: row for row in rows}


def load_profile_summaries(db: Session, user_ids: Iterable[UUID]) -> dict[UUID, ProfileSummary]:
    return {
        user_id: ProfileSummary.model_validate(profile)
        for user_id, profile in load_profiles(db, user_ids).items()
    }


def load_posts(db: Session, post_ids: Iterable[UUID]) -> dict[UUID, Post]:
    ids = {post_id for post_id in post_ids if post_id is not None}
    if not ids:
        return {}
    rows = db.scalars(select(Post).where(Post.id.in_(ids))).all()
    return {row.id: row for row in rows}


def serialize_posts(db: Session, posts: Sequence[Post]) -> list[PostResponse]:
    """Attach author summaries to ``posts``, keeping the input order."""

    authors = load_profile_summaries(db, (post.user_id for post in posts))
    return [
        PostResponse.model_validate(post).model_copy(update={"profile": authors.get(post.user_id)})
        for post in posts
    ]


def serialize_post(db: Session, post: Post) -> PostResponse:
    return serialize_posts(db, [post])[0]


__all__ = ["load_profiles", "load_profile_summaries", "load_posts", "serialize_posts", "serialize_post"]
