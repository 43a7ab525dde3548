"""Atomic maintenance of denormalised counter columns.

Counters are adjusted with a single ``UPDATE ... SET col = col + n`` inside the
caller's transaction so the edge write and the counter move commit together.
Decrements never take a counter below zero.
"""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from .group import Group
from .post import Post
from .profile import Profile
from .project import Project


def _adjust(db: Session, model, key_column, key: UUID, column, delta: int) -> None:
    if delta == 0:
        return
    statement = update(model).where(key_column == key)
    if delta < 0:
        statement = statement.where(column >= -delta)
    db.execute(
        statement.values({column.key: column + delta}).execution_options(synchronize_session="fetch")
    )


def adjust_follow_counters(db: Session, *, follower_id: UUID, following_id: UUID, delta: int) -> None:
    """Move ``following_count`` of the follower and ``followers_count`` of the target."""

    _adjust(db, Profile, Profile.user_id, follower_id, Profile.following_count, delta)
    _adjust(db, Profile, Profile.user_id, following_id, Profile.followers_count, delta)


def adjust_post_likes(db: Session, post_id: UUID, delta: int) -> None:
    _adjust(db, Post, Post.id, post_id, Post.likes_count, delta)


def adjust_post_comments(db: Session, post_id: UUID, delta: int) -> None:
    _adjust(db, Post, Post.id, post_id, Post.comments_count, delta)


def adjust_group_members(db: Session, group_id: UUID, delta: int) -> None:
    _adjust(db, Group, Group.id, group_id, Group.member_count, delta)


def adjust_project_stars(db: Session, project_id: UUID, delta: int) -> None:
    _adjust(db, Project, Project.id, project_id, Project.stars_count, delta)


def adjust_project_forks(db: Session, project_id: UUID, delta: int) -> None:
    _adjust(db, Project, Project.id, project_id, Project.forks_count, delta)


def adjust_project_downloads(db: Session, project_id: UUID, delta: int) -> None:
    _adjust(db, Project, Project.id, project_id, Project.downloads_count, delta)


__all__ = [
    "adjust_follow_counters",
    "adjust_post_likes",
    "adjust_post_comments",
    "adjust_group_members",
    "adjust_project_stars",
    "adjust_project_forks",
    "adjust_project_downloads",
]
