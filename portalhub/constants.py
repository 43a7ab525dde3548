"""Project-wide constant values."""
from __future__ import annotations

from enum import StrEnum


class FollowStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class FollowState(StrEnum):
    """Relationship as seen from the viewer towards a target profile."""

    NOT_FOLLOWING = "not_following"
    PENDING = "pending"
    FOLLOWING = "following"


class PostVisibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"
    FOLLOWERS_ONLY = "followers-only"


class ReactionType(StrEnum):
    LIKE = "like"
    LOVE = "love"
    LAUGH = "laugh"
    WOW = "wow"
    SAD = "sad"
    ANGRY = "angry"


class GroupRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class ProjectVisibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class Bucket(StrEnum):
    SOCIAL_IMAGES = "social-images"
    SOCIAL_VIDEOS = "social-videos"
    STORIES = "stories"
    PROJECT_IMAGES = "project-images"
    PROJECT_FILES = "project-files"
    MEDIA_COLLECTIONS = "media-collections"


ACTIVITY_FEED_LIMIT = 30
ACTIVITY_SOURCE_LIMIT = 20
ACTIVITY_FOLLOW_LIMIT = 10
TRENDING_LIMIT = 20
SEARCH_LIMIT = 10
SUGGESTION_LIMIT = 10

DEFAULT_PROJECT_LICENSE = "MIT"

__all__ = [
    "FollowStatus",
    "FollowState",
    "PostVisibility",
    "ReactionType",
    "GroupRole",
    "ProjectVisibility",
    "Bucket",
    "ACTIVITY_FEED_LIMIT",
    "ACTIVITY_SOURCE_LIMIT",
    "ACTIVITY_FOLLOW_LIMIT",
    "TRENDING_LIMIT",
    "SEARCH_LIMIT",
    "SUGGESTION_LIMIT",
    "DEFAULT_PROJECT_LICENSE",
]
