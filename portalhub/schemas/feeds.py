"""Schemas for composed feeds: activity, explore and search."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from .posts import PostResponse
from .profiles import ProfileResponse, ProfileSummary


class ActivityPostPreview(BaseModel):
    id: UUID
    content: str | None = None
    image_url: str | None = None


class ActivityItem(BaseModel):
    id: str
    type: Literal["like", "comment", "follow"]
    actor: ProfileSummary | None = None
    post: ActivityPostPreview | None = None
    comment: str | None = None
    created_at: datetime


class ActivityFeedResponse(BaseModel):
    items: list[ActivityItem]


class HashtagCount(BaseModel):
    tag: str
    count: int


class TrendingHashtagsResponse(BaseModel):
    items: list[HashtagCount]


class ExploreResponse(BaseModel):
    trending: list[PostResponse]
    latest: list[PostResponse]
    suggested_users: list[ProfileResponse]
    trending_hashtags: list[HashtagCount]


class SearchResponse(BaseModel):
    posts: list[PostResponse]
    users: list[ProfileResponse]


__all__ = [
    "ActivityPostPreview",
    "ActivityItem",
    "ActivityFeedResponse",
    "HashtagCount",
    "TrendingHashtagsResponse",
    "ExploreResponse",
    "SearchResponse",
]
