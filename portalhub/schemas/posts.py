"""Pydantic schemas for posts and their engagement."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..constants import PostVisibility, ReactionType
from .profiles import ProfileSummary


class MediaEffect(BaseModel):
    type: Literal["filter", "effect", "adjustment"]
    name: str = Field(..., min_length=1)
    intensity: float | None = None
    parameters: dict[str, Any] | None = None


class MediaDimensions(BaseModel):
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class MediaCreationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device: str | None = None
    app: str | None = None
    created_with: Literal["camera", "upload", "creative_mode"] | None = Field(default=None, alias="createdWith")


class MediaMetadata(BaseModel):
    """Editing information stored alongside multi-media posts."""

    model_config = ConfigDict(populate_by_name=True)

    effects: list[MediaEffect] | None = None
    original_url: str | None = Field(default=None, alias="originalUrl")
    dimensions: MediaDimensions | None = None
    layout: Literal["original", "square", "portrait", "landscape"] | None = None
    creation_info: MediaCreationInfo | None = Field(default=None, alias="creationInfo")


class EditHistoryEntry(BaseModel):
    content: str | None = None
    visibility: PostVisibility
    edited_at: datetime


class PostCreate(BaseModel):
    content: str | None = Field(default=None, max_length=5000)
    image_url: str | None = None
    video_url: str | None = None
    media_urls: list[str] | None = None
    media_metadata: MediaMetadata | None = None
    visibility: PostVisibility | None = None
    is_private: bool | None = None

    @model_validator(mode="after")
    def _require_body(self) -> "PostCreate":
        has_text = bool(self.content and self.content.strip())
        if not (has_text or self.image_url or self.video_url or self.media_urls):
            raise ValueError("A post needs text, an image, a video or media")
        return self


class PostUpdate(BaseModel):
    content: str | None = Field(default=None, max_length=5000)
    image_url: str | None = None
    video_url: str | None = None
    media_urls: list[str] | None = None
    media_metadata: MediaMetadata | None = None
    visibility: PostVisibility | None = None


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    content: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    media_urls: list[str] | None = None
    media_metadata: dict[str, Any] | None = None
    is_private: bool
    visibility: PostVisibility
    likes_count: int = 0
    comments_count: int = 0
    hashtags: list[str] | None = None
    mentions: list[str] | None = None
    edit_history: list[EditHistoryEntry] = Field(default_factory=list)
    edited_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    profile: ProfileSummary | None = None


class PostFeedResponse(BaseModel):
    """Envelope used when returning a collection of posts."""

    items: list[PostResponse]


class ToggleResponse(BaseModel):
    """Resulting state after flipping a like, bookmark or star."""

    active: bool


class ReactionToggleRequest(BaseModel):
    reaction_type: ReactionType


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    reaction_type: ReactionType
    created_at: datetime


class ReactionListResponse(BaseModel):
    items: list[ReactionResponse]
    counts: dict[str, int]


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    parent_id: UUID | None = None


class CommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    parent_id: UUID | None = None
    content: str
    created_at: datetime
    updated_at: datetime
    profile: ProfileSummary | None = None
    replies: list["CommentResponse"] = Field(default_factory=list)


CommentResponse.model_rebuild()


class CommentListResponse(BaseModel):
    items: list[CommentResponse]


__all__ = [
    "MediaEffect",
    "MediaDimensions",
    "MediaCreationInfo",
    "MediaMetadata",
    "EditHistoryEntry",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostFeedResponse",
    "ToggleResponse",
    "ReactionToggleRequest",
    "ReactionResponse",
    "ReactionListResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentListResponse",
]
