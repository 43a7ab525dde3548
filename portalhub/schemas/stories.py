"""Schemas describing stories."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .profiles import ProfileSummary


class StoryCreate(BaseModel):
    content: str | None = Field(default=None, max_length=500)
    image_url: str | None = None
    video_url: str | None = None

    @model_validator(mode="after")
    def _exactly_one_field(self) -> "StoryCreate":
        populated = [
            value
            for value in (self.content.strip() if self.content else None, self.image_url, self.video_url)
            if value
        ]
        if len(populated) != 1:
            raise ValueError("A story needs exactly one of content, image_url or video_url")
        return self


class StoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    content: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    created_at: datetime
    expires_at: datetime
    is_active: bool = True
    profile: ProfileSummary | None = None


class StoryListResponse(BaseModel):
    items: list[StoryResponse]


__all__ = ["StoryCreate", "StoryResponse", "StoryListResponse"]
