"""Schemas for saved-post collections."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .posts import PostResponse


class CollectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_private: bool = False


class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    description: str | None = None
    is_private: bool
    created_at: datetime
    updated_at: datetime
    item_count: int = 0


class CollectionListResponse(BaseModel):
    items: list[CollectionResponse]


class CollectionItemCreate(BaseModel):
    post_id: UUID


class CollectionItemResponse(BaseModel):
    id: UUID
    collection_id: UUID
    post_id: UUID
    added_at: datetime
    post: PostResponse | None = None


class CollectionItemListResponse(BaseModel):
    items: list[CollectionItemResponse]


__all__ = [
    "CollectionCreate",
    "CollectionResponse",
    "CollectionListResponse",
    "CollectionItemCreate",
    "CollectionItemResponse",
    "CollectionItemListResponse",
]
