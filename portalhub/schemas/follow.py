"""Schemas supporting follower APIs."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ..constants import FollowState, FollowStatus
from .profiles import ProfileSummary


class FollowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    follower_id: UUID
    following_id: UUID
    status: FollowStatus
    created_at: datetime
    updated_at: datetime


class FollowEdgeResponse(FollowResponse):
    """A follow edge hydrated with the counterpart's public profile."""

    profile: ProfileSummary | None = None


class FollowListResponse(BaseModel):
    items: list[FollowEdgeResponse]


class FollowStatusResponse(BaseModel):
    user_id: UUID
    status: FollowState


__all__ = ["FollowResponse", "FollowEdgeResponse", "FollowListResponse", "FollowStatusResponse"]
