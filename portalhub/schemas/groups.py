"""Schemas for chat groups, memberships and messages."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..constants import GroupRole
from .profiles import ProfileSummary


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    is_private: bool = False


class GroupUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    is_private: bool | None = None


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    is_private: bool
    created_by: UUID
    member_count: int = 0
    created_at: datetime
    updated_at: datetime


class GroupListResponse(BaseModel):
    items: list[GroupResponse]


class GroupMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    group_id: UUID
    user_id: UUID
    role: GroupRole
    joined_at: datetime
    profile: ProfileSummary | None = None


class GroupMemberListResponse(BaseModel):
    items: list[GroupMemberResponse]


class RoleChangeRequest(BaseModel):
    role: GroupRole


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=4000)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    group_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    profile: ProfileSummary | None = None


class MessageListResponse(BaseModel):
    items: list[MessageResponse]


__all__ = [
    "GroupCreate",
    "GroupUpdate",
    "GroupResponse",
    "GroupListResponse",
    "GroupMemberResponse",
    "GroupMemberListResponse",
    "RoleChangeRequest",
    "MessageCreate",
    "MessageResponse",
    "MessageListResponse",
]
