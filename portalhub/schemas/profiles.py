"""Schemas describing social profiles."""
from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

USERNAME_PATTERN = r"^[a-z0-9_]+$"
NUTECH_ID_PATTERN = r"^NUTECH\d{3}$"
PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"


class ProfileSetupRequest(BaseModel):
    """Payload submitted once when a user finishes account setup."""

    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    full_name: str = Field(..., min_length=2, max_length=150)
    display_name: str = Field(..., min_length=2, max_length=150)
    dob: date | None = None
    nutech_id: str | None = Field(default=None, pattern=NUTECH_ID_PATTERN)
    department: str | None = Field(default=None, min_length=2, max_length=120)
    bio: str | None = Field(default=None, max_length=500)
    phone_number: str | None = Field(default=None, pattern=PHONE_PATTERN)
    avatar_url: str | None = Field(default=None, max_length=1024)
    is_private: bool = False


class ProfileUpdateRequest(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    full_name: str | None = Field(default=None, min_length=2, max_length=150)
    display_name: str | None = Field(default=None, min_length=2, max_length=150)
    dob: date | None = None
    nutech_id: str | None = Field(default=None, pattern=NUTECH_ID_PATTERN)
    department: str | None = Field(default=None, min_length=2, max_length=120)
    bio: str | None = Field(default=None, max_length=500)
    phone_number: str | None = Field(default=None, pattern=PHONE_PATTERN)
    avatar_url: str | None = Field(default=None, max_length=1024)
    is_private: bool | None = None


class ProfileSummary(BaseModel):
    """Public display fields attached to hydrated records."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


class ProfileResponse(ProfileSummary):
    full_name: str | None = None
    bio: str | None = None
    is_private: bool = False
    followers_count: int = 0
    following_count: int = 0
    department: str | None = None
    created_at: datetime
    updated_at: datetime


class OwnProfileResponse(ProfileResponse):
    """Profile as seen by its owner, including the private setup fields."""

    dob: date | None = None
    nutech_id: str | None = None
    phone_number: str | None = None


class ProfileListResponse(BaseModel):
    items: list[ProfileResponse]


__all__ = [
    "ProfileSetupRequest",
    "ProfileUpdateRequest",
    "ProfileSummary",
    "ProfileResponse",
    "OwnProfileResponse",
    "ProfileListResponse",
]
