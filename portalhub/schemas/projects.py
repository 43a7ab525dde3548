"""Schemas for the project showcase."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..constants import ProjectVisibility
from .profiles import ProfileSummary


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    repo_url: str | None = None
    github_url: str | None = None
    live_url: str | None = None
    technologies: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    visibility: ProjectVisibility = ProjectVisibility.PUBLIC
    readme_content: str | None = None
    license: str | None = Field(default=None, max_length=64)


class ProjectUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    repo_url: str | None = None
    github_url: str | None = None
    live_url: str | None = None
    technologies: list[str] | None = None
    image_urls: list[str] | None = None
    visibility: ProjectVisibility | None = None
    readme_content: str | None = None
    license: str | None = Field(default=None, max_length=64)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    repo_url: str | None = None
    github_url: str | None = None
    live_url: str | None = None
    technologies: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    stars_count: int = 0
    forks_count: int = 0
    downloads_count: int = 0
    is_private: bool
    visibility: ProjectVisibility
    readme_content: str | None = None
    license: str
    forked_from: UUID | None = None
    created_at: datetime
    updated_at: datetime
    profile: ProfileSummary | None = None


class ProjectListResponse(BaseModel):
    items: list[ProjectResponse]


class ProjectFileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    file_name: str
    file_path: str
    file_size: int
    file_type: str
    content_type: str | None = None
    file_url: str
    created_at: datetime


class ProjectFileListResponse(BaseModel):
    items: list[ProjectFileResponse]


class Technology(BaseModel):
    id: str
    name: str
    color: str


class TechnologyListResponse(BaseModel):
    items: list[Technology]


__all__ = [
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectListResponse",
    "ProjectFileResponse",
    "ProjectFileListResponse",
    "Technology",
    "TechnologyListResponse",
]
