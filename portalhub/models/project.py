"""SQLAlchemy ORM models for the project showcase."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from portalhub.constants import DEFAULT_PROJECT_LICENSE, ProjectVisibility
from portalhub.database import Base
from .base import JSONType, TimestampMixin, utcnow


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    repo_url = Column(String(1024), nullable=True)
    github_url = Column(String(1024), nullable=True)
    live_url = Column(String(1024), nullable=True)
    technologies = Column(JSONType, nullable=False, default=list)
    image_urls = Column(JSONType, nullable=False, default=list)
    stars_count = Column(Integer, nullable=False, default=0, server_default="0")
    forks_count = Column(Integer, nullable=False, default=0, server_default="0")
    downloads_count = Column(Integer, nullable=False, default=0, server_default="0")
    is_private = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    visibility = Column(String(16), nullable=False, default=ProjectVisibility.PUBLIC.value, server_default="public")
    readme_content = Column(Text, nullable=True)
    license = Column(String(64), nullable=False, default=DEFAULT_PROJECT_LICENSE, server_default=DEFAULT_PROJECT_LICENSE)
    forked_from = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)

    stars = relationship(
        "ProjectStar", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )
    files = relationship(
        "ProjectFile", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )
    downloads = relationship(
        "ProjectDownload", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )


class ProjectStar(Base):
    __tablename__ = "project_stars"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    project = relationship("Project", back_populates="stars")

    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_stars_project_user"),)


class ProjectFile(TimestampMixin, Base):
    __tablename__ = "project_files"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(1024), nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    file_type = Column(String(64), nullable=False)
    content_type = Column(String(255), nullable=True)
    file_url = Column(String(2048), nullable=False)

    project = relationship("Project", back_populates="files")


class ProjectDownload(Base):
    __tablename__ = "project_downloads"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    project = relationship("Project", back_populates="downloads")


__all__ = ["Project", "ProjectStar", "ProjectFile", "ProjectDownload"]
