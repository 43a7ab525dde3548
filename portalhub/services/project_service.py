"""Project showcase: CRUD, stars, forks, files and downloads."""
from __future__ import annotations

import logging
from contextlib import contextmanager
import os
from typing import Iterator, Sequence
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import DEFAULT_PROJECT_LICENSE, Bucket, ProjectVisibility
from ..models import Project, ProjectDownload, ProjectFile, ProjectStar, User
from ..models.base import json_array_has
from ..models.counters import adjust_project_downloads, adjust_project_forks, adjust_project_stars
from ..schemas import ProjectCreate, ProjectResponse, ProjectUpdate, Technology
from .hydration import load_profile_summaries
from .storage_service import StorageUploadResult, delete_object, upload_file

logger = logging.getLogger(__name__)

TECHNOLOGIES: tuple[Technology, ...] = (
    Technology(id="1", name="React", color="#61DAFB"),
    Technology(id="2", name="TypeScript", color="#3178C6"),
    Technology(id="3", name="JavaScript", color="#F7DF1E"),
    Technology(id="4", name="Node.js", color="#339933"),
    Technology(id="5", name="Python", color="#3776AB"),
)


@contextmanager
def _writing(db: Session, detail: str) -> Iterator[None]:
    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Request conflicted with a concurrent change") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc


def _commit(db: Session, detail: str) -> None:
    with _writing(db, detail):
        pass


def _can_view(project: Project, viewer_id: UUID | None) -> bool:
    if viewer_id is not None and project.user_id == viewer_id:
        return True
    return project.visibility == ProjectVisibility.PUBLIC


def serialize_projects(db: Session, projects: Sequence[Project]) -> list[ProjectResponse]:
    owners = load_profile_summaries(db, (project.user_id for project in projects))
    return [
        ProjectResponse.model_validate(project).model_copy(update={"profile": owners.get(project.user_id)})
        for project in projects
    ]


def get_project(db: Session, project_id: UUID, *, viewer_id: UUID | None = None) -> Project:
    project = db.get(Project, project_id)
    if project is None or not _can_view(project, viewer_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def _get_owned_project(db: Session, project_id: UUID, user: User) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    if project.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the project owner can do that")
    return project


def list_projects(
    db: Session,
    *,
    technology: str | None = None,
    viewer_id: UUID | None = None,
    include_private: bool = False,
) -> list[Project]:
    stmt = select(Project).order_by(Project.created_at.desc())
    if include_private and viewer_id is not None:
        stmt = stmt.where(
            (Project.visibility == ProjectVisibility.PUBLIC.value) | (Project.user_id == viewer_id)
        )
    else:
        stmt = stmt.where(Project.visibility == ProjectVisibility.PUBLIC.value)

    tag = (technology or "").strip()
    if tag:
        stmt = stmt.where(json_array_has(db.get_bind().dialect.name, Project.technologies, tag))

    try:
        projects = db.scalars(stmt).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load projects")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load projects") from exc
    return list(projects)


def create_project(db: Session, *, owner: User, payload: ProjectCreate) -> Project:
    visibility = ProjectVisibility(payload.visibility)
    project = Project(
        user_id=owner.id,
        title=payload.title.strip(),
        description=payload.description,
        repo_url=payload.repo_url,
        github_url=payload.github_url,
        live_url=payload.live_url,
        technologies=list(payload.technologies),
        image_urls=list(payload.image_urls),
        visibility=visibility.value,
        is_private=visibility != ProjectVisibility.PUBLIC,
        readme_content=payload.readme_content,
        license=payload.license or DEFAULT_PROJECT_LICENSE,
    )
    db.add(project)
    _commit(db, "Unable to create project")
    db.refresh(project)
    return project


def update_project(db: Session, *, user: User, project_id: UUID, payload: ProjectUpdate) -> Project:
    project = _get_owned_project(db, project_id, user)
    updates = payload.model_dump(exclude_unset=True)

    visibility = updates.pop("visibility", None)
    if visibility is not None:
        project.visibility = ProjectVisibility(visibility).value
        project.is_private = project.visibility != ProjectVisibility.PUBLIC
    if updates.get("license") is None:
        updates.pop("license", None)
    if updates.get("title") is None:
        updates.pop("title", None)

    for field, value in updates.items():
        setattr(project, field, value)
    _commit(db, "Unable to update project")
    db.refresh(project)
    return project


def delete_project(db: Session, *, user: User, project_id: UUID) -> None:
    project = _get_owned_project(db, project_id, user)
    db.delete(project)
    _commit(db, "Unable to delete project")


def toggle_star(db: Session, *, user: User, project_id: UUID) -> bool:
    get_project(db, project_id, viewer_id=user.id)
    existing = db.scalar(
        select(ProjectStar).where(ProjectStar.project_id == project_id, ProjectStar.user_id == user.id)
    )
    if existing is not None:
        db.delete(existing)
        adjust_project_stars(db, project_id, -1)
        _commit(db, "Unable to unstar project")
        return False

    with _writing(db, "Unable to star project"):
        db.add(ProjectStar(project_id=project_id, user_id=user.id))
        db.flush()
        adjust_project_stars(db, project_id, 1)
    return True


def check_star(db: Session, *, user_id: UUID | None, project_id: UUID) -> bool:
    if user_id is None:
        return False
    return db.scalar(
        select(ProjectStar.id).where(ProjectStar.project_id == project_id, ProjectStar.user_id == user_id)
    ) is not None


def fork_project(db: Session, *, user: User, project_id: UUID) -> Project:
    source = get_project(db, project_id, viewer_id=user.id)
    fork = Project(
        user_id=user.id,
        title=f"{source.title} (Fork)",
        description=source.description,
        repo_url=source.repo_url,
        technologies=list(source.technologies or []),
        image_urls=list(source.image_urls or []),
        visibility=ProjectVisibility.PUBLIC.value,
        is_private=False,
        license=source.license or DEFAULT_PROJECT_LICENSE,
        forked_from=source.id,
    )
    with _writing(db, "Unable to fork project"):
        db.add(fork)
        db.flush()
        adjust_project_forks(db, source.id, 1)
    db.refresh(fork)
    return fork


def _safe_file_path(file_path: str) -> str:
    segments = [segment for segment in file_path.replace("\\", "/").split("/") if segment not in {"", ".", ".."}]
    if not segments:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file path")
    return "/".join(segments)


def _file_size(file: UploadFile) -> int:
    if file.size is not None:
        return int(file.size)
    handle = file.file
    position = handle.tell()
    handle.seek(0, os.SEEK_END)
    size = handle.tell()
    handle.seek(position)
    return size


async def upload_project_image(file: UploadFile, *, user: User) -> StorageUploadResult:
    return await upload_file(file, bucket=Bucket.PROJECT_IMAGES, user_id=user.id)


async def upload_project_file(
    db: Session,
    *,
    user: User,
    project_id: UUID,
    file: UploadFile,
    file_path: str | None = None,
) -> ProjectFile:
    _get_owned_project(db, project_id, user)
    relative_path = _safe_file_path(file_path or file.filename or "")
    content_type = file.content_type or "application/octet-stream"

    result = await upload_file(
        file,
        bucket=Bucket.PROJECT_FILES,
        user_id=user.id,
        key=f"{project_id}/{relative_path}",
    )
    record = ProjectFile(
        project_id=project_id,
        file_name=file.filename or relative_path.rsplit("/", 1)[-1],
        file_path=relative_path,
        file_size=_file_size(file),
        file_type=content_type.split("/")[0],
        content_type=content_type,
        file_url=result.url,
    )
    db.add(record)
    _commit(db, "Unable to save project file")
    db.refresh(record)
    return record


def list_project_files(db: Session, *, project_id: UUID, viewer_id: UUID | None = None) -> Sequence[ProjectFile]:
    get_project(db, project_id, viewer_id=viewer_id)
    return db.scalars(
        select(ProjectFile).where(ProjectFile.project_id == project_id).order_by(ProjectFile.file_path)
    ).all()


def delete_project_file(db: Session, *, user: User, file_id: UUID) -> None:
    record = db.get(ProjectFile, file_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    _get_owned_project(db, record.project_id, user)

    delete_object(Bucket.PROJECT_FILES, f"{record.project_id}/{record.file_path}")
    db.delete(record)
    _commit(db, "Unable to delete project file")


def record_download(
    db: Session,
    *,
    project_id: UUID,
    user_id: UUID | None = None,
    user_agent: str | None = None,
) -> Project:
    project = get_project(db, project_id, viewer_id=user_id)
    with _writing(db, "Unable to record download"):
        db.add(ProjectDownload(project_id=project_id, user_id=user_id, user_agent=(user_agent or "")[:512] or None))
        db.flush()
        adjust_project_downloads(db, project_id, 1)
    db.refresh(project)
    return project


def list_technologies() -> list[Technology]:
    return list(TECHNOLOGIES)


__all__ = [
    "TECHNOLOGIES",
    "serialize_projects",
    "get_project",
    "list_projects",
    "create_project",
    "update_project",
    "delete_project",
    "toggle_star",
    "check_star",
    "fork_project",
    "upload_project_image",
    "upload_project_file",
    "list_project_files",
    "delete_project_file",
    "record_download",
    "list_technologies",
]
