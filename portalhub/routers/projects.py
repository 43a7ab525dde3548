"""Project showcase API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    ProjectCreate,
    ProjectFileListResponse,
    ProjectFileResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    TechnologyListResponse,
    ToggleResponse,
    UploadResponse,
)
from ..services import (
    check_star,
    create_project,
    delete_project,
    delete_project_file,
    fork_project,
    get_current_user,
    get_optional_user,
    get_project,
    list_project_files,
    list_projects,
    list_technologies,
    record_download,
    serialize_projects,
    storage_errors,
    toggle_star,
    update_project,
    upload_project_file,
    upload_project_image,
)

router = APIRouter(prefix="/projects", tags=["projects"])


def _single(db: Session, project) -> ProjectResponse:
    return serialize_projects(db, [project])[0]


@router.get("/technologies", response_model=TechnologyListResponse)
async def technologies_endpoint() -> TechnologyListResponse:
    return TechnologyListResponse(items=list_technologies())


@router.post("/images", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image_endpoint(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> UploadResponse:
    if not (file.filename or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file must include a filename.")
    with storage_errors():
        result = await upload_project_image(file, user=current_user)
    return UploadResponse(url=result.url, key=result.key, bucket=result.bucket, content_type=result.content_type)


@router.delete("/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file_endpoint(
    file_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    with storage_errors():
        delete_project_file(db, user=current_user, file_id=file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=ProjectListResponse)
async def list_projects_endpoint(
    technology: str | None = Query(default=None),
    mine: bool = Query(default=False),
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ProjectListResponse:
    projects = list_projects(
        db,
        technology=technology,
        viewer_id=viewer.id if viewer else None,
        include_private=mine,
    )
    return ProjectListResponse(items=serialize_projects(db, projects))


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(
    payload: ProjectCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ProjectResponse:
    return _single(db, create_project(db, owner=current_user, payload=payload))


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project_endpoint(
    project_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ProjectResponse:
    return _single(db, get_project(db, project_id, viewer_id=viewer.id if viewer else None))


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project_endpoint(
    project_id: UUID,
    payload: ProjectUpdate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ProjectResponse:
    return _single(db, update_project(db, user=current_user, project_id=project_id, payload=payload))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_endpoint(
    project_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    delete_project(db, user=current_user, project_id=project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/star", response_model=ToggleResponse)
async def toggle_star_endpoint(
    project_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ToggleResponse:
    return ToggleResponse(active=toggle_star(db, user=current_user, project_id=project_id))


@router.get("/{project_id}/star", response_model=ToggleResponse)
async def check_star_endpoint(
    project_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ToggleResponse:
    return ToggleResponse(active=check_star(db, user_id=viewer.id if viewer else None, project_id=project_id))


@router.post("/{project_id}/fork", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def fork_project_endpoint(
    project_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ProjectResponse:
    return _single(db, fork_project(db, user=current_user, project_id=project_id))


@router.get("/{project_id}/files", response_model=ProjectFileListResponse)
async def list_files_endpoint(
    project_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ProjectFileListResponse:
    files = list_project_files(db, project_id=project_id, viewer_id=viewer.id if viewer else None)
    return ProjectFileListResponse(items=[ProjectFileResponse.model_validate(item) for item in files])


@router.post("/{project_id}/files", response_model=ProjectFileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file_endpoint(
    project_id: UUID,
    file: UploadFile = File(...),
    file_path: str | None = Form(default=None),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ProjectFileResponse:
    with storage_errors():
        record = await upload_project_file(
            db, user=current_user, project_id=project_id, file=file, file_path=file_path
        )
    return ProjectFileResponse.model_validate(record)


@router.post("/{project_id}/downloads", response_model=ProjectResponse)
async def record_download_endpoint(
    project_id: UUID,
    request: Request,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ProjectResponse:
    project = record_download(
        db,
        project_id=project_id,
        user_id=viewer.id if viewer else None,
        user_agent=request.headers.get("user-agent"),
    )
    return _single(db, project)
