"""Direct uploads to the object-storage buckets."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from ..models import User
from ..schemas import UploadListResponse, UploadResponse
from ..services import get_current_user
from ..services import storage_service

router = APIRouter(prefix="/uploads", tags=["uploads"])


def _require_filename(file: UploadFile) -> None:
    if not (file.filename or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file must include a filename.")


@router.post("/{bucket}", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_endpoint(
    bucket: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> UploadResponse:
    """Store one file under ``<user_id>/`` in ``bucket`` and return its public URL."""

    _require_filename(file)
    with storage_service.storage_errors():
        target = storage_service.resolve_bucket(bucket)
        result = await storage_service.upload_file(file, bucket=target, user_id=current_user.id)
    return UploadResponse(url=result.url, key=result.key, bucket=result.bucket, content_type=result.content_type)


@router.post("/{bucket}/batch", response_model=UploadListResponse, status_code=status.HTTP_201_CREATED)
async def batch_upload_endpoint(
    bucket: str,
    files: list[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
) -> UploadListResponse:
    for file in files:
        _require_filename(file)
    with storage_service.storage_errors():
        target = storage_service.resolve_bucket(bucket)
        results = await storage_service.upload_files(files, bucket=target, user_id=current_user.id)
    return UploadListResponse(
        items=[
            UploadResponse(url=item.url, key=item.key, bucket=item.bucket, content_type=item.content_type)
            for item in results
        ]
    )
