"""S3-compatible object storage for user media and project files."""
from __future__ import annotations

import logging
import re
import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Sequence
from urllib.parse import quote, urlparse
from uuid import UUID

from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from ..config import get_settings
from ..constants import Bucket
from ..security.secrets import MissingSecretError, require_secrets

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StorageConfig:
    key: str
    secret: str
    region: str
    endpoint: str | None
    public_base_url: str | None


@dataclass(frozen=True)
class StorageUploadResult:
    url: str
    key: str
    bucket: str
    content_type: str


class StorageConfigurationError(RuntimeError):
    """Raised when object storage credentials or endpoints are missing."""


class StorageUploadError(RuntimeError):
    """Raised when the storage service rejects or fails an upload."""


class StorageDeletionError(RuntimeError):
    """Raised when removing an object fails."""


def _normalize_url(value: str | None) -> str | None:
    if not value or not value.strip():
        return None
    url = value.strip().rstrip("/")
    if not urlparse(url).scheme:
        url = f"https://{url.lstrip(':/')}"
    return url


@lru_cache(maxsize=1)
def load_storage_config() -> StorageConfig:
    settings = get_settings()
    try:
        key, secret = require_secrets("STORAGE_KEY", "STORAGE_SECRET")
    except MissingSecretError as exc:
        raise StorageConfigurationError(str(exc)) from exc

    return StorageConfig(
        key=key,
        secret=secret,
        region=settings.storage_region.strip() or "us-east-1",
        endpoint=_normalize_url(settings.storage_endpoint),
        public_base_url=_normalize_url(settings.storage_public_base_url),
    )


@lru_cache(maxsize=1)
def get_storage_client() -> BaseClient:
    config = load_storage_config()
    return Session().client(
        "s3",
        region_name=config.region,
        endpoint_url=config.endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def resolve_bucket(name: str | Bucket) -> Bucket:
    try:
        return Bucket(name)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown storage bucket") from exc


def _extension(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower().lstrip(".")
    if not re.fullmatch(r"[a-z0-9]{1,10}", suffix):
        return "bin"
    return suffix


def object_key(user_id: UUID | str, filename: str | None, *, index: int | None = None) -> str:
    """``{user_id}/{timestamp_ms}.{ext}``, with ``-{index}`` for batch uploads."""

    stamp = int(time.time() * 1000)
    name = f"{stamp}-{index}" if index is not None else str(stamp)
    return f"{user_id}/{name}.{_extension(filename)}"


def build_public_url(bucket: str, key: str) -> str:
    config = load_storage_config()
    path = quote(key.lstrip("/"))
    if config.public_base_url:
        return f"{config.public_base_url}/{bucket}/{path}"
    if config.endpoint:
        return f"{config.endpoint}/{bucket}/{path}"
    return f"https://{bucket}.s3.{config.region}.amazonaws.com/{path}"


async def upload_file(
    file: UploadFile,
    *,
    bucket: str | Bucket,
    user_id: UUID | str,
    key: str | None = None,
    client: BaseClient | None = None,
) -> StorageUploadResult:
    """Upload ``file`` and return its public URL."""

    bucket_name = resolve_bucket(bucket).value
    s3_client = client or get_storage_client()
    object_name = key or object_key(user_id, file.filename)
    content_type = (file.content_type or DEFAULT_CONTENT_TYPE).strip() or DEFAULT_CONTENT_TYPE
    file_obj = getattr(file, "file", None)
    if file_obj is None:
        raise StorageUploadError("Upload is missing its file buffer")

    def _upload() -> None:
        try:
            file_obj.seek(0)
            s3_client.upload_fileobj(
                file_obj,
                bucket_name,
                object_name,
                ExtraArgs={"ACL": "public-read", "ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
            logger.exception("Upload to bucket %s failed", bucket_name)
            raise StorageUploadError(f"Upload to {bucket_name} failed") from exc

    await run_in_threadpool(_upload)
    return StorageUploadResult(
        url=build_public_url(bucket_name, object_name),
        key=object_name,
        bucket=bucket_name,
        content_type=content_type,
    )


async def upload_files(
    files: Sequence[UploadFile],
    *,
    bucket: str | Bucket,
    user_id: UUID | str,
) -> list[StorageUploadResult]:
    results: list[StorageUploadResult] = []
    for index, file in enumerate(files):
        results.append(
            await upload_file(file, bucket=bucket, user_id=user_id, key=object_key(user_id, file.filename, index=index))
        )
    return results


def delete_object(bucket: str | Bucket, key: str, *, client: BaseClient | None = None) -> None:
    if not key:
        return
    bucket_name = resolve_bucket(bucket).value
    s3_client = client or get_storage_client()
    try:
        s3_client.delete_object(Bucket=bucket_name, Key=key.lstrip("/"))
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
        logger.exception("Failed to delete %s from bucket %s", key, bucket_name)
        raise StorageDeletionError("Unable to delete file from storage") from exc


@contextmanager
def storage_errors() -> Iterator[None]:
    """Translate storage failures into HTTP errors for route handlers."""

    try:
        yield
    except StorageConfigurationError as exc:
        logger.error("Object storage is not configured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="File storage is not configured"
        ) from exc
    except (StorageUploadError, StorageDeletionError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


__all__ = [
    "StorageConfig",
    "StorageConfigurationError",
    "StorageDeletionError",
    "StorageUploadError",
    "StorageUploadResult",
    "build_public_url",
    "delete_object",
    "get_storage_client",
    "load_storage_config",
    "object_key",
    "resolve_bucket",
    "storage_errors",
    "upload_file",
    "upload_files",
]
