"""Schemas for object-storage uploads."""
from __future__ import annotations

from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str
    key: str
    bucket: str
    content_type: str


class UploadListResponse(BaseModel):
    items: list[UploadResponse]


__all__ = ["UploadResponse", "UploadListResponse"]
