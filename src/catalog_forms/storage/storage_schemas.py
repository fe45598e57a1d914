"""Pydantic models for the upload endpoint response envelope."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadedFilePayload(BaseModel):
    """Metadata returned by the backend for a stored file."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = Field(default=None, ge=0)
    file_url: str
    thumbnail_url: Optional[str] = None


class UploadResponseEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: UploadedFilePayload


__all__ = ["UploadResponseEnvelope", "UploadedFilePayload"]
