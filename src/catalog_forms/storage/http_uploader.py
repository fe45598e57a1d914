"""Storage uploader backed by the dashboard REST upload endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from ..resources.resource_errors import UploadError
from ..resources.resource_models import LocalFile
from .storage_schemas import UploadResponseEnvelope
from .uploader import StoredFile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpStorageUploader:
    """POST files as multipart form data to ``<base_url>/uploads``."""

    base_url: str
    token: str | None = None
    timeout_seconds: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    async def upload(self, file: LocalFile, folder: str) -> StoredFile:
        url = f"{self.base_url.rstrip('/')}/uploads"
        files = {
            "file": (file.name, _payload(file), file.content_type or "application/octet-stream")
        }
        data = {"folder": folder} if folder else {}
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(url, files=files, data=data, headers=headers)
        except httpx.HTTPError as exc:
            self.log.error(
                "storage.upload.transport_failed",
                extra={"file_name": file.name, "folder": folder},
                exc_info=exc,
            )
            raise UploadError(f"{file.name}: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            self.log.warning(
                "storage.upload.rejected",
                extra={
                    "file_name": file.name,
                    "folder": folder,
                    "status_code": response.status_code,
                },
            )
            raise UploadError(f"{file.name}: {message}")

        try:
            envelope = UploadResponseEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UploadError(f"{file.name}: malformed upload response") from exc

        stored = StoredFile(
            url=envelope.data.file_url,
            thumbnail_url=envelope.data.thumbnail_url,
        )
        self.log.info(
            "storage.upload.stored",
            extra={"file_name": file.name, "folder": folder, "url": stored.url},
        )
        return stored


def _payload(file: LocalFile) -> Any:
    if file.data is None:
        return b""
    return file.data


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"upload failed with status {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"upload failed with status {response.status_code}"


__all__ = ["HttpStorageUploader"]
