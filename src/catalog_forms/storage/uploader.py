"""Abstractions over the external file storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..resources.resource_models import LocalFile


@dataclass(slots=True, frozen=True)
class StoredFile:
    """Location of a durably stored file."""

    url: str
    thumbnail_url: str | None = None


class StorageUploader(Protocol):
    """Uploads a local file under a destination folder.

    Implementations raise :class:`~catalog_forms.resources.resource_errors.UploadError`
    on network or server failure.
    """

    async def upload(self, file: LocalFile, folder: str) -> StoredFile:
        """Store ``file`` under ``folder`` and return its persisted URL."""


__all__ = ["StorageUploader", "StoredFile"]
