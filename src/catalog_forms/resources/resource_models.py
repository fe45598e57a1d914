"""Data structures for deferred image resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ResourceRole(StrEnum):
    """Slot kinds a pending resource can occupy."""

    PRIMARY = "primary"
    ADDITIONAL = "additional"
    NAMED = "named"


class ResourceStatus(StrEnum):
    """Upload lifecycle of a pending resource."""

    PENDING = "pending"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    FAILED = "failed"


class RejectionReason(StrEnum):
    """Reasons a selected file is refused at registration time."""

    INVALID_TYPE = "invalid_type"
    TOO_LARGE = "too_large"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    DUPLICATE = "duplicate"


@dataclass(slots=True, eq=False)
class LocalFile:
    """A file picked or dropped by the user.

    ``data`` is an opaque handle (bytes, file object, path) that is only
    forwarded to the storage uploader. Equality is identity: two selections
    of the same file on disk are distinct instances.
    """

    name: str
    size: int
    content_type: str | None
    data: Any = None


@dataclass(slots=True, eq=False)
class PendingResource:
    """A locally attached file that has not been durably stored yet."""

    id: str
    source: LocalFile
    preview_handle: str
    role: ResourceRole
    slot: str | None = None
    status: ResourceStatus = ResourceStatus.PENDING
    uploaded_url: str | None = None
    uploaded_thumbnail_url: str | None = None
    error_message: str | None = None

    @property
    def is_uploaded(self) -> bool:
        return self.status is ResourceStatus.UPLOADED and self.uploaded_url is not None


@dataclass(slots=True)
class RejectedFile:
    file: LocalFile
    reason: RejectionReason


@dataclass(slots=True)
class RegistrationResult:
    """Outcome of registering a batch of additional images."""

    accepted: list[PendingResource] = field(default_factory=list)
    rejected: list[RejectedFile] = field(default_factory=list)


@dataclass(slots=True)
class UploadResult:
    """Persisted URLs produced by :meth:`PendingResourceManager.upload_all`."""

    primary_url: str | None = None
    primary_thumbnail_url: str | None = None
    additional_urls: list[str] = field(default_factory=list)
    additional_thumbnail_urls: list[str] = field(default_factory=list)
    named_urls: dict[str, str] = field(default_factory=dict)
    named_thumbnail_urls: dict[str, str] = field(default_factory=dict)
    resource_ids: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.primary_url is None and not self.additional_urls and not self.named_urls


__all__ = [
    "LocalFile",
    "PendingResource",
    "RegistrationResult",
    "RejectedFile",
    "RejectionReason",
    "ResourceRole",
    "ResourceStatus",
    "UploadResult",
]
