"""Domain-specific exceptions for pending resources."""

from __future__ import annotations

from ..exceptions import ResourceError
from .resource_models import LocalFile, RejectionReason


class ResourceValidationError(ResourceError):
    """Base class for local validation failures raised at registration."""

    reason: RejectionReason

    def __init__(self, file: LocalFile, message: str | None = None) -> None:
        super().__init__(message or f"{file.name}: {self.reason.value}")
        self.file = file


class InvalidResourceType(ResourceValidationError):
    """Raised when the selected file is not an allowed image type."""

    reason = RejectionReason.INVALID_TYPE


class ResourceTooLarge(ResourceValidationError):
    """Raised when the selected file exceeds the configured size limit."""

    reason = RejectionReason.TOO_LARGE


class CapacityExceeded(ResourceValidationError):
    """Raised when no additional image slot is left."""

    reason = RejectionReason.CAPACITY_EXCEEDED


class DuplicateResource(ResourceValidationError):
    """Raised when a file with the same name and size is already attached."""

    reason = RejectionReason.DUPLICATE


class UploadError(ResourceError):
    """Raised by a storage uploader on network or server failure."""


class UploadFailed(ResourceError):
    """Raised by ``upload_all`` when any single upload fails."""

    def __init__(self, message: str, *, resource_id: str | None = None) -> None:
        super().__init__(message)
        self.resource_id = resource_id


__all__ = [
    "CapacityExceeded",
    "DuplicateResource",
    "InvalidResourceType",
    "ResourceTooLarge",
    "ResourceValidationError",
    "UploadError",
    "UploadFailed",
]
