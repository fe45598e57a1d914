"""Pending image resources: validation, preview handles and deferred upload."""

from .pending_resources import VARIANT_SLOT_PREFIX, PendingResourceManager
from .preview_handles import InMemoryPreviewHandles, PreviewHandleFactory
from .resource_errors import (
    CapacityExceeded,
    DuplicateResource,
    InvalidResourceType,
    ResourceTooLarge,
    ResourceValidationError,
    UploadError,
    UploadFailed,
)
from .resource_models import (
    LocalFile,
    PendingResource,
    RegistrationResult,
    RejectedFile,
    RejectionReason,
    ResourceRole,
    ResourceStatus,
    UploadResult,
)
from .validation import ResourceValidator

__all__ = [
    "CapacityExceeded",
    "DuplicateResource",
    "InMemoryPreviewHandles",
    "InvalidResourceType",
    "LocalFile",
    "PendingResource",
    "PendingResourceManager",
    "PreviewHandleFactory",
    "RegistrationResult",
    "RejectedFile",
    "RejectionReason",
    "ResourceRole",
    "ResourceStatus",
    "ResourceTooLarge",
    "ResourceValidationError",
    "ResourceValidator",
    "UploadError",
    "UploadFailed",
    "UploadResult",
    "VARIANT_SLOT_PREFIX",
]
