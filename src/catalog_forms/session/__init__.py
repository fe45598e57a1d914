"""Form session: working copy ownership, submit and navigation guard."""

from .form_session import (
    BLOG_IMAGE_FIELDS,
    COLLECTION_IMAGE_FIELDS,
    PRODUCT_IMAGE_FIELDS,
    FormSession,
    ImageFieldMap,
)
from .navigation_guard import NavigationGuard
from .persistence import HttpPersistenceService, PersistenceService
from .persistence_errors import (
    AccessDenied,
    Conflict,
    NotFound,
    SaveFailed,
    ServerFailure,
    ValidationFailed,
)

__all__ = [
    "AccessDenied",
    "BLOG_IMAGE_FIELDS",
    "COLLECTION_IMAGE_FIELDS",
    "Conflict",
    "FormSession",
    "HttpPersistenceService",
    "ImageFieldMap",
    "NavigationGuard",
    "NotFound",
    "PRODUCT_IMAGE_FIELDS",
    "PersistenceService",
    "SaveFailed",
    "ServerFailure",
    "ValidationFailed",
]
