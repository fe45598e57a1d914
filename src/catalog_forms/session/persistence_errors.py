"""Typed failures reported by the persistence collaborator."""

from __future__ import annotations

from ..exceptions import FormEngineError, PersistenceError


class ValidationFailed(PersistenceError):
    """Raised when the backend rejects the payload (400/422)."""

    category = "validation"


class Conflict(PersistenceError):
    """Raised when the entity changed or a unique field clashes (409)."""

    category = "conflict"


class AccessDenied(PersistenceError):
    """Raised when the backend refuses the credentials or the action (401/403)."""

    category = "access_denied"


class NotFound(PersistenceError):
    """Raised when the entity being updated no longer exists (404)."""

    category = "not_found"


class ServerFailure(PersistenceError):
    """Raised on 5xx responses and transport errors."""

    category = "server"


class SaveFailed(FormEngineError):
    """Raised by the form session when the save step fails.

    The working copy, baseline and pending resources are left untouched so
    the submit can be retried.
    """

    def __init__(self, cause: PersistenceError) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.category = cause.category
        self.status_code = cause.status_code


__all__ = [
    "AccessDenied",
    "Conflict",
    "NotFound",
    "SaveFailed",
    "ServerFailure",
    "ValidationFailed",
]
