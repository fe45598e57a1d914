"""Base exception types shared by the form session engine."""

from __future__ import annotations

__all__ = [
    "FormEngineError",
    "ResourceError",
    "PersistenceError",
]


class FormEngineError(Exception):
    """Base class for engine specific errors."""


class ResourceError(FormEngineError):
    """Base class for pending resource failures (validation and upload)."""


class PersistenceError(FormEngineError):
    """Base class for failures reported by the persistence collaborator."""

    category: str = "unknown"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
