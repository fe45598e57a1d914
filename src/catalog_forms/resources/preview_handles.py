"""Revocable preview handles for locally attached files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from .resource_models import LocalFile

logger = logging.getLogger(__name__)


class PreviewHandleFactory(Protocol):
    """Creates and revokes display-only references to local files."""

    def create(self, file: LocalFile) -> str:
        """Return a new handle rendering ``file``."""

    def revoke(self, handle: str) -> None:
        """Release a handle previously returned by :meth:`create`."""


@dataclass(slots=True)
class InMemoryPreviewHandles:
    """Issue ``blob:`` style handles and track which are still live."""

    prefix: str = "blob:"
    _live: dict[str, LocalFile] = field(default_factory=dict)
    revoked: list[str] = field(default_factory=list)

    def create(self, file: LocalFile) -> str:
        handle = f"{self.prefix}{uuid4()}"
        self._live[handle] = file
        return handle

    def revoke(self, handle: str) -> None:
        if self._live.pop(handle, None) is None:
            logger.warning("resources.preview.unknown_handle", extra={"handle": handle})
            return
        self.revoked.append(handle)

    def resolve(self, handle: str) -> LocalFile | None:
        return self._live.get(handle)

    @property
    def outstanding(self) -> list[str]:
        return list(self._live)


__all__ = ["InMemoryPreviewHandles", "PreviewHandleFactory"]
