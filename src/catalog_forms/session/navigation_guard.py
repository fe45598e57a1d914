"""Unsaved-changes guard consulted before leaving an edit screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NavigationGuard:
    """Polls the session signals and decides whether navigation must be confirmed.

    ``has_unsaved_work`` and ``is_saving`` are read on every check, so the
    guard always reflects the current state of the form.
    """

    has_unsaved_work: Callable[[], bool]
    is_saving: Callable[[], bool] = lambda: False
    log: logging.Logger = field(default_factory=lambda: logger)

    @property
    def active(self) -> bool:
        return self.has_unsaved_work() and not self.is_saving()

    def should_block(self, current_path: str, next_path: str) -> bool:
        if current_path == next_path:
            return False
        blocked = self.active
        if blocked:
            self.log.info(
                "session.navigation.blocked",
                extra={"current_path": current_path, "next_path": next_path},
            )
        return blocked

    def should_warn_on_unload(self) -> bool:
        """Whether closing or reloading the page should prompt the user."""

        return self.active


__all__ = ["NavigationGuard"]
