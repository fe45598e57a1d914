"""Dirty-state reconciliation between a baseline and the live working copy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .projection import FormSnapshot, Projection

logger = logging.getLogger(__name__)


def compute_dirty(projection: Projection, baseline: Any, current: Any) -> bool:
    """Return ``True`` when ``current`` differs semantically from ``baseline``."""

    return projection.normalize(baseline) != projection.normalize(current)


@dataclass(slots=True)
class DirtyStateTracker:
    """Answers "has this form changed" with zero false positives from noise.

    The tracker keeps the normalized baseline so each evaluation only has to
    normalize the working copy. It is evaluated synchronously on every
    mutation; there is no debouncing.
    """

    projection: Projection
    log: logging.Logger = field(default_factory=lambda: logger)
    _baseline: FormSnapshot | None = field(default=None, init=False)

    def normalize(self, entity: Any) -> FormSnapshot:
        return self.projection.normalize(entity)

    def compute_dirty(self, baseline: Any, current: Any) -> bool:
        return self.normalize(baseline) != self.normalize(current)

    @property
    def baseline(self) -> FormSnapshot | None:
        return self._baseline

    def capture(self, entity: Any) -> FormSnapshot:
        """Record ``entity`` as the last loaded or saved state."""

        self._baseline = self.normalize(entity)
        return self._baseline

    rebase = capture

    def is_dirty(self, current: Any) -> bool:
        if self._baseline is None:
            return False
        return self.normalize(current) != self._baseline

    def changed_fields(self, current: Any) -> list[str]:
        """Names of declared top-level fields that differ from the baseline."""

        if self._baseline is None:
            return []
        snapshot = self.normalize(current)
        changed = [
            name
            for (name, before), (_, after) in zip(self._baseline.values, snapshot.values)
            if before != after
        ]
        if changed:
            self.log.debug("snapshots.dirty.fields", extra={"fields": changed})
        return changed


__all__ = ["DirtyStateTracker", "compute_dirty"]
