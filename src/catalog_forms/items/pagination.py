"""Page window and single expanded item over an editable sub-entity list.

The controller never owns the items. It reads them through a provider
callable and only keeps ``current_page`` and ``expanded_id``.

Per item the state machine is::

    collapsed --toggle_expand--> expanded --toggle_expand--> collapsed
    (collapsed | expanded) --removal--> absent

Whenever ``expanded_id`` changes or the list is mutated, :meth:`reconcile`
moves the window to the page holding the expanded item. Plain page
navigation does not trigger it, so the user can browse away from an
expanded item.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from ..snapshots.normalization import read_field

logger = logging.getLogger(__name__)

ItemsProvider = Callable[[], Sequence[Any]]


def item_id(item: Any) -> Any:
    return read_field(item, "id")


@dataclass(slots=True)
class PaginatedCollectionController:
    items: ItemsProvider
    page_size: int = 5
    current_page: int = 1
    expanded_id: str | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be positive")

    @property
    def total_items(self) -> int:
        return len(self.items())

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.page_size))

    def page_slice(self) -> list[Any]:
        start = (self.current_page - 1) * self.page_size
        return list(self.items()[start : start + self.page_size])

    def range_label(self) -> tuple[int, int, int]:
        """``(first, last, total)`` positions shown on the current page, 1-based."""

        total = self.total_items
        if total == 0:
            return (0, 0, 0)
        start = (self.current_page - 1) * self.page_size
        return (start + 1, min(start + self.page_size, total), total)

    def index_of(self, target_id: Any) -> int | None:
        for index, item in enumerate(self.items()):
            if item_id(item) == target_id:
                return index
        return None

    def page_of(self, index: int) -> int:
        return index // self.page_size + 1

    def is_expanded(self, target_id: Any) -> bool:
        return self.expanded_id is not None and self.expanded_id == target_id

    # -- navigation ----------------------------------------------------

    def go_to_page(self, page: int) -> bool:
        """Move to ``page`` if it exists; out-of-range requests are ignored."""

        if 1 <= page <= self.total_pages:
            self.current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self.current_page - 1)

    # -- expansion -----------------------------------------------------

    def toggle_expand(self, target_id: Any) -> None:
        if self.is_expanded(target_id):
            self.expanded_id = None
        else:
            self.expanded_id = target_id
        self.reconcile()

    def expand(self, target_id: Any) -> None:
        """Expand ``target_id`` and bring its page into view.

        Used for externally driven requests such as jumping to the item that
        failed validation.
        """

        self.expanded_id = target_id
        self.reconcile()

    def collapse(self) -> None:
        self.expanded_id = None

    # -- mutation hooks ------------------------------------------------

    def on_item_added(self, new_id: Any) -> None:
        """Expand the freshly appended item and show the last page."""

        self.expanded_id = new_id
        self.current_page = self.total_pages
        self.log.debug(
            "items.pagination.added",
            extra={"item_id": new_id, "page": self.current_page},
        )

    def on_item_removed(self, removed_index: int, removed_id: Any = None) -> None:
        if removed_id is not None and self.is_expanded(removed_id):
            self.expanded_id = None
        if self.current_page > self.total_pages:
            self.current_page = self.total_pages
        self.reconcile()
        self.log.debug(
            "items.pagination.removed",
            extra={"index": removed_index, "page": self.current_page},
        )

    def reconcile(self) -> None:
        """Re-establish the page/expanded invariants after any change."""

        if self.current_page > self.total_pages:
            self.current_page = self.total_pages
        if self.current_page < 1:
            self.current_page = 1
        if self.expanded_id is None:
            return
        index = self.index_of(self.expanded_id)
        if index is None:
            self.expanded_id = None
            return
        target = self.page_of(index)
        if target != self.current_page:
            self.current_page = target


__all__ = ["ItemsProvider", "PaginatedCollectionController", "item_id"]
