"""Add/remove/update/reorder for sub-entity collections of the working copy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence
from uuid import uuid4

from .pagination import PaginatedCollectionController, item_id

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid4())


@dataclass(slots=True)
class CollectionEditor:
    """Mutates one list field through the session's single writer.

    Each mutation builds a new list and hands it to ``write``; the items
    themselves are plain mappings owned by the working copy.
    """

    field_name: str
    read: Callable[[], Sequence[Mapping[str, Any]]]
    write: Callable[[list[dict[str, Any]]], None]
    controller: PaginatedCollectionController
    defaults: Mapping[str, Any] = field(default_factory=dict)
    id_factory: Callable[[], str] = _new_id
    on_removed: Callable[[Any], None] | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    def items(self) -> list[dict[str, Any]]:
        return [dict(item) for item in self.read()]

    def add(self, **values: Any) -> dict[str, Any]:
        """Append a new item, expand it and page to it."""

        new_id = self.id_factory()
        item = {**self.defaults, **values, "id": new_id}
        self.write([*self.items(), item])
        self.controller.on_item_added(new_id)
        self.log.info(
            "items.collection.added",
            extra={"collection": self.field_name, "item_id": new_id},
        )
        return item

    def remove(self, target_id: Any) -> bool:
        items = self.items()
        index = next((i for i, item in enumerate(items) if item_id(item) == target_id), None)
        if index is None:
            return False
        del items[index]
        self.write(items)
        self.controller.on_item_removed(index, target_id)
        if self.on_removed is not None:
            self.on_removed(target_id)
        self.log.info(
            "items.collection.removed",
            extra={"collection": self.field_name, "item_id": target_id},
        )
        return True

    def update(self, target_id: Any, name: str, value: Any) -> bool:
        items = self.items()
        for item in items:
            if item_id(item) == target_id:
                item[name] = value
                self.write(items)
                return True
        return False

    def move(self, start_index: int, end_index: int) -> None:
        """Move the item at ``start_index`` to ``end_index``."""

        items = self.items()
        if not (0 <= start_index < len(items)) or not (0 <= end_index < len(items)):
            raise IndexError("move indices out of range")
        moved = items.pop(start_index)
        items.insert(end_index, moved)
        self.write(items)
        self.controller.reconcile()


__all__ = ["CollectionEditor"]
