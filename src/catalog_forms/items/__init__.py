"""Paginated, user-editable sub-entity collections."""

from .collection_editor import CollectionEditor
from .pagination import PaginatedCollectionController, item_id

__all__ = ["CollectionEditor", "PaginatedCollectionController", "item_id"]
