"""Normalized snapshots and dirty-state tracking."""

from .dirty_tracker import DirtyStateTracker, compute_dirty
from .projection import FieldKind, FieldSpec, FormSnapshot, Projection
from .projections import BLOG_PROJECTION, COLLECTION_PROJECTION, PRODUCT_PROJECTION

__all__ = [
    "BLOG_PROJECTION",
    "COLLECTION_PROJECTION",
    "DirtyStateTracker",
    "FieldKind",
    "FieldSpec",
    "FormSnapshot",
    "PRODUCT_PROJECTION",
    "Projection",
    "compute_dirty",
]
