"""Form session engine for the catalog admin edit screens.

Three parts cooperate behind :class:`~catalog_forms.session.FormSession`:
deferred image uploads (:mod:`catalog_forms.resources`), dirty-state
tracking over normalized snapshots (:mod:`catalog_forms.snapshots`) and
paginated sub-entity collections (:mod:`catalog_forms.items`).
"""

from .core.config import EngineConfig
from .exceptions import FormEngineError, PersistenceError, ResourceError
from .session import FormSession

__all__ = [
    "EngineConfig",
    "FormEngineError",
    "FormSession",
    "PersistenceError",
    "ResourceError",
]
