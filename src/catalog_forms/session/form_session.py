"""Screen controller composing pending resources, dirty state and collections.

The session owns the working copy and is its only writer. Every field change,
including collection edits, flows through :meth:`FormSession.update_field`,
so dirty evaluation always sees the latest state.

Submit runs in three strictly ordered steps: upload pending resources, merge
the resulting URLs into a copy of the working copy, save. Nothing is
committed to the session until the save succeeds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog

from ..core.config import EngineConfig
from ..exceptions import PersistenceError
from ..items.collection_editor import CollectionEditor
from ..items.pagination import PaginatedCollectionController, item_id
from ..resources.pending_resources import VARIANT_SLOT_PREFIX, PendingResourceManager
from ..resources.preview_handles import InMemoryPreviewHandles, PreviewHandleFactory
from ..resources.resource_models import UploadResult
from ..resources.validation import ResourceValidator
from ..snapshots.dirty_tracker import DirtyStateTracker
from ..snapshots.projection import Projection
from ..storage.uploader import StorageUploader
from .navigation_guard import NavigationGuard
from .persistence import PersistenceService
from .persistence_errors import SaveFailed

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ImageFieldMap:
    """Where uploaded URLs land in the saved entity.

    ``named`` maps a slot name to a top-level field. ``item_images`` maps a
    slot prefix to ``(collection_field, item_field)``; the rest of the slot
    name is the id of the collection item.
    """

    primary: str | None = None
    primary_thumbnail: str | None = None
    additional: str | None = None
    additional_thumbnails: str | None = None
    named: Mapping[str, str] = field(default_factory=dict)
    item_images: Mapping[str, tuple[str, str]] = field(default_factory=dict)


PRODUCT_IMAGE_FIELDS = ImageFieldMap(
    primary="primaryImage",
    additional="additionalImages",
    item_images={VARIANT_SLOT_PREFIX: ("productVariants", "image")},
)

BLOG_IMAGE_FIELDS = ImageFieldMap(
    primary="mainImagePC",
    named={"mobile": "mainImageMobile"},
    item_images={"subsection:": ("subsections", "image")},
)

COLLECTION_IMAGE_FIELDS = ImageFieldMap(
    primary="bannerImage",
    named={"mobile": "bannerImageMobile"},
)


@dataclass(slots=True)
class FormSession:
    projection: Projection
    resources: PendingResourceManager
    persistence: PersistenceService
    image_fields: ImageFieldMap = field(default_factory=ImageFieldMap)
    destination_folder: str = "uploads"
    page_size: int = 5
    entity_id: str | None = None
    log: logging.Logger = field(default_factory=lambda: logger)
    tracker: DirtyStateTracker = field(init=False)
    _working: dict[str, Any] = field(default_factory=dict, init=False)
    _collections: dict[str, CollectionEditor] = field(default_factory=dict, init=False)
    _submitting: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.tracker = DirtyStateTracker(self.projection)

    @classmethod
    def build(
        cls,
        projection: Projection,
        *,
        uploader: StorageUploader,
        persistence: PersistenceService,
        config: EngineConfig | None = None,
        previews: PreviewHandleFactory | None = None,
        **options: Any,
    ) -> "FormSession":
        """Wire a session with a resource manager built from ``config``."""

        config = config or EngineConfig.build_default()
        resources = PendingResourceManager(
            validator=ResourceValidator(config.resource_limits()),
            uploader=uploader,
            previews=previews if previews is not None else InMemoryPreviewHandles(),
        )
        options.setdefault("page_size", config.collection_page_size)
        return cls(
            projection=projection,
            resources=resources,
            persistence=persistence,
            **options,
        )

    def __enter__(self) -> "FormSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # -- working copy --------------------------------------------------

    def load(self, entity: Mapping[str, Any], *, entity_id: str | None = None) -> None:
        """Start editing ``entity``; it becomes both working copy and baseline."""

        self._working = dict(entity)
        self.entity_id = entity_id if entity_id is not None else _as_id(entity.get("id"))
        self.tracker.capture(self._working)
        for editor in self._collections.values():
            editor.controller.reconcile()
        self.log.info(
            "session.loaded",
            extra={"entity_id": self.entity_id, "fields": len(self._working)},
        )

    @property
    def working_copy(self) -> dict[str, Any]:
        return dict(self._working)

    def get(self, name: str, default: Any = None) -> Any:
        return self._working.get(name, default)

    def update_field(self, name: str, value: Any) -> None:
        self._working = {**self._working, name: value}

    def update_fields(self, values: Mapping[str, Any]) -> None:
        self._working = {**self._working, **values}

    # -- collections ---------------------------------------------------

    def collection(
        self, name: str, *, defaults: Mapping[str, Any] | None = None
    ) -> CollectionEditor:
        """Editor and page controller for the list stored under ``name``."""

        editor = self._collections.get(name)
        if editor is not None:
            return editor
        controller = PaginatedCollectionController(
            items=lambda: self._working.get(name) or [],
            page_size=self.page_size,
        )
        editor = CollectionEditor(
            field_name=name,
            read=lambda: self._working.get(name) or [],
            write=lambda items: self.update_field(name, items),
            controller=controller,
            defaults=defaults or {},
            on_removed=lambda removed_id: self._drop_item_images(name, removed_id),
        )
        self._collections[name] = editor
        return editor

    def item_slot(self, collection: str, target_id: Any) -> str:
        """Named resource slot holding the image of one collection item."""

        for prefix, (field_name, _) in self.image_fields.item_images.items():
            if field_name == collection:
                return f"{prefix}{target_id}"
        raise KeyError(f"no image slot configured for collection {collection!r}")

    def _drop_item_images(self, collection: str, removed_id: Any) -> None:
        for prefix, (field_name, _) in self.image_fields.item_images.items():
            if field_name != collection:
                continue
            resource = self.resources.named.get(f"{prefix}{removed_id}")
            if resource is not None:
                self.resources.remove(resource.id)

    # -- signals -------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self.tracker.is_dirty(self._working)

    @property
    def is_saving(self) -> bool:
        return self._submitting or self.resources.is_uploading

    @property
    def has_unsaved_work(self) -> bool:
        return self.is_dirty or self.resources.has_pending

    def changed_fields(self) -> list[str]:
        return self.tracker.changed_fields(self._working)

    def navigation_guard(self) -> NavigationGuard:
        return NavigationGuard(
            has_unsaved_work=lambda: self.has_unsaved_work,
            is_saving=lambda: self.is_saving,
        )

    # -- submit --------------------------------------------------------

    async def submit(self, destination_folder: str | None = None) -> dict[str, Any] | None:
        """Upload, merge and save. Returns the saved entity.

        A call made while another submit is in flight is ignored and returns
        ``None``. :class:`~catalog_forms.resources.UploadFailed` and
        :class:`SaveFailed` leave the working copy, the baseline and the
        pending resources untouched. On success only the resources that were
        uploaded by this call are released; files attached and fields edited
        while it was in flight are kept as unsaved work.
        """

        if self._submitting:
            self.log.info("session.submit.ignored", extra={"entity_id": self.entity_id})
            return None

        self._submitting = True
        folder = destination_folder or self.destination_folder
        try:
            with structlog.contextvars.bound_contextvars(entity_id=self.entity_id, folder=folder):
                return await self._submit(folder)
        finally:
            self._submitting = False

    async def _submit(self, folder: str) -> dict[str, Any]:
        uploads = await self.resources.upload_all(folder)
        submitted = self._working
        payload = self._merge(submitted, uploads)
        try:
            if self.entity_id is None:
                saved = await self.persistence.create(payload)
            else:
                saved = await self.persistence.update(self.entity_id, payload)
        except PersistenceError as exc:
            self.log.warning(
                "session.submit.save_failed",
                extra={"entity_id": self.entity_id, "category": exc.category},
            )
            raise SaveFailed(exc) from exc

        committed = {**payload, **(saved or {})}
        # Fields written while the save was awaited stay in the working copy
        # and keep the form dirty against the new baseline.
        edited = {
            name: value
            for name, value in self._working.items()
            if name not in submitted or submitted[name] is not value
        }
        self._working = {**committed, **edited}
        if self.entity_id is None:
            self.entity_id = _as_id(committed.get("id"))
        self.tracker.rebase(committed)
        self.resources.release(uploads.resource_ids)
        self.log.info(
            "session.submit.saved",
            extra={
                "entity_id": self.entity_id,
                "edited_during_save": sorted(edited),
                "still_pending": self.resources.pending_count,
            },
        )
        return dict(committed)

    def _merge(self, working: Mapping[str, Any], uploads: UploadResult) -> dict[str, Any]:
        fields = self.image_fields
        payload = dict(working)
        if uploads.primary_url is not None and fields.primary:
            payload[fields.primary] = uploads.primary_url
            if fields.primary_thumbnail and uploads.primary_thumbnail_url:
                payload[fields.primary_thumbnail] = uploads.primary_thumbnail_url
        if uploads.additional_urls and fields.additional:
            existing = list(payload.get(fields.additional) or [])
            payload[fields.additional] = existing + uploads.additional_urls
            if fields.additional_thumbnails:
                thumbs = list(payload.get(fields.additional_thumbnails) or [])
                payload[fields.additional_thumbnails] = thumbs + uploads.additional_thumbnail_urls
        for slot, url in uploads.named_urls.items():
            if slot in fields.named:
                payload[fields.named[slot]] = url
                continue
            for prefix, (collection, item_field) in fields.item_images.items():
                if slot.startswith(prefix):
                    payload[collection] = _set_item_field(
                        payload.get(collection), slot[len(prefix):], item_field, url
                    )
                    break
            else:
                self.log.warning("session.submit.unmapped_slot", extra={"slot": slot})
        return payload

    def close(self) -> None:
        """Tear the screen down: revoke every outstanding preview handle."""

        self.resources.release_all()


def _set_item_field(items: Any, target_id: str, name: str, value: Any) -> list[Any]:
    updated = []
    for item in items or []:
        if isinstance(item, Mapping) and str(item_id(item)) == target_id:
            item = {**item, name: value}
        updated.append(item)
    return updated


def _as_id(value: Any) -> str | None:
    return None if value is None else str(value)


__all__ = [
    "BLOG_IMAGE_FIELDS",
    "COLLECTION_IMAGE_FIELDS",
    "FormSession",
    "ImageFieldMap",
    "PRODUCT_IMAGE_FIELDS",
]
