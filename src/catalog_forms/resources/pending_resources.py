"""Deferred upload of locally attached images.

Files picked by the user are held as :class:`PendingResource` objects with a
preview handle until the surrounding form is submitted. Nothing reaches the
storage collaborator before :meth:`PendingResourceManager.upload_all`.

Every preview handle created here is revoked exactly once: on replacement,
on :meth:`~PendingResourceManager.remove`, or on
:meth:`~PendingResourceManager.release_all` when the owning screen is torn
down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator
from uuid import uuid4

from .preview_handles import PreviewHandleFactory
from .resource_errors import ResourceValidationError, UploadFailed
from .resource_models import (
    LocalFile,
    PendingResource,
    RegistrationResult,
    RejectedFile,
    RejectionReason,
    ResourceRole,
    ResourceStatus,
    UploadResult,
)
from .validation import ResourceValidator
from ..storage.uploader import StorageUploader, StoredFile

logger = logging.getLogger(__name__)

VARIANT_SLOT_PREFIX = "variant:"


@dataclass(slots=True)
class _SavedState:
    resource: PendingResource
    status: ResourceStatus
    uploaded_url: str | None
    uploaded_thumbnail_url: str | None
    error_message: str | None

    @classmethod
    def capture(cls, resource: PendingResource) -> "_SavedState":
        return cls(
            resource=resource,
            status=resource.status,
            uploaded_url=resource.uploaded_url,
            uploaded_thumbnail_url=resource.uploaded_thumbnail_url,
            error_message=resource.error_message,
        )

    def restore(self) -> None:
        self.resource.status = self.status
        self.resource.uploaded_url = self.uploaded_url
        self.resource.uploaded_thumbnail_url = self.uploaded_thumbnail_url
        self.resource.error_message = self.error_message


@dataclass(slots=True)
class PendingResourceManager:
    """Owns pending image attachments and their preview handles."""

    validator: ResourceValidator
    uploader: StorageUploader
    previews: PreviewHandleFactory
    log: logging.Logger = field(default_factory=lambda: logger)
    _primary: PendingResource | None = field(default=None, init=False)
    _additional: list[PendingResource] = field(default_factory=list, init=False)
    _named: dict[str, PendingResource] = field(default_factory=dict, init=False)
    _uploading: bool = field(default=False, init=False)

    def __enter__(self) -> "PendingResourceManager":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release_all()

    # -- inspection ----------------------------------------------------

    @property
    def primary(self) -> PendingResource | None:
        return self._primary

    @property
    def additional(self) -> tuple[PendingResource, ...]:
        return tuple(self._additional)

    @property
    def named(self) -> dict[str, PendingResource]:
        return dict(self._named)

    @property
    def is_uploading(self) -> bool:
        return self._uploading

    @property
    def has_pending(self) -> bool:
        return self.pending_count > 0

    @property
    def pending_count(self) -> int:
        return sum(1 for _ in self._iter_resources())

    def get(self, resource_id: str) -> PendingResource | None:
        for resource in self._iter_resources():
            if resource.id == resource_id:
                return resource
        return None

    def _iter_resources(self) -> Iterator[PendingResource]:
        if self._primary is not None:
            yield self._primary
        yield from self._additional
        yield from self._named.values()

    # -- registration --------------------------------------------------

    def register_primary(self, file: LocalFile) -> PendingResource:
        """Attach ``file`` as the single primary image, replacing any previous one."""

        self.validator.validate(file)
        if self._primary is not None:
            self._release(self._primary)
        self._primary = self._create(file, ResourceRole.PRIMARY)
        self.log.info(
            "resources.primary.registered",
            extra={"resource_id": self._primary.id, "file_name": file.name},
        )
        return self._primary

    def register_named(self, slot: str, file: LocalFile) -> PendingResource:
        """Attach ``file`` to a named single-resource slot such as ``mobile``."""

        self.validator.validate(file)
        previous = self._named.pop(slot, None)
        if previous is not None:
            self._release(previous)
        resource = self._create(file, ResourceRole.NAMED, slot=slot)
        self._named[slot] = resource
        self.log.info(
            "resources.named.registered",
            extra={"resource_id": resource.id, "slot": slot, "file_name": file.name},
        )
        return resource

    def register_additional(
        self, files: Iterable[LocalFile], *, existing_count: int = 0
    ) -> RegistrationResult:
        """Attach a batch of gallery images.

        ``existing_count`` is the number of additional images already stored
        on the entity; they occupy capacity as well.
        """

        result = RegistrationResult()
        remaining = self.validator.limits.max_additional - existing_count - len(self._additional)
        seen = {(item.source.name, item.source.size) for item in self._additional}

        for file in files:
            if remaining <= 0:
                result.rejected.append(RejectedFile(file, RejectionReason.CAPACITY_EXCEEDED))
                continue
            try:
                self.validator.validate(file)
            except ResourceValidationError as exc:
                result.rejected.append(RejectedFile(file, exc.reason))
                continue
            key = (file.name, file.size)
            if key in seen:
                result.rejected.append(RejectedFile(file, RejectionReason.DUPLICATE))
                continue

            resource = self._create(file, ResourceRole.ADDITIONAL)
            self._additional.append(resource)
            result.accepted.append(resource)
            seen.add(key)
            remaining -= 1

        if result.rejected:
            self.log.warning(
                "resources.additional.rejected",
                extra={
                    "rejected": [(item.file.name, item.reason.value) for item in result.rejected]
                },
            )
        self.log.info(
            "resources.additional.registered",
            extra={"accepted": len(result.accepted), "held": len(self._additional)},
        )
        return result

    def _create(
        self, file: LocalFile, role: ResourceRole, *, slot: str | None = None
    ) -> PendingResource:
        return PendingResource(
            id=str(uuid4()),
            source=file,
            preview_handle=self.previews.create(file),
            role=role,
            slot=slot,
        )

    # -- removal -------------------------------------------------------

    def remove(self, resource_id: str) -> None:
        """Drop a pending resource and revoke its preview; unknown ids are ignored."""

        if self._primary is not None and self._primary.id == resource_id:
            resource = self._primary
            self._primary = None
            self._release(resource)
            return
        for index, resource in enumerate(self._additional):
            if resource.id == resource_id:
                del self._additional[index]
                self._release(resource)
                return
        for slot, resource in list(self._named.items()):
            if resource.id == resource_id:
                del self._named[slot]
                self._release(resource)
                return
        self.log.debug("resources.remove.unknown", extra={"resource_id": resource_id})

    def clear_named(self, prefix: str) -> int:
        """Remove every named resource whose slot starts with ``prefix``."""

        slots = [slot for slot in self._named if slot.startswith(prefix)]
        for slot in slots:
            self._release(self._named.pop(slot))
        return len(slots)

    def release_all(self) -> None:
        """Revoke every outstanding preview handle.

        Safe to call while :meth:`upload_all` is awaiting the uploader; the
        in-flight requests are left to finish on their own.
        """

        released = 0
        for resource in list(self._iter_resources()):
            self._release(resource)
            released += 1
        self._primary = None
        self._additional = []
        self._named = {}
        if released:
            self.log.info("resources.released", extra={"count": released})

    def release(self, resource_ids: Iterable[str]) -> int:
        """Revoke and drop only the listed resources.

        Used after a save so that files attached while the save was in
        flight stay pending. Ids no longer held are skipped.
        """

        targets = set(resource_ids)
        held = [resource for resource in self._iter_resources() if resource.id in targets]
        for resource in held:
            self.remove(resource.id)
        if held:
            self.log.info(
                "resources.released",
                extra={"count": len(held), "remaining": self.pending_count},
            )
        return len(held)

    def _release(self, resource: PendingResource) -> None:
        self.previews.revoke(resource.preview_handle)

    # -- upload --------------------------------------------------------

    async def upload_all(self, destination_folder: str) -> UploadResult:
        """Upload every resource that is not stored yet and return final URLs.

        Resources sharing the same file instance are uploaded once. The first
        failure aborts the call: resources touched here return to the state
        they had before the call, the failing one is marked ``failed`` and
        :class:`UploadFailed` is raised without any URL being returned.
        """

        ordered = list(self._iter_resources())
        saved = [_SavedState.capture(resource) for resource in ordered]
        stored_by_file: dict[LocalFile, StoredFile] = {
            resource.source: StoredFile(resource.uploaded_url, resource.uploaded_thumbnail_url)
            for resource in ordered
            if resource.is_uploaded and resource.uploaded_url is not None
        }

        self._uploading = True
        self.log.info(
            "resources.upload.started",
            extra={"folder": destination_folder, "resources": len(ordered)},
        )
        try:
            for resource in ordered:
                if resource.is_uploaded:
                    continue
                resource.status = ResourceStatus.UPLOADING
                stored = stored_by_file.get(resource.source)
                if stored is not None:
                    self.log.info(
                        "resources.upload.deduplicated",
                        extra={"resource_id": resource.id, "url": stored.url},
                    )
                else:
                    folder = _folder_for(resource, destination_folder)
                    try:
                        stored = await self.uploader.upload(resource.source, folder)
                    except Exception as exc:
                        for state in saved:
                            state.restore()
                        resource.status = ResourceStatus.FAILED
                        resource.error_message = str(exc) or type(exc).__name__
                        self.log.warning(
                            "resources.upload.failed",
                            extra={
                                "resource_id": resource.id,
                                "file_name": resource.source.name,
                                "folder": folder,
                            },
                            exc_info=exc,
                        )
                        raise UploadFailed(
                            f"Failed to upload {resource.source.name}: {resource.error_message}",
                            resource_id=resource.id,
                        ) from exc
                    stored_by_file[resource.source] = stored
                resource.status = ResourceStatus.UPLOADED
                resource.uploaded_url = stored.url
                resource.uploaded_thumbnail_url = stored.thumbnail_url
                resource.error_message = None
        finally:
            self._uploading = False

        result = self._collect(ordered)
        self.log.info(
            "resources.upload.completed",
            extra={"folder": destination_folder, "uploads": len(stored_by_file)},
        )
        return result

    @staticmethod
    def _collect(resources: list[PendingResource]) -> UploadResult:
        result = UploadResult()
        stored = [resource for resource in resources if resource.uploaded_url is not None]
        result.resource_ids = tuple(resource.id for resource in stored)
        for resource in stored:
            if resource.role is ResourceRole.PRIMARY:
                result.primary_url = resource.uploaded_url
                result.primary_thumbnail_url = resource.uploaded_thumbnail_url
            elif resource.role is ResourceRole.ADDITIONAL:
                result.additional_urls.append(resource.uploaded_url)
                result.additional_thumbnail_urls.append(
                    resource.uploaded_thumbnail_url or resource.uploaded_url
                )
            elif resource.slot is not None:
                result.named_urls[resource.slot] = resource.uploaded_url
                if resource.uploaded_thumbnail_url:
                    result.named_thumbnail_urls[resource.slot] = resource.uploaded_thumbnail_url
        return result


def _folder_for(resource: PendingResource, destination_folder: str) -> str:
    if resource.slot and resource.slot.startswith(VARIANT_SLOT_PREFIX):
        return f"{destination_folder.rstrip('/')}/variants"
    return destination_folder


__all__ = ["PendingResourceManager", "VARIANT_SLOT_PREFIX"]
