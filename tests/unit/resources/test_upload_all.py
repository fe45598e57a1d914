from __future__ import annotations

import asyncio

import pytest

from catalog_forms.resources import (
    InMemoryPreviewHandles,
    PendingResourceManager,
    ResourceStatus,
    UploadError,
    UploadFailed,
)
from tests.helpers.stubs import StubUploader, build_manager, make_file

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_upload_all_returns_urls_by_role(
    manager: PendingResourceManager, uploader: StubUploader
) -> None:
    manager.register_primary(make_file("cover.jpg"))
    manager.register_additional([make_file("a.jpg", size=1), make_file("b.jpg", size=2)])
    manager.register_named("mobile", make_file("mobile.jpg"))

    result = await manager.upload_all("products")

    assert result.primary_url.endswith("1-cover.jpg")
    assert result.primary_thumbnail_url.endswith("thumb-1-cover.jpg")
    assert [url.rsplit("/", 1)[-1] for url in result.additional_urls] == ["2-a.jpg", "3-b.jpg"]
    assert len(result.additional_thumbnail_urls) == 2
    assert result.named_urls["mobile"].endswith("4-mobile.jpg")
    assert uploader.calls == [
        ("cover.jpg", "products"),
        ("a.jpg", "products"),
        ("b.jpg", "products"),
        ("mobile.jpg", "products"),
    ]
    assert all(resource.status is ResourceStatus.UPLOADED for resource in manager.additional)
    assert not manager.is_uploading


@pytest.mark.asyncio
async def test_upload_all_deduplicates_same_file_instance(
    manager: PendingResourceManager, uploader: StubUploader
) -> None:
    shared = make_file("shared.jpg")
    manager.register_primary(shared)
    manager.register_additional([shared])

    result = await manager.upload_all("blogs")

    assert len(uploader.calls) == 1
    assert result.primary_url == result.additional_urls[0]


@pytest.mark.asyncio
async def test_upload_all_does_not_deduplicate_equal_but_distinct_files(
    manager: PendingResourceManager, uploader: StubUploader
) -> None:
    manager.register_primary(make_file("same.jpg"))
    manager.register_additional([make_file("same.jpg")])

    await manager.upload_all("blogs")

    assert len(uploader.calls) == 2


@pytest.mark.asyncio
async def test_upload_all_fails_fast_and_rolls_back(previews: InMemoryPreviewHandles) -> None:
    uploader = StubUploader(fail_on={"c.jpg"})
    manager = build_manager(uploader, previews=previews)
    primary = manager.register_primary(make_file("cover.jpg"))
    manager.register_additional(
        [make_file("a.jpg", size=1), make_file("b.jpg", size=2), make_file("c.jpg", size=3)]
    )

    with pytest.raises(UploadFailed) as exc_info:
        await manager.upload_all("products")

    failing = manager.additional[2]
    assert isinstance(exc_info.value.__cause__, UploadError)
    assert exc_info.value.resource_id == failing.id
    assert failing.status is ResourceStatus.FAILED
    assert failing.error_message
    assert primary.status is ResourceStatus.PENDING
    assert primary.uploaded_url is None
    assert [resource.status for resource in manager.additional[:2]] == [
        ResourceStatus.PENDING,
        ResourceStatus.PENDING,
    ]
    assert [name for name, _ in uploader.calls] == ["cover.jpg", "a.jpg", "b.jpg", "c.jpg"]
    assert manager.pending_count == 4
    assert previews.revoked == []
    assert not manager.is_uploading


@pytest.mark.asyncio
async def test_upload_all_reuses_urls_stored_by_earlier_call(
    manager: PendingResourceManager, uploader: StubUploader
) -> None:
    manager.register_primary(make_file("cover.jpg"))
    first = await manager.upload_all("products")

    manager.register_additional([make_file("a.jpg")])
    second = await manager.upload_all("products")

    assert second.primary_url == first.primary_url
    assert [name for name, _ in uploader.calls] == ["cover.jpg", "a.jpg"]


@pytest.mark.asyncio
async def test_upload_all_sends_variant_images_to_variants_folder(
    manager: PendingResourceManager, uploader: StubUploader
) -> None:
    manager.register_named("variant:v1", make_file("red.jpg"))
    manager.register_named("mobile", make_file("m.jpg"))

    result = await manager.upload_all("products/")

    assert ("red.jpg", "products/variants") in uploader.calls
    assert ("m.jpg", "products/") in uploader.calls
    assert set(result.named_urls) == {"variant:v1", "mobile"}


@pytest.mark.asyncio
async def test_upload_all_with_nothing_pending_is_empty(
    manager: PendingResourceManager, uploader: StubUploader
) -> None:
    result = await manager.upload_all("products")

    assert result.is_empty
    assert uploader.calls == []


@pytest.mark.asyncio
async def test_release_all_during_upload_does_not_cancel(
    previews: InMemoryPreviewHandles,
) -> None:
    uploader = StubUploader(gate=asyncio.Event())
    manager = build_manager(uploader, previews=previews)
    manager.register_primary(make_file("cover.jpg"))

    task = asyncio.create_task(manager.upload_all("products"))
    await asyncio.sleep(0)
    assert manager.is_uploading

    manager.release_all()
    assert previews.outstanding == []

    uploader.gate.set()
    result = await task

    assert result.primary_url is not None
    assert not manager.is_uploading


@pytest.mark.asyncio
async def test_upload_result_lists_stored_resource_ids(
    manager: PendingResourceManager,
) -> None:
    primary = manager.register_primary(make_file("cover.jpg"))
    extra = manager.register_additional([make_file("a.jpg")]).accepted[0]

    result = await manager.upload_all("products")

    assert result.resource_ids == (primary.id, extra.id)


def test_collect_skips_resources_without_url(manager: PendingResourceManager) -> None:
    pending = manager.register_additional([make_file("a.jpg")]).accepted[0]

    result = PendingResourceManager._collect([pending])

    assert result.is_empty
    assert result.additional_urls == []
    assert result.resource_ids == ()
