from __future__ import annotations

import asyncio

import pytest

from catalog_forms.core.config import EngineConfig
from catalog_forms.resources import (
    InMemoryPreviewHandles,
    ResourceStatus,
    UploadFailed,
    UploadResult,
)
from catalog_forms.session import (
    BLOG_IMAGE_FIELDS,
    PRODUCT_IMAGE_FIELDS,
    Conflict,
    FormSession,
    ImageFieldMap,
    SaveFailed,
)
from catalog_forms.snapshots import BLOG_PROJECTION, PRODUCT_PROJECTION
from tests.helpers.stubs import StubPersistence, StubUploader, build_manager, make_file

pytestmark = pytest.mark.unit


class RecordingUploader(StubUploader):
    def __init__(self, events: list[str], **kwargs) -> None:
        super().__init__(**kwargs)
        self.events = events

    async def upload(self, file, folder):
        self.events.append(f"upload:{file.name}")
        return await super().upload(file, folder)


def build_session(
    *,
    uploader: StubUploader | None = None,
    persistence: StubPersistence | None = None,
    previews: InMemoryPreviewHandles | None = None,
    image_fields: ImageFieldMap = PRODUCT_IMAGE_FIELDS,
) -> FormSession:
    return FormSession(
        projection=PRODUCT_PROJECTION,
        resources=build_manager(uploader or StubUploader(), previews=previews),
        persistence=persistence or StubPersistence(),
        image_fields=image_fields,
        destination_folder="products",
    )


def test_load_captures_baseline() -> None:
    session = build_session()
    session.load({"id": 42, "productTitle": "Mug", "tags": ["a", "b"]})

    assert session.entity_id == "42"
    assert not session.is_dirty

    session.update_field("tags", ["b", "a"])
    assert not session.is_dirty

    session.update_field("productTitle", "Cup")
    assert session.is_dirty
    assert session.changed_fields() == ["productTitle"]


def test_has_unsaved_work_includes_pending_resources() -> None:
    session = build_session()
    session.load({"productTitle": "Mug"})

    assert not session.has_unsaved_work

    session.resources.register_primary(make_file("cover.jpg"))

    assert not session.is_dirty
    assert session.has_unsaved_work


def test_collection_edits_flow_through_working_copy() -> None:
    session = build_session()
    session.load({"productVariants": []})
    variants = session.collection("productVariants", defaults={"optionName": ""})

    item = variants.add(optionValue="Red")

    assert session.get("productVariants") == [item]
    assert session.is_dirty
    assert variants.controller.expanded_id == item["id"]
    assert session.collection("productVariants") is variants


def test_removing_item_drops_its_pending_image() -> None:
    previews = InMemoryPreviewHandles()
    session = build_session(previews=previews)
    session.load({"productVariants": [{"id": "v1"}, {"id": "v10"}]})
    slot = session.item_slot("productVariants", "v1")
    session.resources.register_named(slot, make_file("red.jpg"))
    session.resources.register_named(session.item_slot("productVariants", "v10"), make_file("x.jpg"))

    session.collection("productVariants").remove("v1")

    assert list(session.resources.named) == ["variant:v10"]
    assert len(previews.revoked) == 1


@pytest.mark.asyncio
async def test_submit_uploads_before_saving_and_merges_urls() -> None:
    events: list[str] = []
    uploader = RecordingUploader(events)
    persistence = StubPersistence(events=events)
    previews = InMemoryPreviewHandles()
    session = build_session(uploader=uploader, persistence=persistence, previews=previews)
    session.load({"productTitle": "Mug", "additionalImages": ["https://old/1.jpg"], "productVariants": [{"id": "v1"}]})
    session.resources.register_primary(make_file("cover.jpg"))
    session.resources.register_additional([make_file("a.jpg")], existing_count=1)
    session.resources.register_named("variant:v1", make_file("red.jpg"))

    saved = await session.submit()

    assert events == ["upload:cover.jpg", "upload:a.jpg", "upload:red.jpg", "create"]
    payload = persistence.created[0]
    assert payload["primaryImage"].endswith("cover.jpg")
    assert payload["additionalImages"][0] == "https://old/1.jpg"
    assert payload["additionalImages"][1].endswith("a.jpg")
    assert payload["productVariants"][0]["image"].endswith("products/variants/3-red.jpg")
    assert saved["id"] == "entity-1"
    assert session.entity_id == "entity-1"
    assert not session.is_dirty
    assert not session.resources.has_pending
    assert previews.outstanding == []


@pytest.mark.asyncio
async def test_submit_updates_existing_entity() -> None:
    persistence = StubPersistence()
    session = build_session(persistence=persistence)
    session.load({"id": "p-7", "productTitle": "Mug"})
    session.update_field("productTitle", "Cup")

    await session.submit()

    assert persistence.updated == [("p-7", {"id": "p-7", "productTitle": "Cup"})]
    assert not session.is_dirty


@pytest.mark.asyncio
async def test_upload_failure_leaves_session_intact() -> None:
    persistence = StubPersistence()
    session = build_session(uploader=StubUploader(fail_on={"b.jpg"}), persistence=persistence)
    session.load({"productTitle": "Mug"})
    session.update_field("productTitle", "Cup")
    session.resources.register_additional([make_file("a.jpg", size=1), make_file("b.jpg", size=2)])

    with pytest.raises(UploadFailed):
        await session.submit()

    assert persistence.created == []
    assert session.is_dirty
    assert session.get("productTitle") == "Cup"
    assert session.resources.pending_count == 2
    assert not session.is_saving


@pytest.mark.asyncio
async def test_save_failure_is_retryable_without_reupload() -> None:
    uploader = StubUploader()
    persistence = StubPersistence(failure=Conflict("slug taken", status_code=409))
    session = build_session(uploader=uploader, persistence=persistence)
    session.load({"productTitle": "Mug"})
    primary = session.resources.register_primary(make_file("cover.jpg"))

    with pytest.raises(SaveFailed) as exc_info:
        await session.submit()

    assert exc_info.value.category == "conflict"
    assert exc_info.value.status_code == 409
    assert session.resources.primary is primary
    assert primary.status is ResourceStatus.UPLOADED
    assert session.get("primaryImage") is None
    assert session.has_unsaved_work

    persistence.failure = None
    saved = await session.submit()

    assert len(uploader.calls) == 1
    assert saved["primaryImage"] == primary.uploaded_url


@pytest.mark.asyncio
async def test_concurrent_submit_is_ignored() -> None:
    uploader = StubUploader(gate=asyncio.Event())
    persistence = StubPersistence()
    session = build_session(uploader=uploader, persistence=persistence)
    session.load({"productTitle": "Mug"})
    session.resources.register_primary(make_file("cover.jpg"))

    first = asyncio.create_task(session.submit())
    await asyncio.sleep(0)

    assert session.is_saving
    assert await session.submit() is None

    uploader.gate.set()
    assert await first is not None
    assert len(persistence.created) == 1
    assert not session.is_saving


@pytest.mark.asyncio
async def test_file_attached_during_upload_stays_pending() -> None:
    uploader = StubUploader(gate=asyncio.Event())
    previews = InMemoryPreviewHandles()
    persistence = StubPersistence()
    session = build_session(uploader=uploader, persistence=persistence, previews=previews)
    session.load({"productTitle": "Mug"})
    cover = session.resources.register_primary(make_file("cover.jpg"))

    task = asyncio.create_task(session.submit())
    await asyncio.sleep(0)
    late = session.resources.register_additional([make_file("late.jpg")]).accepted[0]

    uploader.gate.set()
    saved = await task

    assert "additionalImages" not in saved
    assert session.resources.get(late.id) is late
    assert late.status is ResourceStatus.PENDING
    assert session.resources.primary is None
    assert previews.revoked == [cover.preview_handle]
    assert previews.outstanding == [late.preview_handle]
    assert session.has_unsaved_work
    assert [name for name, _ in uploader.calls] == ["cover.jpg"]


@pytest.mark.asyncio
async def test_field_edited_during_save_stays_dirty() -> None:
    persistence = StubPersistence(gate=asyncio.Event())
    session = build_session(persistence=persistence)
    session.load({"id": "p-7", "productTitle": "Mug"})
    session.update_field("productTitle", "Cup")

    task = asyncio.create_task(session.submit())
    await asyncio.sleep(0)
    assert session.is_saving
    session.update_field("sku", "SKU-9")

    persistence.gate.set()
    await task

    assert persistence.updated == [("p-7", {"id": "p-7", "productTitle": "Cup"})]
    assert session.get("sku") == "SKU-9"
    assert session.get("productTitle") == "Cup"
    assert session.is_dirty
    assert session.changed_fields() == ["sku"]


@pytest.mark.asyncio
async def test_navigation_guard_tracks_session_state() -> None:
    uploader = StubUploader(gate=asyncio.Event())
    session = build_session(uploader=uploader)
    session.load({"productTitle": "Mug"})
    guard = session.navigation_guard()

    assert not guard.should_block("/products/1", "/products")

    session.update_field("productTitle", "Cup")
    assert guard.should_block("/products/1", "/products")
    assert not guard.should_block("/products/1", "/products/1")

    session.resources.register_primary(make_file("cover.jpg"))

    task = asyncio.create_task(session.submit())
    await asyncio.sleep(0)
    assert not guard.should_block("/products/1", "/products")

    uploader.gate.set()
    await task
    assert not guard.should_block("/products/1", "/products")


def test_blog_mobile_image_maps_to_named_field() -> None:
    session = FormSession(
        projection=BLOG_PROJECTION,
        resources=build_manager(),
        persistence=StubPersistence(),
        image_fields=BLOG_IMAGE_FIELDS,
    )
    uploads = UploadResult(
        primary_url="https://cdn/pc.jpg",
        named_urls={"mobile": "https://cdn/m.jpg", "subsection:s1": "https://cdn/s1.jpg"},
    )

    payload = session._merge({"subsections": [{"id": "s1"}, {"id": "s2"}]}, uploads)

    assert payload["mainImagePC"] == "https://cdn/pc.jpg"
    assert payload["mainImageMobile"] == "https://cdn/m.jpg"
    assert payload["subsections"] == [{"id": "s1", "image": "https://cdn/s1.jpg"}, {"id": "s2"}]


def test_build_wires_config_limits() -> None:
    config = EngineConfig(max_additional_images=2, collection_page_size=3)
    session = FormSession.build(
        PRODUCT_PROJECTION,
        uploader=StubUploader(),
        persistence=StubPersistence(),
        config=config,
    )

    result = session.resources.register_additional(
        [make_file(f"{index}.jpg", size=index + 1) for index in range(3)]
    )

    assert len(result.accepted) == 2
    assert session.page_size == 3
    assert session.collection("faqs").controller.page_size == 3


def test_close_releases_preview_handles() -> None:
    previews = InMemoryPreviewHandles()
    with build_session(previews=previews) as session:
        session.resources.register_primary(make_file("cover.jpg"))

    assert previews.outstanding == []
