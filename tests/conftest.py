from __future__ import annotations

import pytest

from catalog_forms.resources import InMemoryPreviewHandles, PendingResourceManager
from tests.helpers.stubs import StubUploader, build_manager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CATALOG_FORMS_MAX_FILE_SIZE_MB",
        "CATALOG_FORMS_MAX_ADDITIONAL_IMAGES",
        "CATALOG_FORMS_COLLECTION_PAGE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def uploader() -> StubUploader:
    return StubUploader()


@pytest.fixture
def previews() -> InMemoryPreviewHandles:
    return InMemoryPreviewHandles()


@pytest.fixture
def manager(uploader: StubUploader, previews: InMemoryPreviewHandles) -> PendingResourceManager:
    return build_manager(uploader, previews=previews)
