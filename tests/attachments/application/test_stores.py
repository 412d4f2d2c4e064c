from pathlib import Path
from urllib.parse import urlparse

import pytest
from backoffice.attachments.fake_adapter import AttachmentUnavailable, FakeAttachmentStore
from backoffice.attachments.local_adapter import LocalDirectoryStore


class TestFakeAttachmentStore:
    async def test_store_keeps_extension(self):
        store = FakeAttachmentStore()
        locator = await store.store(b"data", "photos/milk.JPG")
        assert locator.startswith("memory://attachments/")
        assert locator.endswith(".JPG")

    async def test_each_store_gets_fresh_locator(self):
        store = FakeAttachmentStore()
        assert await store.store(b"a", "x.png") != await store.store(b"a", "x.png")

    async def test_remove(self):
        store = FakeAttachmentStore()
        locator = await store.store(b"data", "a.png")
        assert await store.remove(locator) is True
        assert await store.remove(locator) is False

    async def test_configured_failure(self):
        store = FakeAttachmentStore()
        store.configure(should_succeed=False, failure_reason="bucket gone")
        with pytest.raises(AttachmentUnavailable, match="bucket gone"):
            await store.store(b"data", "a.png")


class TestLocalDirectoryStore:
    async def test_store_writes_file(self, tmp_path):
        store = LocalDirectoryStore(tmp_path / "images")
        locator = await store.store(b"\x89PNG", "milk.png")

        assert locator.startswith("file://")
        path = Path(urlparse(locator).path)
        assert path.parent == (tmp_path / "images").resolve()
        assert path.suffix == ".png"
        assert path.read_bytes() == b"\x89PNG"

    async def test_remove_deletes_file(self, tmp_path):
        store = LocalDirectoryStore(tmp_path)
        locator = await store.store(b"x", "a.txt")

        assert await store.remove(locator) is True
        assert list(tmp_path.iterdir()) == []
        assert await store.remove(locator) is False

    async def test_remove_stays_inside_directory(self, tmp_path):
        outside = tmp_path / "outside.txt"
        outside.write_text("keep me")
        store = LocalDirectoryStore(tmp_path / "images")

        assert await store.remove(outside.as_uri()) is False
        assert outside.exists()
