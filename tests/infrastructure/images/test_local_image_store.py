"""Tests for LocalImageStore."""

from unittest.mock import patch

import pytest

from pharmastock.core.exceptions import ImageUploadFailedError, InvalidImageError
from pharmastock.core.interfaces.image_store import ImageUpload
from pharmastock.infrastructure.images.local_store import LocalImageStore


@pytest.fixture
def store(tmp_path):
    return LocalImageStore(image_dir=tmp_path / "images", media_url="/media/", max_size=1024)


class TestLocalImageStore:
    async def test_upload_writes_file(self, store, tmp_path):
        url = await store.upload(
            ImageUpload(data=b"png-bytes", filename="Panadol.PNG", content_type="image/png")
        )

        assert url.startswith("/media/")
        assert url.endswith(".png")
        name = url.rsplit("/", 1)[1]
        assert (tmp_path / "images" / name).read_bytes() == b"png-bytes"

    async def test_unique_names(self, store):
        image = ImageUpload(data=b"x", filename="a.jpg", content_type="image/jpeg")
        assert await store.upload(image) != await store.upload(image)

    async def test_type_guessed_from_filename(self, store):
        url = await store.upload(ImageUpload(data=b"x", filename="box.webp"))
        assert url.endswith(".webp")

    async def test_rejects_empty(self, store):
        with pytest.raises(InvalidImageError):
            await store.upload(ImageUpload(data=b"", filename="a.png", content_type="image/png"))

    async def test_rejects_oversize(self, store):
        with pytest.raises(InvalidImageError):
            await store.upload(
                ImageUpload(data=b"x" * 1025, filename="a.png", content_type="image/png")
            )

    async def test_rejects_disallowed_type(self, store):
        with pytest.raises(InvalidImageError) as exc_info:
            await store.upload(
                ImageUpload(data=b"%PDF", filename="a.pdf", content_type="application/pdf")
            )
        assert exc_info.value.details["filename"] == "a.pdf"

    async def test_write_failure(self, store):
        image = ImageUpload(data=b"x", filename="a.png", content_type="image/png")
        with patch.object(store, "_write", side_effect=OSError("read-only file system")):
            with pytest.raises(ImageUploadFailedError):
                await store.upload(image)

    def test_defaults_from_settings(self):
        store = LocalImageStore()
        assert store.media_url == "/media"
        assert store.image_dir.name == "images"
        assert "image/png" in store.allowed_types

    async def test_delete_removes_file(self, store, tmp_path):
        url = await store.upload(ImageUpload(data=b"x", filename="a.png", content_type="image/png"))
        name = url.rsplit("/", 1)[1]

        assert await store.delete(url) is True
        assert not (tmp_path / "images" / name).exists()

    async def test_delete_missing_file(self, store):
        assert await store.delete("/media/gone.png") is False

    @pytest.mark.parametrize(
        "url",
        ["https://cdn.example.com/a.png", "/media/../settings.db", "/media/nested/a.png"],
    )
    async def test_delete_ignores_foreign_urls(self, store, tmp_path, url):
        (tmp_path / "settings.db").write_bytes(b"keep")

        assert await store.delete(url) is False
        assert (tmp_path / "settings.db").exists()
