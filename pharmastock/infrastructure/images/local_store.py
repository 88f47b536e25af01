"""Filesystem-backed image store served under the media URL."""

import asyncio
import mimetypes
import uuid
from pathlib import Path

from pharmastock.config import get_logger, get_settings
from pharmastock.core.exceptions import ImageUploadFailedError, InvalidImageError
from pharmastock.core.interfaces.image_store import IImageStore, ImageUpload

logger = get_logger(__name__)


class LocalImageStore(IImageStore):
    """
    Writes medicine images under ``storage.image_dir``.

    Files get a random name keeping the upload's extension; the returned URL
    is ``{api.media_url}/{name}``.
    """

    def __init__(
        self,
        image_dir: Path | None = None,
        media_url: str | None = None,
        max_size: int | None = None,
        allowed_types: list[str] | None = None,
    ):
        settings = get_settings()
        self.image_dir = image_dir or settings.storage.image_dir
        self.media_url = (media_url or settings.api.media_url).rstrip("/")
        self.max_size = max_size or settings.api.max_image_size
        self.allowed_types = allowed_types or settings.api.allowed_image_types

    def _validate(self, image: ImageUpload) -> str:
        """Check the upload and return the content type to store it under."""
        if not image.data:
            raise InvalidImageError(image.filename, "file is empty")
        if len(image.data) > self.max_size:
            raise InvalidImageError(
                image.filename,
                f"file exceeds {self.max_size // (1024 * 1024)} MB limit",
            )

        content_type = image.content_type or mimetypes.guess_type(image.filename)[0]
        if content_type not in self.allowed_types:
            raise InvalidImageError(
                image.filename,
                f"unsupported type {content_type or 'unknown'}",
            )
        return content_type

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def upload(self, image: ImageUpload) -> str:
        content_type = self._validate(image)

        suffix = Path(image.filename).suffix.lower() or (
            mimetypes.guess_extension(content_type) or ""
        )
        name = f"{uuid.uuid4().hex}{suffix}"
        path = self.image_dir / name

        try:
            await asyncio.to_thread(self._write, path, image.data)
        except OSError as e:
            logger.error("image_upload_failed", filename=image.filename, error=str(e))
            raise ImageUploadFailedError(image.filename, str(e)) from e

        logger.info("image_stored", filename=image.filename, path=str(path), size=len(image.data))
        return f"{self.media_url}/{name}"

    def _path_for(self, url: str) -> Path | None:
        prefix = f"{self.media_url}/"
        if not url.startswith(prefix):
            return None
        name = url[len(prefix) :]
        if not name or "/" in name or name.startswith("."):
            return None
        return self.image_dir / name

    async def delete(self, url: str) -> bool:
        path = self._path_for(url)
        if path is None:
            logger.warning("image_delete_skipped", url=url, reason="not a local media url")
            return False

        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("image_delete_failed", url=url, error=str(e))
            return False

        logger.info("image_deleted", url=url)
        return True


_image_store: LocalImageStore | None = None


def get_image_store() -> LocalImageStore:
    """Get singleton image store instance."""
    global _image_store
    if _image_store is None:
        _image_store = LocalImageStore()
    return _image_store
