"""Abstract interface for medicine image storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ImageUpload:
    """Raw image bytes as received from the client."""

    data: bytes
    filename: str
    content_type: str | None = None


class IImageStore(ABC):
    """Durable storage for medicine images."""

    @abstractmethod
    async def upload(self, image: ImageUpload) -> str:
        """
        Persist the image and return its public URL.

        Raises ImageUploadFailedError on any storage failure.
        """
        pass

    @abstractmethod
    async def delete(self, url: str) -> bool:
        """Remove a previously uploaded image. Returns False if nothing was removed."""
        pass
