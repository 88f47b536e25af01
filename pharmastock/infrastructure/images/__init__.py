"""Medicine image storage."""

from pharmastock.infrastructure.images.local_store import LocalImageStore, get_image_store

__all__ = ["LocalImageStore", "get_image_store"]
