"""Image rendition loading from the gallery server.

Bytes come from `GalleryClient`; decoding is left to Qt. Nothing is cached
here; Qt and the server's cache headers handle reuse.
"""

from __future__ import annotations

from PySide6.QtGui import QImage
from loguru import logger

from infrastructure.gallery_client import GalleryClient, GalleryLoadError


class ImageService:
    """Fetches thumbnail and preview renditions and decodes them to `QImage`."""

    def __init__(self, client: GalleryClient) -> None:
        self._client = client

    def get_thumbnail(self, image_hash: str) -> QImage | None:
        """Return the thumbnail rendition for `image_hash`, or None on failure."""
        return self._get_image(image_hash, "thumb")

    def get_preview(self, image_hash: str) -> QImage | None:
        """Return the preview rendition for `image_hash`, or None on failure."""
        return self._get_image(image_hash, "preview")

    def _get_image(self, image_hash: str, size: str) -> QImage | None:
        try:
            data = self._client.fetch_image(image_hash, size)
        except GalleryLoadError as ex:
            logger.warning("Fetching {} {} failed: {}", size, image_hash, ex)
            return None
        img = QImage.fromData(data)
        if img.isNull():
            logger.warning("Could not decode {} {} ({} bytes)", size, image_hash, len(data))
            return None
        return img
