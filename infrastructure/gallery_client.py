"""HTTP access to the gallery server.

The server exposes gallery descriptions at ``/gallery/{path}`` and image
renditions at ``/image/{hash}/{size}`` where size is ``thumb`` or ``preview``.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from core.errors import GalleryError, InvalidImageDimensions
from core.models import Gallery, Image, SubGallery
from core.services.gallery_paths import normalize_path
from core.services.row_packer import validate_image

IMAGE_SIZES = ("thumb", "preview")


class GalleryLoadError(GalleryError):
    """Fetching or decoding a gallery or image from the server failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


def _parse_image(raw: Any) -> Image:
    if not isinstance(raw, dict):
        raise GalleryLoadError(f"Image entry is not an object: {raw!r}")
    try:
        image = Image(
            hash=str(raw["hash"]),
            width=float(raw["width"]),
            height=float(raw["height"]),
            name=str(raw.get("name") or ""),
        )
    except (KeyError, TypeError, ValueError) as ex:
        raise GalleryLoadError(f"Malformed image entry {raw!r}: {ex}") from ex
    try:
        validate_image(image)
    except InvalidImageDimensions as ex:
        raise GalleryLoadError(str(ex)) from ex
    return image


def _parse_sub_gallery(raw: Any) -> SubGallery:
    try:
        return SubGallery(name=str(raw["name"]), path=str(raw["path"]))
    except (KeyError, TypeError) as ex:
        raise GalleryLoadError(f"Malformed sub-gallery entry {raw!r}: {ex}") from ex


def parse_gallery(data: Any) -> Gallery:
    """Build a `Gallery` from the server's JSON payload."""
    if not isinstance(data, dict):
        raise GalleryLoadError("Gallery payload is not an object")
    images = data.get("images") or []
    sub_galleries = data.get("sub_galleries") or []
    if not isinstance(images, list) or not isinstance(sub_galleries, list):
        raise GalleryLoadError("Gallery 'images' and 'sub_galleries' must be lists")
    parent = data.get("parent")
    return Gallery(
        name=str(data.get("name") or ""),
        images=tuple(_parse_image(it) for it in images),
        sub_galleries=tuple(_parse_sub_gallery(it) for it in sub_galleries),
        parent=str(parent) if parent is not None else None,
    )


class GalleryClient:
    """Thin synchronous client for the gallery server, built on httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self._base_url, timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def gallery_url(self, path: str) -> str:
        return f"{self._base_url}/gallery/{quote(normalize_path(path))}"

    def image_url(self, image_hash: str, size: str = "thumb") -> str:
        if size not in IMAGE_SIZES:
            raise ValueError(f"Unknown image size {size!r}; expected one of {IMAGE_SIZES}")
        return f"{self._base_url}/image/{quote(image_hash, safe='')}/{size}"

    def thumbnail_url(self, image_hash: str) -> str:
        return self.image_url(image_hash, "thumb")

    def preview_url(self, image_hash: str) -> str:
        return self.image_url(image_hash, "preview")

    def fetch_gallery(self, path: str) -> Gallery:
        """GET the gallery at `path` and parse it.

        Raises:
            GalleryLoadError: On transport errors, non-2xx responses or bad payloads.
        """
        url = self.gallery_url(path)
        try:
            response = self._client.get(url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as ex:
            raise GalleryLoadError(
                f"Gallery {path!r} returned HTTP {ex.response.status_code}", path
            ) from ex
        except httpx.HTTPError as ex:
            raise GalleryLoadError(f"Gallery {path!r} request failed: {ex}", path) from ex
        except ValueError as ex:
            raise GalleryLoadError(f"Gallery {path!r} returned invalid JSON: {ex}", path) from ex

        try:
            gallery = parse_gallery(data)
        except GalleryLoadError as ex:
            ex.path = path
            raise
        logger.info(
            "Loaded gallery {!r}: {} images, {} sub-galleries",
            path,
            len(gallery.images),
            len(gallery.sub_galleries),
        )
        return gallery

    def fetch_image(self, image_hash: str, size: str = "thumb") -> bytes:
        """GET the raw bytes of an image rendition."""
        url = self.image_url(image_hash, size)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as ex:
            raise GalleryLoadError(f"Image {image_hash} ({size}) request failed: {ex}") from ex
        return response.content
