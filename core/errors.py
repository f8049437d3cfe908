"""Domain exceptions shared by the core services."""

from __future__ import annotations


class GalleryError(Exception):
    """Base class for gallery viewer errors."""


class InvalidImageDimensions(GalleryError, ValueError):
    """An image has a non-finite or non-positive width, height or aspect ratio."""

    def __init__(self, image: object, reason: str) -> None:
        self.image = image
        self.reason = reason
        super().__init__(f"Invalid image dimensions for {image!r}: {reason}")


class ImageNotInSequence(GalleryError, LookupError):
    """The lightbox was asked to open an image its sequence does not contain."""

    def __init__(self, image: object) -> None:
        self.image = image
        super().__init__(f"Image not in lightbox sequence: {image!r}")
