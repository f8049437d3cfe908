"""Lightbox navigation state and viewport fitting.

The navigator is a two-state machine over a fixed image sequence:
closed (no image) or open at an index. Next/previous wrap around the
sequence and are no-ops while closed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.errors import ImageNotInSequence
from core.models import FitSize, Image

DEFAULT_WIDTH_RATIO = 0.75
DEFAULT_HEIGHT_RATIO = 0.9
DEFAULT_SHRINK_DECAY = 0.99


@dataclass(frozen=True)
class FitPolicy:
    """Margins and shrink strategy for fitting an image into the lightbox.

    Attributes:
        width_ratio: Share of the viewport width available to the image.
        height_ratio: Share of the viewport height available to the image.
        shrink_decay: Per-step factor of the iterative shrink.
        iterative: Use the step-wise shrink instead of the closed-form scale.
    """

    width_ratio: float = DEFAULT_WIDTH_RATIO
    height_ratio: float = DEFAULT_HEIGHT_RATIO
    shrink_decay: float = DEFAULT_SHRINK_DECAY
    iterative: bool = False

    def __post_init__(self) -> None:
        if not 0 < self.width_ratio <= 1 or not 0 < self.height_ratio <= 1:
            raise ValueError("width_ratio and height_ratio must be in (0, 1]")
        if not 0 < self.shrink_decay < 1:
            raise ValueError("shrink_decay must be in (0, 1)")


def fit_to_viewport(
    img_width: float,
    img_height: float,
    box_width: float,
    box_height: float,
    policy: FitPolicy | None = None,
) -> FitSize:
    """Shrink (never grow) an image so it fits the lightbox's available area.

    A box with a zero dimension has not been measured yet; the intrinsic size
    is returned unchanged in that case.
    """
    policy = policy or FitPolicy()
    if box_width <= 0 or box_height <= 0 or img_width <= 0 or img_height <= 0:
        return FitSize(img_width, img_height)

    max_w = policy.width_ratio * box_width
    max_h = policy.height_ratio * box_height

    if policy.iterative:
        width, height = float(img_width), float(img_height)
        while width > max_w or height > max_h:
            width *= policy.shrink_decay
            height *= policy.shrink_decay
        return FitSize(width, height)

    scale = min(1.0, max_w / img_width, max_h / img_height)
    return FitSize(img_width * scale, img_height * scale)


class LightboxNavigator:
    """Tracks which image of a fixed sequence the lightbox shows, if any."""

    def __init__(self, images: Sequence[Image] = ()) -> None:
        self._images: tuple[Image, ...] = tuple(images)
        self._current_index: int | None = None

    def __len__(self) -> int:
        return len(self._images)

    @property
    def images(self) -> tuple[Image, ...]:
        return self._images

    @property
    def current_index(self) -> int | None:
        return self._current_index

    @property
    def is_open(self) -> bool:
        return self._current_index is not None

    @property
    def selected_image(self) -> Image | None:
        if self._current_index is None:
            return None
        return self._images[self._current_index]

    def open(self, image: Image) -> Image:
        """Open the lightbox on `image`.

        Raises:
            ImageNotInSequence: If `image` is not part of the sequence.
        """
        try:
            index = self._images.index(image)
        except ValueError as ex:
            raise ImageNotInSequence(image) from ex
        self._current_index = index
        return image

    def open_index(self, index: int) -> Image:
        """Open the lightbox at position `index` of the sequence."""
        if not 0 <= index < len(self._images):
            raise IndexError(f"lightbox index out of range: {index}")
        self._current_index = index
        return self._images[index]

    def close(self) -> None:
        self._current_index = None

    def next(self) -> Image | None:
        """Advance to the following image, wrapping to the first."""
        return self._step(1)

    def previous(self) -> Image | None:
        """Go back to the preceding image, wrapping to the last."""
        return self._step(-1)

    def _step(self, delta: int) -> Image | None:
        length = len(self._images)
        if self._current_index is None or length == 0:
            return self.selected_image
        self._current_index = (self._current_index + delta + length) % length
        return self._images[self._current_index]
