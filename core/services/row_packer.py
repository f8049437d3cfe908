"""Justified row packing for gallery thumbnails.

Images are packed greedily, in order, into rows that span the container
width at a shared height. A row is closed as soon as its fill height drops
to or below the height ceiling; whatever is left at the end of the sequence
becomes a trailing row rendered at the ceiling height.
"""

from __future__ import annotations

from collections.abc import Iterable
import math

from core.errors import InvalidImageDimensions
from core.models import Image, Row, RowItem


def validate_image(image: Image) -> float:
    """Return the aspect ratio of `image`, raising if it is unusable.

    Width and height must be finite and strictly positive.
    """
    for label, value in (("width", image.width), ("height", image.height)):
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise InvalidImageDimensions(image, f"{label} is not a number")
        if not math.isfinite(value) or value <= 0:
            raise InvalidImageDimensions(image, f"{label} must be finite and > 0, got {value}")
    aspect = image.width / image.height
    if not math.isfinite(aspect) or aspect <= 0:
        raise InvalidImageDimensions(image, f"aspect ratio {aspect} is unusable")
    return aspect


def _build_row(
    working_set: list[tuple[Image, float]], height: float, is_trailing: bool = False
) -> Row:
    items = tuple(RowItem(image=img, render_width=aspect * height) for img, aspect in working_set)
    return Row(items=items, render_height=height, is_trailing=is_trailing)


def pack(container_width: float, height_ceiling: float, images: Iterable[Image]) -> list[Row]:
    """Pack `images` into justified rows.

    Args:
        container_width: Width every full row should span. Values <= 0 never
            fill a row, so all images land in one trailing row.
        height_ceiling: Maximum row height; also the height of the trailing row.
        images: Images in display order.

    Returns:
        Rows in display order. Concatenating their images reproduces `images`.

    Raises:
        InvalidImageDimensions: If an image has a non-positive or non-finite size.
        ValueError: If `height_ceiling` is not positive and finite, or
            `container_width` is NaN or infinite.
    """
    if not math.isfinite(height_ceiling) or height_ceiling <= 0:
        raise ValueError(f"height_ceiling must be finite and > 0, got {height_ceiling}")
    if not math.isfinite(container_width):
        raise ValueError(f"container_width must be finite, got {container_width}")

    sequence = list(images)
    rows: list[Row] = []
    working_set: list[tuple[Image, float]] = []
    aspect_sum = 0.0
    last_idx = len(sequence) - 1

    for idx, image in enumerate(sequence):
        aspect = validate_image(image)
        aspect_sum += aspect
        working_set.append((image, aspect))

        # A zero or negative container can never be filled
        if container_width > 0 and container_width / aspect_sum <= height_ceiling:
            rows.append(_build_row(working_set, container_width / aspect_sum))
            working_set = []
            aspect_sum = 0.0
        elif idx == last_idx:
            rows.append(_build_row(working_set, height_ceiling, is_trailing=True))

    return rows
