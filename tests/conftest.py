import os

import pytest

# Widget tests run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.models import Gallery, Image, SubGallery  # noqa: E402


# --- Helper fixtures for building galleries -----------------------------------
@pytest.fixture()
def make_image():
    counter = {"n": 0}

    def _mk(width: float = 100, height: float = 100, name: str | None = None) -> Image:
        counter["n"] += 1
        n = counter["n"]
        return Image(hash=f"hash{n:04d}", width=width, height=height, name=name or f"img{n}.jpg")

    return _mk


@pytest.fixture()
def three_images(make_image):
    """Aspect ratios 1, 2 and 0.5."""
    return [make_image(100, 100), make_image(200, 100), make_image(100, 200)]


@pytest.fixture()
def sample_gallery(three_images):
    return Gallery(
        name="Holidays",
        images=tuple(three_images),
        sub_galleries=(
            SubGallery(name="2019", path="holidays/2019"),
            SubGallery(name="2020", path="holidays/2020"),
        ),
        parent="",
    )
