import math

import pytest

from core.errors import InvalidImageDimensions
from core.models import Image
from core.services.row_packer import pack, validate_image


def _flatten(rows):
    return [img for row in rows for img in row.images]


def test_mixed_aspects_fill_then_trail(three_images):
    rows = pack(600, 200, three_images)

    assert len(rows) == 2
    first, last = rows
    assert first.render_height == pytest.approx(200)
    assert [it.render_width for it in first.items] == pytest.approx([200, 400])
    assert not first.is_trailing

    assert last.is_trailing
    assert last.render_height == 200
    assert [it.render_width for it in last.items] == pytest.approx([100])


def test_empty_input_gives_no_rows():
    assert pack(800, 200, []) == []


def test_accepts_any_iterable(three_images):
    rows = pack(600, 200, iter(three_images))
    assert _flatten(rows) == three_images


@pytest.fixture()
def mixed_images(make_image):
    dims = [
        (4000, 3000), (3000, 4000), (1920, 1080), (1080, 1920), (500, 500),
        (6000, 2000), (800, 600), (600, 800), (1024, 768), (2000, 3000),
        (3000, 2000), (1200, 1200), (640, 480), (480, 640), (5000, 1000),
    ]
    return [make_image(w, h) for w, h in dims]


@pytest.mark.parametrize("container_width", [320, 640, 1000, 1366, 1920])
@pytest.mark.parametrize("ceiling", [120, 200, 333.3])
def test_full_rows_fill_container(mixed_images, container_width, ceiling):
    rows = pack(container_width, ceiling, mixed_images)

    for row in rows:
        if row.is_trailing:
            continue
        assert row.total_width == pytest.approx(container_width)
        assert row.render_height <= ceiling
        for item in row.items:
            # every image keeps its aspect ratio at the shared height
            assert item.render_width / row.render_height == pytest.approx(
                item.image.aspect_ratio
            )


@pytest.mark.parametrize("container_width", [0, 150, 999, 2500])
def test_order_is_preserved(mixed_images, container_width):
    rows = pack(container_width, 200, mixed_images)
    assert _flatten(rows) == mixed_images


def test_only_last_row_can_be_trailing(mixed_images):
    rows = pack(1000, 150, mixed_images)
    assert all(not row.is_trailing for row in rows[:-1])


def test_trailing_row_uses_ceiling_height(make_image):
    images = [make_image(100, 100), make_image(100, 100)]
    rows = pack(1000, 180, images)

    assert len(rows) == 1
    row = rows[0]
    assert row.is_trailing
    assert row.render_height == 180
    assert row.total_width == pytest.approx(360)
    assert row.total_width < 1000


def test_no_trailing_row_when_last_image_fills(make_image):
    images = [make_image(100, 100), make_image(100, 100)]
    rows = pack(400, 200, images)

    assert len(rows) == 1
    assert not rows[0].is_trailing
    assert rows[0].render_height == pytest.approx(200)


def test_zero_width_container_defers_everything_to_trailing_row(three_images):
    rows = pack(0, 200, three_images)

    assert len(rows) == 1
    assert rows[0].is_trailing
    assert rows[0].render_height == 200
    assert all(math.isfinite(it.render_width) for it in rows[0].items)


def test_negative_width_is_never_full(three_images):
    rows = pack(-50, 200, three_images)
    assert len(rows) == 1
    assert rows[0].render_height == 200


def test_wide_trailing_image_is_not_capped(make_image):
    panorama = make_image(1000, 100)
    rows = pack(0, 200, [panorama])

    assert rows[0].items[0].render_width == pytest.approx(2000)


def test_single_wide_image_fills_row_below_ceiling(make_image):
    rows = pack(300, 200, [make_image(400, 100)])

    assert len(rows) == 1
    assert rows[0].render_height == pytest.approx(75)
    assert rows[0].total_width == pytest.approx(300)


def test_all_images_in_row_share_height(mixed_images):
    for row in pack(1280, 200, mixed_images):
        heights = {it.render_width / it.image.aspect_ratio for it in row.items}
        assert all(h == pytest.approx(row.render_height) for h in heights)


@pytest.mark.parametrize(
    "width,height",
    [(0, 100), (100, 0), (-10, 100), (float("nan"), 100), (100, float("inf"))],
)
def test_invalid_dimensions_fail_fast(width, height):
    bad = Image(hash="bad", width=width, height=height)
    with pytest.raises(InvalidImageDimensions):
        pack(800, 200, [bad])


def test_invalid_image_after_valid_ones_still_raises(three_images):
    images = three_images + [Image(hash="bad", width=100, height=-1)]
    with pytest.raises(InvalidImageDimensions) as exc:
        pack(600, 200, images)
    assert exc.value.image.hash == "bad"


@pytest.mark.parametrize("ceiling", [0, -1, float("nan"), float("inf")])
def test_invalid_ceiling_is_rejected(three_images, ceiling):
    with pytest.raises(ValueError):
        pack(600, ceiling, three_images)


def test_non_finite_container_width_is_rejected(three_images):
    with pytest.raises(ValueError):
        pack(float("inf"), 200, three_images)


def test_validate_image_returns_aspect_ratio():
    assert validate_image(Image(hash="h", width=300, height=200)) == pytest.approx(1.5)
