import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QImage

from app.viewmodels.gallery_vm import GalleryVM
from app.views.directory_list import DirectoryList
from app.views.lightbox import Lightbox
from app.views.main_window import MainWindow
from app.views.thumbnail_rows import ThumbnailRows, pixel_widths
from core.models import FitSize, Image, Row, RowItem, SubGallery
from core.services.row_packer import pack
from infrastructure.gallery_client import GalleryLoadError


class FakeRunner:
    """Records requests instead of starting background tasks."""

    def __init__(self):
        self.thumbnails = []
        self.previews = []
        self.galleries = []

    def request_thumbnail(self, image_hash, generation):
        self.thumbnails.append(image_hash)
        return f"thumb|{generation}|{image_hash}"

    def request_preview(self, image_hash):
        self.previews.append(image_hash)
        return f"preview|{image_hash}"

    def request_gallery(self, path):
        self.galleries.append(path)


class FakeClient:
    def __init__(self, galleries):
        self._galleries = galleries

    def fetch_gallery(self, path):
        if path not in self._galleries:
            raise GalleryLoadError(f"Gallery {path!r} returned HTTP 404", path)
        return self._galleries[path]


class NullImageService:
    def get_thumbnail(self, image_hash):
        return None

    def get_preview(self, image_hash):
        return None


def _solid(width=10, height=10):
    img = QImage(width, height, QImage.Format_ARGB32)
    img.fill(QColor(10, 120, 200))
    return img


# --- Thumbnail rows -------------------------------------------------------------
def test_pixel_widths_keep_row_flush(make_image):
    a, b, c = make_image(), make_image(), make_image()
    row = Row(
        items=(RowItem(a, 200.4), RowItem(b, 199.7), RowItem(c, 199.9)),
        render_height=200.0,
    )
    widths = pixel_widths(row)
    assert sum(widths) == 600
    assert widths == [200, 200, 200]


def test_pixel_widths_share_gaps_across_row(three_images):
    full_row = pack(600, 200, three_images)[0]
    widths = pixel_widths(full_row, spacing=4)
    assert widths == [199, 397]
    assert sum(widths) + 4 * (len(widths) - 1) == 600


def test_show_rows_builds_labels(qtbot, three_images):
    runner = FakeRunner()
    widget = ThumbnailRows(None, runner)
    qtbot.addWidget(widget)

    widget.show_rows(pack(600, 200, three_images))

    labels = widget.labels()
    assert [lbl.image for lbl in labels] == three_images
    assert runner.thumbnails == [img.hash for img in three_images]
    assert [lbl.width() for lbl in labels] == [200, 400, 100]
    assert all(lbl.height() == 200 for lbl in labels)


def test_stale_thumbnail_tokens_are_ignored(qtbot, three_images):
    widget = ThumbnailRows(None, FakeRunner())
    qtbot.addWidget(widget)
    widget.show_rows(pack(600, 200, three_images))
    old_generation = widget.generation
    widget.show_rows(pack(600, 200, three_images))

    first = widget.labels()[0]
    widget.on_image_loaded(f"thumb|{old_generation}|{first.image.hash}", first.image.hash, _solid())
    assert first.pixmap().isNull()

    widget.on_image_loaded(
        f"thumb|{widget.generation}|{first.image.hash}", first.image.hash, _solid()
    )
    assert not first.pixmap().isNull()


def test_failed_thumbnail_shows_text(qtbot, three_images):
    widget = ThumbnailRows(None, FakeRunner())
    qtbot.addWidget(widget)
    widget.show_rows(pack(600, 200, three_images))
    lbl = widget.labels()[1]

    widget.on_image_loaded(f"thumb|{widget.generation}|{lbl.image.hash}", lbl.image.hash, None)
    assert lbl.text() == "(failed)"


def test_spaced_full_row_spans_container(qtbot, three_images):
    widget = ThumbnailRows(None, FakeRunner(), spacing=4)
    qtbot.addWidget(widget)
    widget.show_rows(pack(600, 200, three_images))

    first_row = widget.labels()[:2]
    assert sum(lbl.width() for lbl in first_row) + 4 == 600
    assert widget.labels()[2].width() == 100


def test_images_sharing_a_hash_all_get_the_thumbnail(qtbot):
    twins = [
        Image(hash="same", width=100, height=100, name="copy1.jpg"),
        Image(hash="same", width=200, height=100, name="copy2.jpg"),
    ]
    runner = FakeRunner()
    widget = ThumbnailRows(None, runner)
    qtbot.addWidget(widget)
    widget.show_rows(pack(600, 200, twins))

    labels = widget.labels()
    assert [lbl.image for lbl in labels] == twins
    assert runner.thumbnails == ["same"]

    widget.on_image_loaded(f"thumb|{widget.generation}|same", "same", _solid())
    assert all(not lbl.pixmap().isNull() for lbl in labels)


def test_clicking_thumbnail_emits_image(qtbot, three_images):
    widget = ThumbnailRows(None, FakeRunner())
    qtbot.addWidget(widget)
    widget.show()
    widget.show_rows(pack(600, 200, three_images))
    target = widget.labels()[1]

    with qtbot.waitSignal(widget.imageClicked) as blocker:
        qtbot.mouseClick(target, Qt.LeftButton)
    assert blocker.args == [three_images[1]]


def test_resize_reports_container_width(qtbot):
    widget = ThumbnailRows(None, FakeRunner())
    qtbot.addWidget(widget)
    widget.show()

    with qtbot.waitSignal(widget.containerWidthChanged) as blocker:
        widget.resize(731, 517)
    assert blocker.args == [widget.container_width()]


# --- Directory list -------------------------------------------------------------
def test_directory_list_emits_path(qtbot):
    widget = DirectoryList()
    qtbot.addWidget(widget)
    widget.set_entries(
        "2019", [SubGallery("..", "holidays"), SubGallery("summer", "holidays/2019/summer")]
    )
    assert widget.entry_paths() == ["holidays", "holidays/2019/summer"]

    item = widget.list_widget.item(1)
    with qtbot.waitSignal(widget.pathRequested) as blocker:
        widget.list_widget.itemClicked.emit(item)
    assert blocker.args == ["holidays/2019/summer"]


# --- Lightbox ---------------------------------------------------------------------
@pytest.fixture()
def lightbox(qtbot):
    widget = Lightbox()
    qtbot.addWidget(widget)
    widget.resize(800, 600)
    return widget


def test_lightbox_subscribes_keys_only_while_open(qtbot, lightbox, three_images):
    assert not lightbox.is_subscribed

    lightbox.show_image(three_images[0], "preview|x", 0, 3)
    assert lightbox.isVisible()
    assert lightbox.is_subscribed

    with qtbot.waitSignal(lightbox.keyPressed) as blocker:
        qtbot.keyClick(lightbox, Qt.Key_Right)
    assert blocker.args == ["ArrowRight"]

    with qtbot.waitSignal(lightbox.keyPressed) as blocker:
        qtbot.keyClick(lightbox, Qt.Key_Left)
    assert blocker.args == ["ArrowLeft"]

    with qtbot.assertNotEmitted(lightbox.keyPressed):
        qtbot.keyClick(lightbox, Qt.Key_A)

    lightbox.close_lightbox()
    assert not lightbox.isVisible()
    assert not lightbox.is_subscribed


def test_lightbox_click_requests_close(qtbot, lightbox, three_images):
    lightbox.show_image(three_images[0], None, 0, 3)
    with qtbot.waitSignal(lightbox.closeRequested):
        qtbot.mouseClick(lightbox, Qt.LeftButton)


def test_lightbox_info_and_fit(lightbox, make_image):
    image = make_image(4000, 3000, name="beach.jpg")
    lightbox.show_image(image, "preview|tok", 1, 5)
    assert "beach.jpg" in lightbox.info_label.text()
    assert "2 / 5" in lightbox.info_label.text()

    lightbox.apply_fit(FitSize(600.0, 450.0))
    assert lightbox.image_label.width() == 600
    assert lightbox.image_label.height() == 450

    lightbox.on_image_loaded("preview|other", image.hash, _solid())
    assert lightbox.image_label.pixmap().isNull()
    lightbox.on_image_loaded("preview|tok", image.hash, _solid(40, 30))
    assert not lightbox.image_label.pixmap().isNull()


# --- Main window --------------------------------------------------------------------
@pytest.fixture()
def window(qtbot, sample_gallery):
    client = FakeClient({"": sample_gallery})
    win = MainWindow(
        vm=GalleryVM(max_row_height=200), client=client, image_service=NullImageService()
    )
    qtbot.addWidget(win)
    win.resize(900, 600)
    win.show()
    return win


def test_window_loads_gallery_and_lists_directories(qtbot, window, sample_gallery):
    window.navigate("")
    qtbot.waitUntil(lambda: window._vm.state.gallery is sample_gallery, timeout=5000)

    assert window.directory_list.entry_paths() == ["holidays/2019", "holidays/2020"]
    assert len(window.thumbnails.labels()) == len(sample_gallery.images)


def test_window_reports_failed_load(qtbot, window):
    window.navigate("missing")
    qtbot.waitUntil(lambda: window._vm.state.error is not None, timeout=5000)
    assert "404" in window.statusBar().currentMessage()


def test_window_lightbox_follows_keys(qtbot, window, sample_gallery, three_images):
    window.navigate("")
    qtbot.waitUntil(lambda: window._vm.state.gallery is sample_gallery, timeout=5000)

    window.thumbnails.imageClicked.emit(three_images[2])
    assert window.lightbox.isVisible()
    assert window.lightbox.image is three_images[2]

    qtbot.keyClick(window.lightbox, Qt.Key_Right)
    assert window.lightbox.image is three_images[0]

    qtbot.keyClick(window.lightbox, Qt.Key_Escape)
    assert not window.lightbox.isVisible()
    assert window._vm.state.lightbox_image is None
