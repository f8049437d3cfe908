"""Gallery main window.

Wires the view-model to the directory list, the thumbnail rows and the
lightbox overlay. All state lives in `GalleryVM`; this window re-renders the
parts of the UI whose slice of the state changed.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QMainWindow
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.components.menu_controller import MenuController
from app.views.constants import DEFAULT_THUMB_SPACING_PX, STATUS_TIMEOUT_MS
from app.views.directory_list import DirectoryList
from app.views.image_tasks import ImageTaskRunner
from app.views.layout.layout_manager import LayoutManager
from app.views.lightbox import Lightbox
from app.views.thumbnail_rows import ThumbnailRows
from core.models import Gallery, GalleryViewState, Image, LoadStatus
from core.services.gallery_paths import parent_path
from infrastructure.logging import open_latest_log


class MainWindow(QMainWindow):
    """Main application window."""

    imageLoaded = Signal(str, str, object)  # token, hash, QImage
    galleryLoaded = Signal(str, object)  # path, Gallery
    galleryFailed = Signal(str, str)  # path, message

    def __init__(
        self,
        vm: GalleryVM,
        client: Any | None = None,
        image_service: Any | None = None,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow with its services.

        Args:
            vm: Gallery view-model owning all window state
            client: Gallery client used to fetch gallery descriptions
            image_service: Service returning thumbnail/preview QImages
            settings: Settings instance for configuration
        """
        super().__init__()
        self._vm = vm
        self._settings = settings
        self._rendered = GalleryViewState()

        spacing = DEFAULT_THUMB_SPACING_PX
        if settings is not None:
            try:
                spacing = int(settings.get("layout.thumbnail_spacing", spacing) or 0)
            except (ValueError, TypeError):
                spacing = DEFAULT_THUMB_SPACING_PX

        self._runner = ImageTaskRunner(service=image_service, client=client, receiver=self)
        self.menu_controller = MenuController(self)
        self.layout_manager = LayoutManager(self)

        self.directory_list = DirectoryList()
        self.thumbnails = ThumbnailRows(None, self._runner, spacing=spacing)
        self.setCentralWidget(
            self.layout_manager.setup_main_layout(self.directory_list, self.thumbnails)
        )
        self.lightbox = Lightbox(self)

        self.setWindowTitle("Gallery")
        self.menu_controller.setup_menus()
        self.layout_manager.setup_initial_window_size()

        self._connect_signals()
        self._unsubscribe = self._vm.subscribe(self._render)

    def _connect_signals(self) -> None:
        self.menu_controller.connect_actions(
            {
                "reload": self.reload,
                "root": lambda: self.navigate(""),
                "parent": self.navigate_to_parent,
                "exit": self.close,
                "open_latest_log": self._open_latest_log,
            }
        )
        self.imageLoaded.connect(self._on_image_loaded)
        self.galleryLoaded.connect(self._on_gallery_loaded)
        self.galleryFailed.connect(self._on_gallery_failed)

        self.directory_list.pathRequested.connect(self.navigate)
        self.thumbnails.containerWidthChanged.connect(self._vm.set_container_width)
        self.thumbnails.imageClicked.connect(self._on_image_clicked)

        self.lightbox.keyPressed.connect(self._vm.handle_key)
        self.lightbox.closeRequested.connect(self._vm.close_lightbox)
        self.lightbox.viewportResized.connect(self._refit_lightbox)

    # Navigation
    def navigate(self, path: str) -> None:
        """Load the gallery at `path`; a later call supersedes this one."""
        target = self._vm.request_path(path)
        self._runner.request_gallery(target)

    def navigate_to_parent(self) -> None:
        if self._vm.state.path:
            self.navigate(parent_path(self._vm.state.path))

    def reload(self) -> None:
        target = self._vm.reload()
        self._runner.request_gallery(target)

    # Slots
    def _on_gallery_loaded(self, path: str, gallery: Gallery) -> None:
        self._vm.apply_loaded(path, gallery)

    def _on_gallery_failed(self, path: str, message: str) -> None:
        self._vm.apply_failed(path, message)

    def _on_image_loaded(self, token: str, image_hash: str, image: Any) -> None:
        if token.startswith("preview|"):
            self.lightbox.on_image_loaded(token, image_hash, image)
        else:
            self.thumbnails.on_image_loaded(token, image_hash, image)

    def _on_image_clicked(self, image: Image) -> None:
        self._vm.open_image(image)

    def _refit_lightbox(self, width: int, height: int) -> None:
        self.lightbox.apply_fit(self._vm.fit_lightbox(width, height))

    def _open_latest_log(self) -> None:
        if not open_latest_log():
            self.statusBar().showMessage("No log file found", STATUS_TIMEOUT_MS)

    # Rendering
    def _render(self, state: GalleryViewState) -> None:
        prev = self._rendered
        self._rendered = state

        if state.gallery is not prev.gallery or state.path != prev.path:
            title = state.gallery.name if state.gallery else ""
            self.directory_list.set_entries(title or "/", self._vm.directories)
            self.setWindowTitle(f"Gallery - {title}" if title else "Gallery")

        if state.rows is not prev.rows:
            self.thumbnails.show_rows(state.rows)

        if state.lightbox_image is not prev.lightbox_image:
            self._render_lightbox(state.lightbox_image)

        if state.status != prev.status or state.error != prev.error:
            self._render_status(state)

    def _render_lightbox(self, image: Image | None) -> None:
        if image is None:
            self.lightbox.close_lightbox()
            return
        navigator = self._vm.navigator
        token = self._runner.request_preview(image.hash)
        self.lightbox.show_image(image, token, navigator.current_index or 0, len(navigator))
        self._refit_lightbox(self.lightbox.width(), self.lightbox.height())

    def _render_status(self, state: GalleryViewState) -> None:
        bar = self.statusBar()
        if state.status is LoadStatus.LOADING:
            bar.showMessage(f"Loading /{state.requested_path or ''}…")
        elif state.status is LoadStatus.FAILED:
            bar.showMessage(f"Failed to load: {state.error}")
        elif state.status is LoadStatus.LOADED:
            count = len(state.gallery.images) if state.gallery else 0
            bar.showMessage(f"/{state.path}: {count} images", STATUS_TIMEOUT_MS)

    # Qt events
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        if self.lightbox.isVisible():
            self.lightbox.setGeometry(self.rect())

    def closeEvent(self, event) -> None:  # type: ignore[override]
        logger.info("Closing gallery window")
        self._unsubscribe()
        self.lightbox.close_lightbox()
        event.accept()
