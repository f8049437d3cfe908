"""ViewModel owning the gallery window's state.

Every change builds a new `GalleryViewState` and hands it to subscribed
listeners; views never mutate state directly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from core.models import FitSize, Gallery, GalleryViewState, Image, LoadStatus, SubGallery
from core.services.gallery_paths import directory_entries, normalize_path
from core.services.lightbox_navigator import FitPolicy, LightboxNavigator, fit_to_viewport
from core.services.row_packer import pack

DEFAULT_MAX_ROW_HEIGHT = 200.0

KEY_NEXT = "ArrowRight"
KEY_PREVIOUS = "ArrowLeft"
KEY_CLOSE = "Escape"

StateListener = Callable[[GalleryViewState], None]


class GalleryVM:
    """Gallery window view-model.

    Holds the requested and displayed paths, the loaded gallery, its packed
    rows for the current container width, and the lightbox navigator.
    """

    def __init__(
        self,
        max_row_height: float = DEFAULT_MAX_ROW_HEIGHT,
        fit_policy: FitPolicy | None = None,
    ) -> None:
        """Create a GalleryVM.

        Args:
            max_row_height: Height ceiling passed to the row packer.
            fit_policy: Margins/shrink strategy for the lightbox image.
        """
        self._max_row_height = float(max_row_height)
        self._fit_policy = fit_policy or FitPolicy()
        self._navigator = LightboxNavigator()
        self._state = GalleryViewState()
        self._listeners: list[StateListener] = []

    # State access
    @property
    def state(self) -> GalleryViewState:
        return self._state

    @property
    def navigator(self) -> LightboxNavigator:
        return self._navigator

    @property
    def max_row_height(self) -> float:
        return self._max_row_height

    @property
    def directories(self) -> list[SubGallery]:
        """Directory list for the displayed gallery, `..` first when not at the root."""
        return directory_entries(self._state.gallery, self._state.path)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register `listener` for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # Gallery loading
    def request_path(self, path: str | None) -> str:
        """Mark `path` as the gallery being loaded and return its normalized form.

        Any result for a previously requested path arriving later is discarded.
        """
        target = normalize_path(path)
        logger.info("Requesting gallery {!r}", target)
        self._set_state(
            requested_path=target,
            status=LoadStatus.LOADING,
            error=None,
        )
        return target

    def reload(self) -> str:
        """Request the displayed gallery again."""
        return self.request_path(self._state.path)

    def apply_loaded(self, path: str, gallery: Gallery) -> bool:
        """Install `gallery` if it answers the current request.

        Returns:
            True if accepted, False if the result was stale.
        """
        path = normalize_path(path)
        if path != self._state.requested_path:
            logger.info(
                "Dropping stale gallery {!r} (current request {!r})",
                path,
                self._state.requested_path,
            )
            return False

        self._navigator = LightboxNavigator(gallery.images)
        self._set_state(
            path=path,
            requested_path=None,
            gallery=gallery,
            status=LoadStatus.LOADED,
            error=None,
            rows=self._pack(self._state.container_width, gallery),
            lightbox_image=None,
        )
        return True

    def apply_failed(self, path: str, message: str) -> bool:
        """Record a failed load of `path`; the displayed gallery stays as it was."""
        path = normalize_path(path)
        if path != self._state.requested_path:
            logger.info("Ignoring stale failure for {!r}: {}", path, message)
            return False
        logger.error("Loading gallery {!r} failed: {}", path, message)
        self._set_state(requested_path=None, status=LoadStatus.FAILED, error=message)
        return True

    # Layout
    def set_container_width(self, width: float) -> None:
        """Re-pack rows for a new container width."""
        width = max(0.0, float(width))
        if width == self._state.container_width:
            return
        self._set_state(container_width=width, rows=self._pack(width, self._state.gallery))

    def _pack(self, width: float, gallery: Gallery | None) -> list:
        if gallery is None:
            return []
        return pack(width, self._max_row_height, gallery.images)

    # Lightbox
    def open_image(self, image: Image) -> None:
        self._navigator.open(image)
        self._sync_lightbox()

    def close_lightbox(self) -> None:
        self._navigator.close()
        self._sync_lightbox()

    def next_image(self) -> None:
        self._navigator.next()
        self._sync_lightbox()

    def previous_image(self) -> None:
        self._navigator.previous()
        self._sync_lightbox()

    def handle_key(self, key: str) -> bool:
        """Map a key name to a lightbox action; returns True if it was consumed."""
        if not self._navigator.is_open:
            return False
        if key == KEY_NEXT:
            self.next_image()
        elif key == KEY_PREVIOUS:
            self.previous_image()
        elif key == KEY_CLOSE:
            self.close_lightbox()
        else:
            return False
        return True

    def fit_lightbox(self, box_width: float, box_height: float) -> FitSize | None:
        """Size of the open lightbox image inside a `box_width` x `box_height` viewport."""
        image = self._navigator.selected_image
        if image is None:
            return None
        return fit_to_viewport(image.width, image.height, box_width, box_height, self._fit_policy)

    def _sync_lightbox(self) -> None:
        selected = self._navigator.selected_image
        if selected is not self._state.lightbox_image:
            self._set_state(lightbox_image=selected)

    def _set_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
