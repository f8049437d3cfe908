"""Full-window lightbox overlay.

While visible the lightbox holds an application-wide key subscription (an
event filter on the QApplication); hiding or destroying it releases the
subscription.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPixmap
from PySide6.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget
from loguru import logger

from app.views.constants import KEY_NAMES, LIGHTBOX_BACKDROP_RGBA, LIGHTBOX_INFO_HEIGHT_PX
from core.models import FitSize, Image


class Lightbox(QWidget):
    """Overlay showing one image centered over a dimmed backdrop.

    Signals:
        keyPressed(str): a navigation key name ("ArrowRight", "ArrowLeft", "Escape").
        closeRequested(): the backdrop or image was clicked.
        viewportResized(int, int): the overlay's size changed; the owner re-fits.
    """

    keyPressed = Signal(str)
    closeRequested = Signal()
    viewportResized = Signal(int, int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WA_StyledBackground, False)
        self.setFocusPolicy(Qt.StrongFocus)

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignCenter)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setStyleSheet("background-color: #202020;")
        layout.addWidget(self.image_label, 0, Qt.AlignCenter)

        self.info_label = QLabel()
        self.info_label.setAlignment(Qt.AlignCenter)
        self.info_label.setFixedHeight(LIGHTBOX_INFO_HEIGHT_PX)
        self.info_label.setStyleSheet("color: white;")
        layout.addWidget(self.info_label, 0, Qt.AlignCenter)

        self._image: Image | None = None
        self._token: str | None = None
        self._pixmap: QPixmap | None = None
        self._subscribed_app: QApplication | None = None
        self.hide()

    # Public API
    @property
    def image(self) -> Image | None:
        return self._image

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed_app is not None

    def show_image(self, image: Image, token: str | None, position: int, total: int) -> None:
        """Display `image`; `token` identifies the preview request to accept."""
        self._image = image
        self._token = token
        self._pixmap = None
        self.image_label.clear()
        self.image_label.setText("Loading…")
        title = image.name or image.hash
        self.info_label.setText(
            f"{title}  ({int(image.width)}×{int(image.height)})  {position + 1} / {total}"
        )
        if self.parentWidget() is not None:
            self.setGeometry(self.parentWidget().rect())
        self.show()
        self.raise_()
        self.setFocus()

    def close_lightbox(self) -> None:
        self._image = None
        self._token = None
        self._pixmap = None
        self.hide()

    def apply_fit(self, size: FitSize | None) -> None:
        """Resize the image area to `size` (as computed by the view-model)."""
        if size is None:
            return
        w = max(1, int(round(size.width)))
        h = max(1, int(round(size.height)))
        self.image_label.setFixedSize(w, h)
        if self._pixmap is not None:
            self.image_label.setPixmap(
                self._pixmap.scaled(w, h, Qt.KeepAspectRatio, Qt.SmoothTransformation)
            )

    def on_image_loaded(self, token: str, image_hash: str, image: Any) -> None:
        if token != self._token:
            return
        if image is None:
            self.image_label.setText("(failed)")
            return
        pm = QPixmap.fromImage(image)
        if pm.isNull():
            logger.debug("Null pixmap for preview {}", image_hash)
            self.image_label.setText("(failed)")
            return
        self._pixmap = pm
        self.image_label.setText("")
        size = self.image_label.size()
        self.image_label.setPixmap(
            pm.scaled(size.width(), size.height(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
        )

    # Key subscription
    def _subscribe_keys(self) -> None:
        app = QApplication.instance()
        if app is None or self._subscribed_app is not None:
            return
        app.installEventFilter(self)
        self._subscribed_app = app

    def _unsubscribe_keys(self) -> None:
        if self._subscribed_app is None:
            return
        self._subscribed_app.removeEventFilter(self)
        self._subscribed_app = None

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if event.type() == QEvent.KeyPress and self.isVisible():
            name = KEY_NAMES.get(int(event.key()))
            if name is not None:
                self.keyPressed.emit(name)
                return True
        return super().eventFilter(obj, event)

    # Qt events
    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._subscribe_keys()

    def hideEvent(self, event) -> None:  # type: ignore[override]
        self._unsubscribe_keys()
        super().hideEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._unsubscribe_keys()
        super().closeEvent(event)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.viewportResized.emit(self.width(), self.height())

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        self.closeRequested.emit()
        event.accept()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(*LIGHTBOX_BACKDROP_RGBA))
        painter.end()
