from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QHBoxLayout, QLabel, QScrollArea, QVBoxLayout, QWidget
from loguru import logger

from app.views.constants import DEFAULT_THUMB_SPACING_PX
from app.views.image_tasks import ImageTaskRunner
from core.models import Image, Row


def pixel_widths(row: Row, spacing: int = 0) -> list[int]:
    """Label widths for `row` once `spacing` px gaps sit between its items.

    The gaps are taken out of the row width in proportion to each item, and
    cumulative edges are rounded instead of each width, so labels plus gaps
    add up to the rounded row width and full rows stay flush with the
    container.
    """
    total = row.total_width
    gaps = spacing * max(0, len(row.items) - 1)
    scale = max(0.0, total - gaps) / total if total > 0 else 0.0
    widths: list[int] = []
    edge = 0.0
    prev = 0
    for item in row.items:
        edge += item.render_width * scale
        cur = int(round(edge))
        widths.append(max(1, cur - prev))
        prev = cur
    return widths


class _ThumbnailLabel(QLabel):
    def __init__(self, image: Image, on_click: Callable[[Image], None], parent=None) -> None:
        super().__init__("Loading…", parent)
        self._image = image
        self._on_click = on_click
        self.setAlignment(Qt.AlignCenter)
        self.setCursor(Qt.PointingHandCursor)
        self.setToolTip(image.name or image.hash)

    @property
    def image(self) -> Image:
        return self._image

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self._on_click(self._image)
            event.accept()
            return
        super().mousePressEvent(event)


class ThumbnailRows(QWidget):
    """Scrollable area showing packed thumbnail rows.

    Emits `containerWidthChanged` whenever the usable width changes so the
    owner can re-pack, and `imageClicked` when a thumbnail is clicked.
    """

    containerWidthChanged = Signal(int)
    imageClicked = Signal(object)

    def __init__(
        self,
        parent: QWidget | None,
        task_runner: ImageTaskRunner,
        spacing: int = DEFAULT_THUMB_SPACING_PX,
    ) -> None:
        super().__init__(parent)
        self._runner = task_runner
        self._spacing = max(0, int(spacing))

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.scroll_area.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOn)
        self.scroll_area.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        root.addWidget(self.scroll_area)

        self._rows_container: QWidget | None = None
        self._labels: dict[str, list[_ThumbnailLabel]] = {}
        self._hash_tokens: dict[str, str] = {}
        self._generation = 0
        self._last_width = -1

        self.scroll_area.viewport().installEventFilter(self)

    # Public API
    @property
    def generation(self) -> int:
        return self._generation

    def container_width(self) -> int:
        """Width of the scroll viewport that rows are packed against."""
        return max(0, self.scroll_area.viewport().width())

    def labels(self) -> list[_ThumbnailLabel]:
        return [lbl for group in self._labels.values() for lbl in group]

    def show_rows(self, rows: list[Row]) -> None:
        """Rebuild the thumbnails for `rows` and request their pixels."""
        self.clear()
        self._generation += 1

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(self._spacing)

        for row in rows:
            row_widget = QWidget()
            h = QHBoxLayout(row_widget)
            h.setContentsMargins(0, 0, 0, 0)
            h.setSpacing(self._spacing)
            height = max(1, int(round(row.render_height)))
            for item, width in zip(row.items, pixel_widths(row, self._spacing)):
                lbl = _ThumbnailLabel(item.image, self._on_thumbnail_clicked)
                lbl.setFixedSize(width, height)
                h.addWidget(lbl)
                self._track(item.image.hash, lbl)
            h.addStretch(1)
            layout.addWidget(row_widget)
        layout.addStretch(1)

        self._rows_container = container
        self.scroll_area.setWidget(container)
        container.show()

    def clear(self) -> None:
        self._labels.clear()
        self._hash_tokens.clear()
        if self._rows_container is not None:
            old = self.scroll_area.takeWidget()
            if old is not None:
                old.deleteLater()
            self._rows_container = None

    def on_image_loaded(self, token: str, image_hash: str, image: Any) -> None:
        """Put a loaded thumbnail into its labels; stale tokens are ignored."""
        group = self._labels.get(token)
        if not group:
            return
        pm = QPixmap.fromImage(image) if image is not None else None
        if pm is not None and pm.isNull():
            logger.debug("Null pixmap for thumbnail {}", image_hash)
            pm = None
        for lbl in group:
            if pm is None:
                lbl.setText("(failed)")
                continue
            lbl.setPixmap(
                pm.scaled(lbl.width(), lbl.height(), Qt.IgnoreAspectRatio, Qt.SmoothTransformation)
            )

    # Qt events
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if obj is self.scroll_area.viewport() and event.type() == QEvent.Resize:
            width = self.container_width()
            if width != self._last_width:
                self._last_width = width
                self.containerWidthChanged.emit(width)
        return super().eventFilter(obj, event)

    # internals
    def _track(self, image_hash: str, lbl: _ThumbnailLabel) -> None:
        # Images sharing a hash share one request
        token = self._hash_tokens.get(image_hash)
        if token is None:
            token = self._runner.request_thumbnail(image_hash, self._generation)
            self._hash_tokens[image_hash] = token
        self._labels.setdefault(token, []).append(lbl)

    def _on_thumbnail_clicked(self, image: Image) -> None:
        self.imageClicked.emit(image)
