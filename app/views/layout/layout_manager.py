"""LayoutManager: Manages main window layout and splitter behavior."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QMainWindow,
    QSplitter,
    QWidget,
)

from app.views.constants import DIRECTORY_LIST_WIDTH_PX


class LayoutManager:
    """Manages main window layout and splitter behavior.

    The window is split into the directory list on the left and the
    thumbnail rows on the right; the thumbnails take all extra space.
    """

    # Layout constants
    DIRECTORY_STRETCH_FACTOR = 0
    THUMBNAILS_STRETCH_FACTOR = 1
    MIN_SECTION_WIDTH = 120
    WINDOW_SIZE_RATIO = 0.75

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to manage layout for
        """
        self.window = main_window
        self.splitter: QSplitter | None = None

    def setup_main_layout(self, directory_widget: QWidget, thumbnails_widget: QWidget) -> QWidget:
        """Create the main horizontal splitter layout.

        Args:
            directory_widget: Widget listing parent/sub-galleries
            thumbnails_widget: Widget showing the thumbnail rows

        Returns:
            Central widget configured with the layout
        """
        central = QWidget(self.window)
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(directory_widget)
        self.splitter.addWidget(thumbnails_widget)
        self.splitter.setStretchFactor(0, self.DIRECTORY_STRETCH_FACTOR)
        self.splitter.setStretchFactor(1, self.THUMBNAILS_STRETCH_FACTOR)
        directory_widget.setMinimumWidth(self.MIN_SECTION_WIDTH)
        self.splitter.setSizes([DIRECTORY_LIST_WIDTH_PX, max(1, self.window.width())])

        root.addWidget(self.splitter)
        return central

    def setup_initial_window_size(self) -> None:
        """Setup initial window size based on screen dimensions."""
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        rect = screen.availableGeometry()
        width = int(rect.width() * self.WINDOW_SIZE_RATIO)
        height = int(rect.height() * self.WINDOW_SIZE_RATIO)
        self.window.resize(width, height)
