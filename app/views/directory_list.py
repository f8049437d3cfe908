from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from core.models import SubGallery

PATH_ROLE: int = Qt.UserRole  # gallery path stored on each entry


class DirectoryList(QWidget):
    """Gallery name plus the `..`/sub-gallery links; clicking one emits `pathRequested`."""

    pathRequested = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self.title_label = QLabel("")
        self.title_label.setWordWrap(True)
        root.addWidget(self.title_label)

        self.list_widget = QListWidget()
        self.list_widget.itemClicked.connect(self._on_item_clicked)
        root.addWidget(self.list_widget)

    def set_entries(self, title: str, entries: list[SubGallery]) -> None:
        self.title_label.setText(title)
        self.list_widget.clear()
        for entry in entries:
            item = QListWidgetItem(entry.name)
            item.setData(PATH_ROLE, entry.path)
            item.setToolTip(entry.path or "/")
            self.list_widget.addItem(item)

    def entry_paths(self) -> list[str]:
        return [
            self.list_widget.item(i).data(PATH_ROLE) for i in range(self.list_widget.count())
        ]

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        path = item.data(PATH_ROLE)
        if path is not None:
            self.pathRequested.emit(str(path))
