"""
UI/view constants centralized for reuse across view modules.

Layout numbers that users may want to tune live in settings.json; the values
here are fallbacks and fixed presentation details.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

# Row layout defaults (overridable by settings.json)
DEFAULT_THUMB_SPACING_PX: int = 0

# Directory list
DIRECTORY_LIST_WIDTH_PX: int = 220

# Lightbox presentation
LIGHTBOX_BACKDROP_RGBA: tuple[int, int, int, int] = (0, 0, 0, 200)
LIGHTBOX_INFO_HEIGHT_PX: int = 28

# Qt key -> key name understood by GalleryVM.handle_key
KEY_NAMES: dict[int, str] = {
    int(Qt.Key_Right): "ArrowRight",
    int(Qt.Key_Left): "ArrowLeft",
    int(Qt.Key_Escape): "Escape",
}

# Status bar
STATUS_TIMEOUT_MS: int = 3000
