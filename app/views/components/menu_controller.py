"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow, QMenuBar


class MenuController:
    """Manages main window menu creation and action connections.

    Actions are created once by `setup_menus` and wired to handlers by
    name through `connect_actions`.
    """

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and return action references.

        Returns:
            Dictionary mapping action names to QAction instances
        """
        menubar = QMenuBar(self.window)

        # Gallery Menu
        gallery_menu = menubar.addMenu("Gallery")
        self.actions["reload"] = gallery_menu.addAction("Reload")
        self.actions["reload"].setShortcut(QKeySequence.Refresh)
        self.actions["root"] = gallery_menu.addAction("Go to Root")
        self.actions["parent"] = gallery_menu.addAction("Go to Parent")
        self.actions["parent"].setShortcut(QKeySequence("Backspace"))
        gallery_menu.addSeparator()
        self.actions["exit"] = gallery_menu.addAction("Exit")

        # Log Menu
        log_menu = menubar.addMenu("Log")
        self.actions["open_latest_log"] = log_menu.addAction("Open Latest Log")

        self.window.setMenuBar(menubar)
        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect menu actions to their handler methods.

        Args:
            handlers: Dictionary mapping action names to handler callables
        """
        for name, handler in handlers.items():
            action = self.actions.get(name)
            if action is not None:
                action.triggered.connect(lambda *_, h=handler: h())
