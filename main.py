from __future__ import annotations

import argparse
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.gallery_vm import DEFAULT_MAX_ROW_HEIGHT, GalleryVM
from app.views.main_window import MainWindow
from core.services.lightbox_navigator import FitPolicy
from infrastructure.gallery_client import GalleryClient
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse a gallery server.")
    parser.add_argument("path", nargs="?", default="", help="gallery path to open")
    parser.add_argument("--server", help="gallery server base URL")
    parser.add_argument("--settings", default=str(BASE_DIR / "settings.json"))
    return parser.parse_args(argv)


def _fit_policy(settings: JsonSettings) -> FitPolicy:
    return FitPolicy(
        width_ratio=settings.get_float("lightbox.width_ratio", 0.75),
        height_ratio=settings.get_float("lightbox.height_ratio", 0.9),
        iterative=bool(settings.get("lightbox.iterative_fit", False)),
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = JsonSettings(args.settings)
    if args.server:
        settings.set("server.base_url", args.server)

    init_logging(level=str(settings.get("logging.level", "INFO")))
    base_url = str(settings.get("server.base_url"))
    logger.info("Using gallery server {}", base_url)

    app = QApplication(sys.argv[:1])

    client = GalleryClient(base_url, timeout=settings.get_float("server.timeout_seconds", 10.0))
    images = ImageService(client)
    vm = GalleryVM(
        max_row_height=settings.get_float("layout.max_row_height", DEFAULT_MAX_ROW_HEIGHT),
        fit_policy=_fit_policy(settings),
    )

    win = MainWindow(vm=vm, client=client, image_service=images, settings=settings)
    win.show()
    win.navigate(args.path)

    try:
        return app.exec()
    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
