from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from infrastructure.gallery_client import GalleryLoadError


class _ImageTask(QRunnable):
    """QRunnable for background image loading.

    Emits `receiver.imageLoaded(token, hash, image)` upon completion. The
    receiver is expected to own a Qt `Signal(str, str, object)` named
    `imageLoaded`.
    """

    def __init__(
        self, *, image_hash: str, is_preview: bool, service: Any, receiver: QObject, token: str
    ) -> None:
        super().__init__()
        self._hash = image_hash
        self._is_preview = is_preview
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            if self._is_preview:
                img = self._service.get_preview(self._hash)
            else:
                img = self._service.get_thumbnail(self._hash)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Image task failed: {}", ex)
            img = None
        try:
            receiver = self._receiver
            receiver.imageLoaded.emit(self._token, self._hash, img)  # type: ignore[attr-defined]
        except RuntimeError:  # pragma: no cover - receiver already destroyed
            pass


class _GalleryTask(QRunnable):
    """QRunnable fetching a gallery description.

    Emits `receiver.galleryLoaded(path, gallery)` or
    `receiver.galleryFailed(path, message)`.
    """

    def __init__(self, *, path: str, client: Any, receiver: QObject) -> None:
        super().__init__()
        self._path = path
        self._client = client
        self._receiver = receiver

    def run(self) -> None:  # type: ignore[override]
        try:
            gallery = self._client.fetch_gallery(self._path)
        except GalleryLoadError as ex:
            self._emit_failure(str(ex))
            return
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.exception("Gallery task crashed for {!r}", self._path)
            self._emit_failure(f"Unexpected error: {ex}")
            return
        try:
            self._receiver.galleryLoaded.emit(self._path, gallery)  # type: ignore[attr-defined]
        except RuntimeError:  # pragma: no cover - receiver already destroyed
            pass

    def _emit_failure(self, message: str) -> None:
        try:
            self._receiver.galleryFailed.emit(self._path, message)  # type: ignore[attr-defined]
        except RuntimeError:  # pragma: no cover - receiver already destroyed
            pass


class ImageTaskRunner:
    """Dispatches gallery and image load tasks to the global thread pool.

    Token formats:
    - Lightbox preview: "preview|{hash}"
    - Row thumbnail: "thumb|{generation}|{hash}"
    """

    def __init__(self, *, service: Any, client: Any, receiver: QObject) -> None:
        self._service = service
        self._client = client
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_gallery(self, path: str) -> None:
        """Fetch the gallery at `path` in the background."""
        if self._client is None:
            return
        self._pool.start(_GalleryTask(path=path, client=self._client, receiver=self._receiver))

    def request_preview(self, image_hash: str) -> str:
        """Request the lightbox preview for `image_hash`. Returns the token string."""
        token = f"preview|{image_hash}"
        self._start_image(image_hash, True, token)
        return token

    def request_thumbnail(self, image_hash: str, generation: int) -> str:
        """Request a row thumbnail for `image_hash`. Returns token."""
        token = f"thumb|{generation}|{image_hash}"
        self._start_image(image_hash, False, token)
        return token

    def _start_image(self, image_hash: str, is_preview: bool, token: str) -> None:
        if self._service is None:
            return
        task = _ImageTask(
            image_hash=image_hash,
            is_preview=is_preview,
            service=self._service,
            receiver=self._receiver,
            token=token,
        )
        self._pool.start(task)
