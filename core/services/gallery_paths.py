"""Gallery path helpers and the directory list shown beside the thumbnails."""

from __future__ import annotations

from core.models import Gallery, SubGallery

PARENT_ENTRY_NAME = ".."


def normalize_path(path: str | None) -> str:
    """Strip surrounding whitespace and slashes; the root gallery is ``""``."""
    return (path or "").strip().strip("/")


def parent_path(path: str) -> str:
    """Return the path of the enclosing gallery (``""`` for top-level ones)."""
    parts = normalize_path(path).split("/")
    parts.pop()
    return "/".join(parts)


def directory_entries(gallery: Gallery | None, path: str) -> list[SubGallery]:
    """Build the directory list: a `..` link (except at the root) then sub-galleries."""
    if gallery is None:
        return []
    entries: list[SubGallery] = []
    if normalize_path(path):
        entries.append(SubGallery(name=PARENT_ENTRY_NAME, path=parent_path(path)))
    entries.extend(gallery.sub_galleries)
    return entries
