"""Core domain models for galleries, images and derived layout rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Image:
    """A single image listed by a gallery, addressed by its content hash."""

    hash: str
    width: float
    height: float
    name: str = ""

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class SubGallery:
    """Link to a child gallery (or the parent, for the `..` entry)."""

    name: str
    path: str


@dataclass(frozen=True)
class Gallery:
    """A named gallery: ordered images plus links to sub-galleries."""

    name: str
    images: tuple[Image, ...] = ()
    sub_galleries: tuple[SubGallery, ...] = ()
    parent: str | None = None


@dataclass(frozen=True)
class RowItem:
    """One image placed in a row with its rendered width."""

    image: Image
    render_width: float


@dataclass(frozen=True)
class Row:
    """Images sharing one rendered height.

    Attributes:
        items: Placed images in input order.
        render_height: Height shared by every image in the row.
        is_trailing: True for the last, underfull row rendered at the ceiling.
    """

    items: tuple[RowItem, ...]
    render_height: float
    is_trailing: bool = False

    @property
    def images(self) -> list[Image]:
        return [it.image for it in self.items]

    @property
    def total_width(self) -> float:
        return sum(it.render_width for it in self.items)


@dataclass(frozen=True)
class FitSize:
    width: float
    height: float


class LoadStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class GalleryViewState:
    """Snapshot of everything the gallery window renders from.

    Replaced as a whole by the view-model on every change.
    """

    path: str = ""
    requested_path: str | None = None
    gallery: Gallery | None = None
    status: LoadStatus = LoadStatus.IDLE
    error: str | None = None
    container_width: float = 0.0
    rows: list[Row] = field(default_factory=list)
    lightbox_image: Image | None = None
