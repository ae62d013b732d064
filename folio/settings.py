"""Page geometry and pagination options."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from reportlab.lib.pagesizes import A4, A5, B5, LETTER
from reportlab.lib.units import inch, mm

from .constants import (
    DEFAULT_MARKER_FORMAT,
    DEFAULT_MIN_SPLIT_LENGTH,
    DEFAULT_PAGE_HEIGHT,
    OVERFLOW_TOLERANCE,
)

PAGE_SIZES: Dict[str, tuple[float, float]] = {
    "a4": A4,
    "a5": A5,
    "b5": B5,
    "16k": (185 * mm, 260 * mm),
    "letter": LETTER,
    "custom": (6 * inch, 9 * inch),
}

_OPTION_ALIASES = {
    "bookSize": "book_size",
    "pageHeight": "page_height",
    "tocBookSize": "toc_book_size",
    "minSplitLength": "min_split_length",
    "markerFormat": "marker_format",
    "overflowTolerance": "overflow_tolerance",
    "fontName": "font_name",
    "tocEnabled": "toc_enabled",
    "tocTitle": "toc_title",
    "tocMaxLevel": "toc_max_level",
}


def resolve_page_size(name: str | None) -> tuple[float, float] | None:
    """Return the (width, height) preset for a book size name.

    Example:
        >>> resolve_page_size("A5") == A5
        True
        >>> resolve_page_size("pamphlet") is None
        True
    """

    if not name:
        return None
    return PAGE_SIZES.get(name.strip().lower())


def resolve_extent(
    name: str | None, *, fallback: float, margin_top: float, margin_bottom: float
) -> float:
    """Return the usable page height for a preset, or ``fallback`` when unknown.

    Example:
        >>> resolve_extent("nope", fallback=500.0, margin_top=10, margin_bottom=10)
        500.0
    """

    size = resolve_page_size(name)
    if size is None:
        return float(fallback)
    return float(size[1] - margin_top - margin_bottom)


@dataclass(slots=True)
class PaginationSettings:
    """Options and geometry shared by content and TOC pagination.

    ``page_height`` is only consulted when ``book_size`` names no preset.

    Example:
        >>> settings = PaginationSettings()
        >>> settings.max_extent() > 0
        True
        >>> PaginationSettings(book_size="odd", page_height=480).max_extent()
        480.0
    """

    book_size: str = "a4"
    page_height: float = DEFAULT_PAGE_HEIGHT
    toc_book_size: str | None = None
    min_split_length: int = DEFAULT_MIN_SPLIT_LENGTH
    marker_format: str = DEFAULT_MARKER_FORMAT
    overflow_tolerance: float = OVERFLOW_TOLERANCE
    margin_left: float = 0.75 * inch
    margin_right: float = 0.75 * inch
    margin_top: float = 0.75 * inch
    margin_bottom: float = 0.75 * inch
    font_name: str = "Times-Roman"
    toc_enabled: bool = True
    toc_title: str = "Contents"
    toc_max_level: int = 3

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "PaginationSettings":
        """Build settings from a loose option mapping.

        Accepts snake_case field names and the camelCase names used by
        front-end callers. Unknown keys and None values are ignored.

        Example:
            >>> PaginationSettings.from_options({"bookSize": "a5", "x": 1}).book_size
            'a5'
        """

        names = {item.name for item in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in names and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    def page_size(self, book_size: str | None = None) -> tuple[float, float]:
        """Return the physical page size for ``book_size`` (default: content size)."""

        name = self.book_size if book_size is None else book_size
        size = resolve_page_size(name)
        if size is not None:
            return size
        return (A4[0], self.page_height + self.margin_top + self.margin_bottom)

    def max_extent(self) -> float:
        """Return the usable height of a content page."""

        return resolve_extent(
            self.book_size,
            fallback=self.page_height,
            margin_top=self.margin_top,
            margin_bottom=self.margin_bottom,
        )

    def content_width(self) -> float:
        """Return the usable width of a content page."""

        return self.page_size()[0] - self.margin_left - self.margin_right

    @property
    def toc_size_name(self) -> str:
        return self.toc_book_size or self.book_size

    def toc_max_extent(self) -> float:
        """Return the usable height of a TOC page."""

        return resolve_extent(
            self.toc_size_name,
            fallback=self.page_height,
            margin_top=self.margin_top,
            margin_bottom=self.margin_bottom,
        )

    def toc_content_width(self) -> float:
        """Return the usable width of a TOC page."""

        width = self.page_size(self.toc_size_name)[0]
        return width - self.margin_left - self.margin_right
