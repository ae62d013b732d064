"""Heading extraction and table-of-contents pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Sequence

from .blocks import heading_level
from .budget import StepBudget
from .cleaning import plain_text
from .debug import _debug
from .models import HeadingRecord
from .page import Page
from .pdf.render import TocEntryRenderer
from .pdf.styles import build_styles
from .settings import PaginationSettings
from .surface import FlowableSurface, Surface


def heading_id(page_index: int, heading_index: int) -> str:
    """Return the anchor name for a heading.

    Example:
        >>> heading_id(0, 2)
        'heading-0-2'
    """

    return f"heading-{page_index}-{heading_index}"


def _page_headings(
    *, page: Page, page_index: int, max_level: int
) -> Iterator[tuple[int, HeadingRecord]]:
    """Yield (block position, record) for each listed heading on a page.

    Headings are selected by their tag (``h1``..``h<max_level>``); the record
    carries the explicit level when the block has one.
    """

    heading_index = 0
    for position, block in enumerate(page.blocks):
        level = heading_level(block)
        if level is None or int(block.kind[1]) > max_level:
            continue
        yield position, HeadingRecord(
            level=level,
            text=plain_text(block.content),
            stable_id=heading_id(page_index, heading_index),
            page_number=page_index + 1,
        )
        heading_index += 1


def extract_headings(
    pages: Sequence[Page], *, max_level: int = 3
) -> List[HeadingRecord]:
    """Return heading records in page order, then document order within a page.

    Args:
        pages: Content pages in final order.
        max_level: Deepest heading tag to include (3 lists h1 to h3).
    Returns:
        One record per heading with its 1-based page number.
    """

    records: List[HeadingRecord] = []
    for page_index, page in enumerate(pages):
        records.extend(
            record
            for _, record in _page_headings(
                page=page, page_index=page_index, max_level=max_level
            )
        )
    return records


def page_heading_ids(
    page: Page, *, page_index: int, max_level: int = 3
) -> Dict[int, str]:
    """Return stable ids keyed by block position for headings on ``page``."""

    return {
        position: record.stable_id
        for position, record in _page_headings(
            page=page, page_index=page_index, max_level=max_level
        )
    }


@dataclass(slots=True)
class TocPage:
    """One page of table-of-contents entries.

    Args:
        surface: Surface the title and entries are drawn on.
        render: Turns a heading record into a unit for the surface.
        entries: Records placed on this page, top to bottom.
    """

    surface: Surface
    render: Callable[[HeadingRecord], Any]
    title: str | None = None
    entries: List[HeadingRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def add_entry(self, record: HeadingRecord) -> None:
        self.entries.append(record)
        self.surface.append(self.render(record))

    def remove_last_entry(self) -> HeadingRecord | None:
        if not self.entries:
            return None
        self.surface.remove_last()
        return self.entries.pop()

    def is_overflow(self, max_extent: float, tolerance: float) -> bool:
        return self.surface.extent() > max_extent + tolerance


class TocPaginator:
    """Pack heading records onto TOC pages, one whole entry at a time.

    An entry that overflows is rolled back and retried on a new page. One that
    overflows even a fresh page is forced onto it, so every record is placed.

    Args:
        settings: Supplies the TOC page extent, title and tolerance.
        surface_factory: Returns an empty surface per TOC page.
        render: Turns a record into a surface unit.
        render_title: Turns the title into a surface unit; without one, pages
            carry no title.
    """

    def __init__(
        self,
        *,
        settings: PaginationSettings | None = None,
        surface_factory: Callable[[], Surface] | None = None,
        render: Callable[[HeadingRecord], Any] | None = None,
        render_title: Callable[[str], Any] | None = None,
    ) -> None:
        self.settings = settings or PaginationSettings()
        width = self.settings.toc_content_width()
        if render is None:
            renderer = TocEntryRenderer(
                styles=build_styles(self.settings.font_name), width=width
            )
            render = renderer
            render_title = render_title or renderer.title
        self._surface_factory = surface_factory or (
            lambda: FlowableSurface(width=width)
        )
        self._render = render
        self._render_title = render_title
        self.truncated = False

    def paginate(self, records: Sequence[HeadingRecord]) -> List[TocPage]:
        """Lay ``records`` out onto as many TOC pages as needed.

        Args:
            records: Heading records in document order.
        Returns:
            TOC pages in order; at least one, possibly empty.
        """

        max_extent = self.settings.toc_max_extent()
        tolerance = self.settings.overflow_tolerance
        pages: List[TocPage] = []
        page = self._new_page(pages)
        budget = StepBudget.for_items(len(records))
        self.truncated = False

        idx = 0
        while idx < len(records) and not budget.exhausted:
            budget.spend()
            record = records[idx]
            page.add_entry(record)
            if not page.is_overflow(max_extent, tolerance):
                idx += 1
                continue
            page.remove_last_entry()
            if page.is_empty:
                _debug(scope="toc", msg=f"forced TOC entry {record.stable_id} onto page {len(pages)}")
                page.add_entry(record)
                idx += 1
                if idx < len(records):
                    page = self._new_page(pages)
                continue
            page = self._new_page(pages)

        if idx < len(records):
            self.truncated = True
            _debug(scope="toc", msg=f"TOC truncated with {len(records) - idx} entries unplaced")
        return pages

    def _new_page(self, pages: List[TocPage]) -> TocPage:
        title = self.settings.toc_title if self._render_title else None
        page = TocPage(surface=self._surface_factory(), render=self._render, title=title)
        if title:
            page.surface.append(self._render_title(title))
        pages.append(page)
        return page
