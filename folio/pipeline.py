"""End-to-end flow: HTML to blocks, pages, headings and TOC pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .blocks import Block
from .classifier import extract_blocks
from .debug import _debug
from .engine import PaginationEngine
from .markers import page_markers
from .models import HeadingRecord
from .page import Page
from .pdf.builder import build_pdf
from .pdf.render import BlockRenderer, TocEntryRenderer
from .pdf.styles import build_styles
from .settings import PaginationSettings
from .toc import TocPage, TocPaginator, extract_headings


@dataclass(slots=True)
class PaginationResult:
    """Everything produced by one pagination run.

    Args:
        pages: Content pages in order.
        headings: Heading records with page numbers.
        toc_pages: TOC pages; empty when the TOC is disabled.
        markers: Formatted page marker per content page.
        truncated: True when the iteration ceiling cut content pagination short.
    """

    pages: List[Page]
    headings: List[HeadingRecord]
    toc_pages: List[TocPage] = field(default_factory=list)
    markers: List[str] = field(default_factory=list)
    truncated: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)


def paginate_blocks(
    blocks: Sequence[Block],
    settings: PaginationSettings | None = None,
    *,
    image_root: Path | None = None,
) -> PaginationResult:
    """Paginate classified blocks and derive the TOC with ReportLab measurement.

    Args:
        blocks: Blocks in document order.
        settings: Pagination options.
        image_root: Directory relative image sources resolve against.
    Returns:
        PaginationResult for the run.
    """

    settings = settings or PaginationSettings()
    styles = build_styles(settings.font_name)
    engine = PaginationEngine(
        settings=settings,
        render=BlockRenderer(
            styles=styles, width=settings.content_width(), image_root=image_root
        ),
    )
    engine.paginate(blocks)
    pages = engine.pages
    headings = extract_headings(pages, max_level=settings.toc_max_level)
    toc_pages: List[TocPage] = []
    if settings.toc_enabled:
        renderer = TocEntryRenderer(styles=styles, width=settings.toc_content_width())
        toc_pages = TocPaginator(
            settings=settings, render=renderer, render_title=renderer.title
        ).paginate(headings)
    if engine.truncated:
        _debug(msg=f"content pagination truncated at {len(pages)} pages")
    return PaginationResult(
        pages=pages,
        headings=headings,
        toc_pages=toc_pages,
        markers=page_markers(len(pages), settings.marker_format),
        truncated=engine.truncated,
    )


def paginate_html(
    html: str,
    settings: PaginationSettings | None = None,
    *,
    image_root: Path | None = None,
) -> PaginationResult:
    """Classify ``html`` into blocks and paginate them."""

    return paginate_blocks(extract_blocks(html), settings, image_root=image_root)


def build_book_pdf(
    html: str,
    output_path: Path,
    settings: PaginationSettings | None = None,
    *,
    image_root: Path | None = None,
    progress: bool = False,
) -> PaginationResult:
    """Paginate ``html`` and write the result to ``output_path`` as a PDF.

    Example:
        >>> build_book_pdf("<h1>Title</h1><p>Body.</p>", Path("output/book.pdf"))  # doctest: +SKIP
    """

    settings = settings or PaginationSettings()
    result = paginate_html(html, settings, image_root=image_root)
    build_pdf(
        pages=result.pages,
        toc_pages=result.toc_pages,
        output_path=output_path,
        settings=settings,
        image_root=image_root,
        progress=progress,
    )
    return result
