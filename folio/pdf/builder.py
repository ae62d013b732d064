"""PDF output for paginated content and TOC pages."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Sequence

from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import (
    BaseDocTemplate,
    Flowable,
    Frame,
    KeepInFrame,
    NextPageTemplate,
    PageBreak,
    PageTemplate,
    Spacer,
)
from tqdm import tqdm

from ..markers import format_page_marker
from ..page import Page
from ..settings import PaginationSettings
from ..toc import TocPage, page_heading_ids
from .render import BlockRenderer, TocEntryRenderer
from .styles import build_styles

MARKER_FONT_SIZE = 9


def build_pdf(
    *,
    pages: Sequence[Page],
    output_path: Path,
    toc_pages: Sequence[TocPage] = (),
    settings: PaginationSettings | None = None,
    styles: Dict[str, ParagraphStyle] | None = None,
    image_root: Path | None = None,
    progress: bool = False,
) -> None:
    """Write one PDF page per TOC page and per content page.

    TOC pages come first. Content pages carry the formatted page marker at the
    bottom, and their headings are anchored so TOC entries link to them.

    Args:
        pages: Content pages from ``PaginationEngine``.
        output_path: Destination file for the generated PDF.
        toc_pages: TOC pages from ``TocPaginator``.
        settings: Geometry and marker options.
        styles: Optional style map override.
        image_root: Directory relative image sources resolve against.
        progress: Show a progress bar while assembling pages.
    Returns:
        None. Writes the generated PDF to ``output_path``.

    Example:
        >>> build_pdf(pages=[], output_path=Path("output/empty.pdf"))  # doctest: +SKIP
    """

    settings = settings or PaginationSettings()
    styles = styles or build_styles(settings.font_name)
    doc = _build_doc(output_path=output_path, settings=settings)
    toc_count = len(toc_pages)
    templates = [
        _content_template(settings=settings, first_content_page=toc_count + 1)
    ]
    if toc_pages:
        templates.insert(0, _toc_template(settings=settings))
    doc.addPageTemplates(templates)

    story: List[Flowable] = []
    story.extend(
        _toc_story(toc_pages=toc_pages, settings=settings, styles=styles)
    )
    story.extend(
        _content_story(
            pages=pages,
            settings=settings,
            styles=styles,
            image_root=image_root,
            progress=progress,
        )
    )
    if story:
        story.pop()
    doc.build(story)


def _build_doc(*, output_path: Path, settings: PaginationSettings) -> BaseDocTemplate:
    """Return a BaseDocTemplate configured with the content page geometry."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    return BaseDocTemplate(
        str(output_path),
        pagesize=settings.page_size(),
        leftMargin=settings.margin_left,
        rightMargin=settings.margin_right,
        topMargin=settings.margin_top,
        bottomMargin=settings.margin_bottom,
    )


def _frame(
    *, page_size: tuple[float, float], height: float, settings: PaginationSettings, frame_id: str
) -> Frame:
    """Return a frame hanging from the top margin, tall enough for the tolerance."""

    page_width, page_height = page_size
    frame_height = height + settings.overflow_tolerance
    return Frame(
        settings.margin_left,
        page_height - settings.margin_top - frame_height,
        page_width - settings.margin_left - settings.margin_right,
        frame_height,
        leftPadding=0,
        rightPadding=0,
        topPadding=0,
        bottomPadding=0,
        id=frame_id,
    )


def _toc_template(*, settings: PaginationSettings) -> PageTemplate:
    page_size = settings.page_size(settings.toc_size_name)
    return PageTemplate(
        id="toc",
        frames=[
            _frame(
                page_size=page_size,
                height=settings.toc_max_extent(),
                settings=settings,
                frame_id="toc-frame",
            )
        ],
        pagesize=page_size,
    )


def _content_template(
    *, settings: PaginationSettings, first_content_page: int
) -> PageTemplate:
    page_size = settings.page_size()
    return PageTemplate(
        id="content",
        frames=[
            _frame(
                page_size=page_size,
                height=settings.max_extent(),
                settings=settings,
                frame_id="content-frame",
            )
        ],
        onPage=_marker_factory(
            settings=settings, first_content_page=first_content_page
        ),
        pagesize=page_size,
    )


def _marker_factory(
    *, settings: PaginationSettings, first_content_page: int
) -> Callable:
    """Create an onPage callback that draws the page marker.

    Args:
        settings: Supplies the marker template and geometry.
        first_content_page: Physical page number of content page 1.
    Returns:
        onPage callback function.
    """

    def draw(canvas, doc):
        ordinal = doc.page - first_content_page + 1
        page_width = settings.page_size()[0]
        canvas.saveState()
        canvas.setFont(settings.font_name, MARKER_FONT_SIZE)
        canvas.drawCentredString(
            page_width / 2,
            settings.margin_bottom / 2,
            format_page_marker(settings.marker_format, ordinal),
        )
        canvas.restoreState()

    return draw


def _toc_story(
    *,
    toc_pages: Sequence[TocPage],
    settings: PaginationSettings,
    styles: Dict[str, ParagraphStyle],
) -> List[Flowable]:
    """Return flowables for the TOC pages, ending with a switch to content."""

    if not toc_pages:
        return []
    width = settings.toc_content_width()
    height = settings.toc_max_extent() + settings.overflow_tolerance
    renderer = TocEntryRenderer(styles=styles, width=width)
    story: List[Flowable] = []
    for idx, toc_page in enumerate(toc_pages):
        flows: List[Flowable] = []
        if toc_page.title:
            flows.append(renderer.title(toc_page.title))
        flows.extend(renderer(record) for record in toc_page.entries)
        story.append(KeepInFrame(width, height, flows, mode="shrink"))
        if idx + 1 == len(toc_pages):
            story.append(NextPageTemplate("content"))
        story.append(PageBreak())
    return story


def _content_story(
    *,
    pages: Sequence[Page],
    settings: PaginationSettings,
    styles: Dict[str, ParagraphStyle],
    image_root: Path | None,
    progress: bool,
) -> List[Flowable]:
    """Return flowables for content pages, each followed by a page break."""

    width = settings.content_width()
    height = settings.max_extent() + settings.overflow_tolerance
    renderer = BlockRenderer(styles=styles, width=width, image_root=image_root)
    story: List[Flowable] = []
    for page_index, page in enumerate(
        tqdm(pages, desc="Rendering pages", unit="page", disable=not progress)
    ):
        anchors = page_heading_ids(
            page, page_index=page_index, max_level=settings.toc_max_level
        )
        flows = [
            renderer.render(block, anchor=anchors.get(position))
            for position, block in enumerate(page.blocks)
        ]
        story.append(KeepInFrame(width, height, flows or [Spacer(1, 0)], mode="shrink"))
        story.append(PageBreak())
    return story
