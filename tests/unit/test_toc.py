from folio.blocks import StructuredBlock, TextBlock
from folio.engine import PaginationEngine
from folio.models import HeadingRecord
from folio.page import Page
from folio.settings import PaginationSettings
from folio.surface import MeasuredSurface
from folio.toc import TocPaginator, extract_headings, heading_id, page_heading_ids


def _content_page(*blocks):
    page = Page(surface=MeasuredSurface(measure=lambda unit: 0.0), render=lambda block: block)
    for block in blocks:
        page.add_block(block)
    return page


def _records(count):
    return [
        HeadingRecord(level=1, text=f"Chapter {n}", stable_id=heading_id(n, 0), page_number=n + 1)
        for n in range(count)
    ]


def _paginator(*, height, unit_height=10.0, render_title=None, title="Contents"):
    settings = PaginationSettings(
        book_size="synthetic", page_height=height, overflow_tolerance=0, toc_title=title
    )
    return TocPaginator(
        settings=settings,
        surface_factory=lambda: MeasuredSurface(measure=lambda unit: unit_height),
        render=lambda record: record,
        render_title=render_title,
    )


def test_extract_headings_in_page_then_document_order():
    pages = [
        _content_page(TextBlock("h1", "Intro"), TextBlock("p", "body"), TextBlock("h2", "<em>First</em>  part")),
        _content_page(TextBlock("p", "more")),
        _content_page(TextBlock("h3", "Detail"), TextBlock("h4", "Too deep"), TextBlock("h2", "Second")),
    ]
    records = extract_headings(pages)
    assert records == [
        HeadingRecord(1, "Intro", "heading-0-0", 1),
        HeadingRecord(2, "First part", "heading-0-1", 1),
        HeadingRecord(3, "Detail", "heading-2-0", 3),
        HeadingRecord(2, "Second", "heading-2-1", 3),
    ]


def test_extract_headings_selects_by_tag_and_reports_explicit_level():
    page = _content_page(
        TextBlock("h4", "Promoted", level=2),
        TextBlock("h2", "Demoted", level=5),
        TextBlock("h3", "Plain"),
    )
    records = extract_headings([page], max_level=3)
    assert [(r.text, r.level) for r in records] == [("Demoted", 5), ("Plain", 3)]
    assert [r.text for r in extract_headings([page], max_level=4)] == ["Promoted", "Demoted", "Plain"]


def test_page_heading_ids_match_records():
    page = _content_page(TextBlock("p", "x"), TextBlock("h2", "A"), StructuredBlock("table", "", ""), TextBlock("h3", "B"))
    assert page_heading_ids(page, page_index=4) == {1: "heading-4-0", 3: "heading-4-1"}


def test_page_numbers_are_monotonic_over_engine_output():
    settings = PaginationSettings(book_size="synthetic", page_height=50, overflow_tolerance=0)
    engine = PaginationEngine(
        settings=settings,
        surface_factory=lambda: MeasuredSurface(measure=lambda block: len(block.content)),
        render=lambda block: block,
    )
    blocks = []
    for n in range(6):
        blocks.append(TextBlock("h1", f"Chapter {n}"))
        blocks.append(TextBlock("p", "Words in a row. " * 3))
    engine.paginate(blocks)
    records = extract_headings(engine.pages)
    numbers = [r.page_number for r in records]
    assert len(records) == 6
    assert numbers == sorted(numbers)
    assert 1 <= numbers[0] and numbers[-1] <= len(engine.pages)


def test_five_entries_three_per_page():
    records = _records(5)
    pages = _paginator(height=30).paginate(records)
    assert [page.entries for page in pages] == [records[:3], records[3:]]


def test_title_takes_room_on_every_page():
    records = _records(5)
    pages = _paginator(height=30, render_title=lambda title: title).paginate(records)
    assert [len(page.entries) for page in pages] == [2, 2, 1]
    assert all(page.title == "Contents" for page in pages)
    assert pages[0].surface.units[0] == "Contents"


def test_entry_larger_than_page_is_forced():
    records = _records(3)
    paginator = _paginator(height=30, unit_height=50)
    pages = paginator.paginate(records)
    assert [page.entries for page in pages] == [[r] for r in records]
    assert not paginator.truncated


def test_no_records_gives_one_empty_page():
    pages = _paginator(height=30).paginate([])
    assert len(pages) == 1
    assert pages[0].is_empty
