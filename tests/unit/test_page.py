from folio.blocks import StructuredBlock, TextBlock
from folio.page import Page
from folio.surface import MeasuredSurface


def _page():
    return Page(surface=MeasuredSurface(measure=lambda block: len(block.content)), render=lambda block: block)


def test_add_block_copies_and_draws():
    page = _page()
    block = TextBlock("p", "x" * 30)
    page.add_block(block)
    assert page.blocks == [block]
    assert page.blocks[0] is not block
    assert page.surface.units == page.blocks
    assert page.extent() == 30.0


def test_remove_last_block_keeps_surface_in_step():
    page = _page()
    page.add_block(TextBlock("p", "aaa"))
    page.add_block(TextBlock("p", "bb"))
    removed = page.remove_last_block()
    assert removed.content == "bb"
    assert [b.content for b in page.blocks] == ["aaa"]
    assert len(page.surface.units) == 1
    assert page.extent() == 3.0


def test_remove_from_empty_page_returns_none():
    page = _page()
    assert page.remove_last_block() is None
    assert page.is_empty


def test_overflow_respects_tolerance():
    page = _page()
    page.add_block(TextBlock("p", "x" * 115))
    assert not page.is_overflow(100)
    assert not page.is_overflow(95)
    assert page.is_overflow(94)
    assert page.is_overflow(100, tolerance=0)


def test_atomic_blocks_measure_through_render():
    page = Page(
        surface=MeasuredSurface(measure=lambda unit: unit),
        render=lambda block: 42.0,
    )
    page.add_block(StructuredBlock("table", "<table/>", ""))
    assert page.extent() == 42.0
