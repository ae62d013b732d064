import pytest

from folio.blocks import BlockVariant, MediaBlock, StructuredBlock, TextBlock
from folio.engine import PaginationEngine
from folio.settings import PaginationSettings
from folio.surface import MeasuredSurface


def _measure(block):
    if block.variant is BlockVariant.TEXT:
        return float(len(block.content))
    if block.variant is BlockVariant.STRUCTURED:
        return float(len(block.text))
    return float(block.height or 0.0)


def _engine(*, height, tolerance=20.0, min_length=40):
    settings = PaginationSettings(
        book_size="synthetic",
        page_height=height,
        overflow_tolerance=tolerance,
        min_split_length=min_length,
    )
    return PaginationEngine(
        settings=settings,
        surface_factory=lambda: MeasuredSurface(measure=_measure),
        render=lambda block: block,
    )


def _squash(text):
    return "".join(text.split())


def test_long_block_splits_at_terminator_across_two_pages():
    content = "a" * 55 + ". " + "b" * 43
    engine = _engine(height=40)
    assert engine.paginate([TextBlock("p", content)]) == 2
    first, second = engine.pages
    assert [b.content for b in first.blocks] == ["a" * 55 + "."]
    assert [b.content for b in second.blocks] == ["b" * 43]
    assert not engine.truncated


def test_atomic_blocks_move_whole_to_next_page():
    blocks = [StructuredBlock("table", "<table/>", "t" * 35) for _ in range(3)]
    engine = _engine(height=40)
    engine.paginate(blocks)
    assert all(1 <= len(page.blocks) <= 2 for page in engine.pages)
    placed = [block for page in engine.pages for block in page.blocks]
    assert placed == blocks


def test_unsplittable_oversized_block_is_forced_onto_one_page():
    block = TextBlock("p", "x" * 200)
    engine = _engine(height=10)
    assert engine.paginate([block]) == 1
    assert engine.pages[0].blocks == [block]
    assert not engine.truncated
    assert engine.budget.spent < engine.budget.limit


def test_oversized_block_mid_stream_gets_its_own_page():
    blocks = [
        TextBlock("p", "short one"),
        MediaBlock("poster.png", height=500),
        TextBlock("p", "short two"),
    ]
    engine = _engine(height=40)
    assert engine.paginate(blocks) == 3
    assert [len(page.blocks) for page in engine.pages] == [1, 1, 1]
    assert engine.pages[1].blocks == [blocks[1]]


def test_repeated_peeling_keeps_every_sentence():
    sentence = "abcdefghi."
    block = TextBlock("p", " ".join([sentence] * 10))
    engine = _engine(height=30, tolerance=0, min_length=10)
    assert engine.paginate([block]) == 5
    for page in engine.pages:
        assert [b.content for b in page.blocks] == [f"{sentence} {sentence}"]


def test_pages_never_overflow_and_content_is_conserved():
    paragraphs = []
    for idx in range(12):
        sentences = [f"Sentence {idx}-{n} says a little." for n in range(2 + idx % 5 * 3)]
        paragraphs.append(TextBlock("p", " ".join(sentences)))
    paragraphs.insert(4, TextBlock("h2", "A heading"))
    paragraphs.insert(9, StructuredBlock("table", "<table/>", "cell " * 20))
    engine = _engine(height=200, min_length=10)
    engine.paginate(paragraphs)

    assert not engine.truncated
    max_extent = engine.settings.max_extent()
    for page in engine.pages:
        assert page.extent() <= max_extent + engine.settings.overflow_tolerance
        assert page.blocks
    placed = "".join(b.content if b.variant is BlockVariant.TEXT else b.text for page in engine.pages for b in page.blocks)
    source = "".join(b.content if b.variant is BlockVariant.TEXT else b.text for b in paragraphs)
    # cuts land after a terminator, where the following space is trimmed
    assert _squash(placed) == _squash(source)


def test_caller_blocks_are_not_consumed():
    blocks = [TextBlock("p", "Sentence goes on. " * 12)]
    engine = _engine(height=60, min_length=10)
    engine.paginate(blocks)
    assert blocks == [TextBlock("p", "Sentence goes on. " * 12)]
    assert all(b is not blocks[0] for page in engine.pages for b in page.blocks)


def test_empty_input_yields_single_empty_page():
    engine = _engine(height=100)
    assert engine.paginate([]) == 1
    assert engine.pages[0].is_empty
    assert not engine.truncated


def test_zero_height_pages_still_terminate():
    blocks = [StructuredBlock("ul", "<ul/>", "item") for _ in range(3)]
    engine = _engine(height=0, tolerance=0)
    assert engine.paginate(blocks) == 3
    assert [len(page.blocks) for page in engine.pages] == [1, 1, 1]


def test_iteration_ceiling_truncates_silently():
    block = TextBlock("p", "Tiny sentence. " * 150)
    engine = _engine(height=80, min_length=10)
    pages = engine.paginate([block])
    assert engine.truncated
    assert engine.budget.exhausted
    assert pages == len(engine.pages) <= engine.budget.limit + 1


def test_set_options_switches_to_fallback_height():
    engine = _engine(height=100)
    engine.set_options(book_size="a5")
    assert engine.settings.max_extent() == pytest.approx(engine.settings.page_size()[1] - 108)
    engine.set_options(book_size="unknown", page_height=55)
    assert engine.settings.max_extent() == 55.0


def test_repeat_paginate_resets_pages():
    engine = _engine(height=100)
    engine.paginate([TextBlock("p", "one")])
    engine.paginate([TextBlock("p", "two")])
    assert len(engine.pages) == 1
    assert engine.pages[0].blocks[0].content == "two"


@pytest.mark.parametrize(
    "text",
    [
        "一" * 200,
        "这是第一句话测试内容。" * 20,
    ],
)
def test_text_without_spaces_is_reproduced_exactly(text):
    engine = _engine(height=50, min_length=10)
    engine.paginate([TextBlock("p", text)])

    assert not engine.truncated
    assert len(engine.pages) > 2
    placed = "".join(b.content for page in engine.pages for b in page.blocks)
    assert placed == text


def test_tail_after_several_cuts_keeps_original_spacing():
    text = "One. Two.  Three!\tFour? " + "x" * 30
    engine = _engine(height=12, tolerance=0, min_length=4)
    engine.paginate([TextBlock("p", text)])

    first, second = engine.pages[:2]
    assert [b.content for b in first.blocks] == ["One. Two."]
    assert [b.content for b in second.blocks] == ["Three!\tFour?"]
