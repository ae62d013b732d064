"""
Turn an HTML document into the flat block sequence the paginator consumes.
"""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup, Tag

from .blocks import (
    HEADING_KINDS,
    TEXT_KINDS,
    Block,
    MediaBlock,
    StructuredBlock,
    TextBlock,
    is_empty,
)
from .cleaning import normalize_whitespace
from .pdf.markup import html_dimension

BLOCK_SELECTORS = (
    "p, h1, h2, h3, h4, h5, h6, ul, ol, pre, blockquote, table, .callout, img"
)


def extract_blocks(source: str | Tag, *, skip_empty: bool = True) -> List[Block]:
    """Classify matched elements of ``source`` into blocks, in document order.

    Paragraphs and headings become text blocks carrying their inner markup;
    images become media blocks; lists, tables, quotes, preformatted text and
    callouts become structured blocks holding a markup snapshot. A paragraph
    holding nothing but an image becomes a media block; images next to text
    stay inline in the paragraph markup. Elements nested inside an already
    classified element are skipped.

    Args:
        source: HTML text or an already parsed element.
        skip_empty: Drop blocks with no visible content.
    Returns:
        Blocks in document order.

    Example:
        >>> [b.kind for b in extract_blocks("<h1>T</h1><p>x</p><ul><li><p>y</p></li></ul>")]
        ['h1', 'p', 'ul']
    """

    root = BeautifulSoup(source, "html.parser") if isinstance(source, str) else source
    blocks: List[Block] = []
    claimed: set[int] = set()
    for element in root.select(BLOCK_SELECTORS):
        if any(id(parent) in claimed for parent in element.parents):
            continue
        claimed.add(id(element))
        block = _classify(element)
        if skip_empty and is_empty(block):
            continue
        blocks.append(block)
    return blocks


def _classify(element: Tag) -> Block:
    """Return the block for a single matched element."""

    name = element.name.lower()
    if name == "img":
        return _media_block(element)
    if "callout" in (element.get("class") or []):
        return _structured_block(element, kind="callout")
    if name in TEXT_KINDS:
        image = element.find("img")
        if image is not None and not element.get_text(strip=True):
            return _media_block(image)
        return TextBlock(
            kind=name,
            content=element.decode_contents().strip(),
            level=_actual_level(element),
        )
    return _structured_block(element, kind=name)


def _structured_block(element: Tag, *, kind: str) -> StructuredBlock:
    return StructuredBlock(
        kind=kind,
        html=str(element),
        text=normalize_whitespace(element.get_text(" ")),
    )


def _media_block(element: Tag) -> MediaBlock:
    return MediaBlock(
        src=str(element.get("src") or ""),
        alt=normalize_whitespace(str(element.get("alt") or "")),
        width=html_dimension(element.get("width")),
        height=html_dimension(element.get("height")),
    )


def _actual_level(element: Tag) -> int | None:
    """Return an explicit heading level from ``data-actual-level`` if present."""

    if element.name.lower() not in HEADING_KINDS:
        return None
    raw = element.get("data-actual-level")
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None

