"""Content blocks that take part in pagination.

Blocks come in three variants. Text blocks (paragraphs and headings) can be cut
at the tail and glued back together; structured blocks (lists, tables, quotes,
preformatted text, callouts) and media blocks are atomic. Every block is an
immutable value, so splitting hands back new blocks instead of shrinking one in
place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar, List, Union

from .cleaning import plain_text
from .constants import DEFAULT_MIN_SPLIT_LENGTH, SENTENCE_TERMINATORS

HEADING_KINDS = ("h1", "h2", "h3", "h4", "h5", "h6")
TEXT_KINDS = ("p", *HEADING_KINDS)

_ENTITY_RE = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")


class BlockVariant(Enum):
    """Capability tag shared by every block."""

    TEXT = "text"
    STRUCTURED = "structured"
    MEDIA = "media"


@dataclass(frozen=True, slots=True)
class TextBlock:
    """Splittable paragraph or heading.

    Args:
        kind: Source tag, ``p`` or ``h1``..``h6``.
        content: Inner markup, kept verbatim.
        level: Explicit heading level overriding the tag-derived one.
    """

    variant: ClassVar[BlockVariant] = BlockVariant.TEXT

    kind: str
    content: str
    level: int | None = None


@dataclass(frozen=True, slots=True)
class StructuredBlock:
    """Atomic list, table, quote, preformatted or callout block.

    Args:
        kind: Source kind (``ul``, ``ol``, ``table``, ``pre``, ``blockquote``,
            ``callout`` or ``div``).
        html: Outer markup snapshot taken at classification time.
        text: Visible text snapshot.
    """

    variant: ClassVar[BlockVariant] = BlockVariant.STRUCTURED

    kind: str
    html: str
    text: str


@dataclass(frozen=True, slots=True)
class MediaBlock:
    """Atomic image block."""

    variant: ClassVar[BlockVariant] = BlockVariant.MEDIA

    src: str
    alt: str = ""
    width: float | None = None
    height: float | None = None
    kind: str = "img"


Block = Union[TextBlock, StructuredBlock, MediaBlock]


def is_splittable(block: Block) -> bool:
    """Return True when the block supports tail splitting and merging."""

    return block.variant is BlockVariant.TEXT


def is_empty(block: Block) -> bool:
    """Return True when the block has nothing visible to render.

    Example:
        >>> is_empty(TextBlock("p", "  "))
        True
        >>> is_empty(MediaBlock("cover.png"))
        False
    """

    if block.variant is BlockVariant.TEXT:
        return not plain_text(block.content)
    if block.variant is BlockVariant.STRUCTURED:
        return not block.text.strip()
    return False


def clone_block(block: Block) -> Block:
    """Return an independent copy of ``block``."""

    return replace(block)


def heading_level(block: Block) -> int | None:
    """Return the heading level of a text block, or None for other blocks.

    Example:
        >>> heading_level(TextBlock("h2", "Intro"))
        2
        >>> heading_level(TextBlock("h1", "Intro", level=3))
        3
        >>> heading_level(TextBlock("p", "Body")) is None
        True
    """

    if block.variant is not BlockVariant.TEXT or block.kind not in HEADING_KINDS:
        return None
    if block.level is not None:
        return block.level
    return int(block.kind[1])


def tail_split_point(
    block: Block, min_length: int = DEFAULT_MIN_SPLIT_LENGTH
) -> int | None:
    """Return the offset in ``block.content`` where its tail would be cut.

    The cut lands one past the last sentence terminator found while scanning
    backward from ``len - min_length`` to ``min_length``. Without a terminator
    the cut falls on the midpoint. Terminators inside markup tags or character
    entities are ignored, and a midpoint inside either moves back to its start.

    Args:
        block: Block to inspect.
        min_length: Minimum characters each side must keep.
    Returns:
        The cut offset, or None when the block is atomic, at most
        ``2 * min_length`` long, or would leave an empty head or a trimmed
        tail shorter than ``min_length``.

    Example:
        >>> tail_split_point(TextBlock("p", "a" * 50 + ". " + "b" * 48))
        51
        >>> tail_split_point(TextBlock("p", "short")) is None
        True
    """

    if block.variant is not BlockVariant.TEXT:
        return None
    content = block.content
    if len(content) <= min_length * 2:
        return None
    mask = _markup_mask(content)
    point = _terminator_split_point(content, min_length=min_length, mask=mask)
    if point is None:
        point = _safe_split_point(point=len(content) // 2, mask=mask)
    tail = content[point:].strip()
    if not content[:point].strip() or len(tail) < min_length:
        return None
    return point


def split_tail(
    block: Block, min_length: int = DEFAULT_MIN_SPLIT_LENGTH
) -> tuple[Block, Block] | None:
    """Cut the tail off a text block at ``tail_split_point``.

    Both halves are stripped of surrounding whitespace.

    Args:
        block: Block to split. It is not modified.
        min_length: Minimum characters each side must keep.
    Returns:
        ``(head, tail)``, or None when the block cannot be split.

    Example:
        >>> text = "a" * 50 + ". " + "b" * 48
        >>> head, tail = split_tail(TextBlock("p", text))
        >>> head.content[-1], len(tail.content)
        ('.', 48)
    """

    point = tail_split_point(block, min_length)
    if point is None:
        return None
    content = block.content
    return (
        replace(block, content=content[:point].strip()),
        replace(block, content=content[point:].strip()),
    )


def merge_tail(block: Block, other: Block) -> Block:
    """Append ``other``'s content to the end of ``block``.

    Only text blocks of the same kind merge; anything else returns ``block``
    unchanged. Contents are concatenated as they are, with no separator.

    Example:
        >>> merge_tail(TextBlock("p", "一二"), TextBlock("p", "三。")).content
        '一二三。'
        >>> table = StructuredBlock("table", "<table></table>", "")
        >>> merge_tail(table, TextBlock("p", "x")) is table
        True
    """

    if not (is_splittable(block) and is_splittable(other)):
        return block
    if block.kind != other.kind:
        return block
    return replace(block, content=block.content + other.content)


def _markup_mask(content: str) -> List[bool]:
    """Flag every position inside a markup tag or a character entity."""

    mask: List[bool] = []
    inside = False
    for idx, ch in enumerate(content):
        if ch == "<" and _opens_tag(content, idx):
            inside = True
        mask.append(inside)
        if ch == ">":
            inside = False
    for match in _ENTITY_RE.finditer(content):
        mask[match.start() : match.end()] = [True] * (match.end() - match.start())
    return mask


def _opens_tag(content: str, idx: int) -> bool:
    """Return True when ``<`` at ``idx`` starts a tag rather than literal text."""

    if idx + 1 >= len(content):
        return False
    nxt = content[idx + 1]
    return nxt.isalpha() or nxt in "/!"


def _terminator_split_point(
    content: str, *, min_length: int, mask: List[bool]
) -> int | None:
    """Return one past the last terminator inside the split window."""

    start = min(len(content) - min_length, len(content) - 1)
    for idx in range(start, min_length - 1, -1):
        if content[idx] in SENTENCE_TERMINATORS and not mask[idx]:
            return idx + 1
    return None


def _safe_split_point(*, point: int, mask: List[bool]) -> int:
    """Move ``point`` back to the start of any tag or entity it falls inside."""

    while 0 < point < len(mask) and mask[point] and mask[point - 1]:
        point -= 1
    return point
