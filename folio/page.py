"""A single page: ordered blocks mirrored onto a rendering surface."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List

from .blocks import Block, clone_block
from .constants import OVERFLOW_TOLERANCE
from .surface import Surface


@dataclass(slots=True)
class Page:
    """Blocks in top-to-bottom order plus the surface they are drawn on.

    Every change to ``blocks`` is applied to ``surface`` in the same call, so
    the two never disagree.

    Args:
        surface: Surface the rendered blocks are stacked onto.
        render: Turns a block into a unit the surface accepts.
        blocks: Copies of the blocks placed on this page.
    """

    surface: Surface
    render: Callable[[Block], Any]
    blocks: List[Block] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    def add_block(self, block: Block) -> None:
        """Copy ``block`` onto the page and draw it."""

        copy = clone_block(block)
        self.blocks.append(copy)
        self.surface.append(self.render(copy))

    def remove_last_block(self) -> Block | None:
        """Remove the last block and its drawing.

        Returns:
            The removed block, or None when the page is empty.
        """

        if not self.blocks:
            return None
        self.surface.remove_last()
        return self.blocks.pop()

    def extent(self) -> float:
        return self.surface.extent()

    def is_overflow(
        self, max_extent: float, tolerance: float = OVERFLOW_TOLERANCE
    ) -> bool:
        """Return True when the drawn content exceeds ``max_extent + tolerance``."""

        return self.surface.extent() > max_extent + tolerance
