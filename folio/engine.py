"""Greedy page filling with tail-split overflow correction."""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Any, Callable, Deque, List, Sequence

from .blocks import Block, clone_block, tail_split_point
from .budget import StepBudget
from .debug import _debug
from .page import Page
from .pdf.render import BlockRenderer
from .pdf.styles import build_styles
from .settings import PaginationSettings
from .surface import FlowableSurface, Surface


class PaginationEngine:
    """Lay a flat sequence of blocks out onto pages that never overflow.

    Each step puts the next block on the current page. When the page
    overflows, the block comes back off and its tail is peeled away until the
    remaining head fits; the peeled text starts the next page. A block that
    cannot be fitted at all moves whole to a fresh page, and is forced onto it
    if it does not fit there either. A ``StepBudget`` of six steps per input
    block caps the loop; running out truncates the output and sets
    ``truncated``.

    Args:
        settings: Page geometry and split options.
        surface_factory: Returns an empty surface for each new page. Defaults
            to a ReportLab ``FlowableSurface`` at the content width.
        render: Turns a block into a unit for the surface. Defaults to a
            ``BlockRenderer`` using the settings' font.
    """

    def __init__(
        self,
        *,
        settings: PaginationSettings | None = None,
        surface_factory: Callable[[], Surface] | None = None,
        render: Callable[[Block], Any] | None = None,
    ) -> None:
        self.settings = settings or PaginationSettings()
        self._surface_factory = surface_factory
        self._render = render
        self._pages: List[Page] = []
        self.truncated = False
        self.budget: StepBudget | None = None

    def set_options(
        self, *, book_size: str | None = None, page_height: float | None = None
    ) -> None:
        """Update the book size preset and the fallback page height."""

        if book_size is not None:
            self.settings.book_size = book_size
        if page_height is not None:
            self.settings.page_height = page_height

    @property
    def pages(self) -> List[Page]:
        """Pages produced by the last ``paginate`` call."""

        return list(self._pages)

    def paginate(self, blocks: Sequence[Block]) -> int:
        """Distribute ``blocks`` over pages.

        The caller's blocks are copied first and never modified.

        Args:
            blocks: Blocks in document order.
        Returns:
            Number of pages produced.
        """

        self._pages = []
        self.truncated = False
        max_extent = self.settings.max_extent()
        tolerance = self.settings.overflow_tolerance
        min_length = self.settings.min_split_length
        surface_factory, render = self._collaborators()

        queue: Deque[Block] = deque(clone_block(block) for block in blocks)
        budget = StepBudget.for_items(len(blocks))
        self.budget = budget
        page = self._new_page(surface_factory=surface_factory, render=render)

        while queue and not budget.exhausted:
            budget.spend()
            page.add_block(queue[0])
            if not page.is_overflow(max_extent, tolerance):
                queue.popleft()
                continue

            removed = page.remove_last_block()
            if removed is None:
                _debug(msg="pagination aborted: overflow reported on an empty page")
                self.truncated = True
                break

            tail = _place_fitting_head(
                page=page,
                block=removed,
                max_extent=max_extent,
                tolerance=tolerance,
                min_length=min_length,
            )
            if tail is not None:
                queue[0] = tail
                page = self._new_page(surface_factory=surface_factory, render=render)
                continue

            if page.is_empty:
                _debug(
                    msg=f"forced {removed.kind} block onto page {len(self._pages)}"
                )
                page.add_block(removed)
                queue.popleft()
                if queue:
                    page = self._new_page(
                        surface_factory=surface_factory, render=render
                    )
                continue

            queue[0] = removed
            page = self._new_page(surface_factory=surface_factory, render=render)

        if queue:
            self.truncated = True
            _debug(
                msg=(
                    f"pagination truncated after {budget.spent} steps; "
                    f"{len(queue)} blocks left unplaced"
                )
            )
        return len(self._pages)

    def _collaborators(
        self,
    ) -> tuple[Callable[[], Surface], Callable[[Block], Any]]:
        """Return the surface factory and renderer, building defaults if needed."""

        width = self.settings.content_width()
        surface_factory = self._surface_factory or (
            lambda: FlowableSurface(width=width)
        )
        render = self._render or BlockRenderer(
            styles=build_styles(self.settings.font_name), width=width
        )
        return surface_factory, render

    def _new_page(
        self,
        *,
        surface_factory: Callable[[], Surface],
        render: Callable[[Block], Any],
    ) -> Page:
        page = Page(surface=surface_factory(), render=render)
        self._pages.append(page)
        _debug(msg=f"opened page {len(self._pages)}")
        return page


def _place_fitting_head(
    *,
    page: Page,
    block: Block,
    max_extent: float,
    tolerance: float,
    min_length: int,
) -> Block | None:
    """Put the longest head of ``block`` that fits onto ``page``.

    Each retry cuts the previous head shorter. Offsets always refer to the
    original content, so the returned tail is the untouched rest of it.

    Returns:
        The remaining tail when a head fit, else None with the page left as it
        was.
    """

    content = block.content
    end = len(content)
    while True:
        point = tail_split_point(replace(block, content=content[:end]), min_length)
        if point is None:
            return None
        page.add_block(replace(block, content=content[:point].strip()))
        if not page.is_overflow(max_extent, tolerance):
            return replace(block, content=content[point:].strip())
        page.remove_last_block()
        end = len(content[:point].rstrip())
