"""Page-number marker formatting."""

from __future__ import annotations

from typing import List

from .constants import DEFAULT_MARKER_FORMAT, PAGE_ORDINAL_WIDTH, PAGE_PLACEHOLDER


def format_page_ordinal(number: int) -> str:
    """Return a zero-padded page ordinal.

    Example:
        >>> format_page_ordinal(7)
        '007'
        >>> format_page_ordinal(1234)
        '1234'
    """

    return str(number).zfill(PAGE_ORDINAL_WIDTH)


def format_page_marker(template: str, number: int) -> str:
    """Substitute the padded ordinal into ``template``.

    Example:
        >>> format_page_marker("Page {page}", 12)
        'Page 012'
    """

    return template.replace(PAGE_PLACEHOLDER, format_page_ordinal(number))


def page_markers(count: int, template: str = DEFAULT_MARKER_FORMAT) -> List[str]:
    """Return the marker text for pages ``1..count``."""

    return [format_page_marker(template, number) for number in range(1, count + 1)]
