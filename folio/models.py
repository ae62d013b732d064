"""
Typed records derived from paginated content.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HeadingRecord:
    """A heading found on a content page.

    Attributes:
        level: Heading level, 1 for the top level.
        text: Visible heading text.
        stable_id: Anchor name, ``heading-<page index>-<heading index>``.
        page_number: 1-based position of the page holding the heading.
    """

    level: int
    text: str
    stable_id: str
    page_number: int
