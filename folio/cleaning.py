"""
Small, focused text cleaning utilities.
"""

import re

from bs4 import BeautifulSoup

_INVISIBLE = dict.fromkeys(map(ord, "\u200b\u200c\u200d\u2060\ufeff"))
_NARROW_SPACES = str.maketrans("\u00a0\u2007\u202f", "   ")
_RUNS = re.compile(r"\s+")


def normalize_whitespace(value: str) -> str:
    """Drop invisible characters and collapse whitespace runs to one space.

    Example:
        >>> normalize_whitespace(" a\\u00a0b\\u200bb\\n ")
        'a bb'
    """

    clean = value.translate(_INVISIBLE).translate(_NARROW_SPACES)
    return _RUNS.sub(" ", clean).strip()


def plain_text(html: str) -> str:
    """Return the visible text of an HTML fragment with normalized whitespace.

    Example:
        >>> plain_text("<b>Chapter</b>  One")
        'Chapter One'
    """

    if "<" not in html and "&" not in html:
        return normalize_whitespace(html)
    return normalize_whitespace(BeautifulSoup(html, "html.parser").get_text())
