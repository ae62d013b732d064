"""Shared constants for pagination and layout."""

from __future__ import annotations

import os

SENTENCE_TERMINATORS = frozenset("。！？；.?!;")
DEFAULT_MIN_SPLIT_LENGTH = 40
OVERFLOW_TOLERANCE = 20.0
ITERATION_FACTOR = 6
DEFAULT_PAGE_HEIGHT = 600.0
DEFAULT_MARKER_FORMAT = "- {page} -"
PAGE_PLACEHOLDER = "{page}"
PAGE_ORDINAL_WIDTH = 3
DEBUG_PAGINATION = os.getenv("DEBUG_PAGINATION", "0") not in {
    "",
    "0",
    "false",
    "False",
}
