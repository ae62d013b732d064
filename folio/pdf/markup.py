"""Convert HTML fragments into ReportLab's paragraph markup."""

from __future__ import annotations

import re
from pathlib import Path

from bs4 import BeautifulSoup, Tag

PX_TO_PT = 0.75

_RENAMES = {
    "strong": "b",
    "em": "i",
    "s": "strike",
    "del": "strike",
    "ins": "u",
    "mark": "u",
}
_MONOSPACE = {"code", "kbd", "samp", "tt"}
_KEEP = {"b", "i", "u", "strike", "sup", "sub", "br"}
_BREAK_AFTER = {
    "p",
    "div",
    "li",
    "tr",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "blockquote",
}
_FONT_ATTRS = {"name", "face", "size", "color"}
_TRAILING_BREAKS = re.compile(r"(?:\s*<br\s*/?>\s*)+$")
_DIMENSION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def reportlab_markup(
    html: str, *, monospace_font: str = "Courier", image_root: Path | None = None
) -> str:
    """Return ``html`` rewritten for ``reportlab.platypus.Paragraph``.

    Tags are balanced by the parser, inline tags map onto ReportLab's names,
    block-level tags become line breaks, in-document links and anything else
    unsupported are unwrapped to their text. Inline images that resolve to a
    local file stay inline; others are replaced by their alt text.

    Args:
        html: HTML fragment.
        monospace_font: Font used for ``code``-like tags.
        image_root: Directory relative image sources resolve against.
    Returns:
        Paragraph markup.

    Example:
        >>> reportlab_markup('<strong class="x">A</strong> <em>b</em>')
        '<b>A</b> <i>b</i>'
        >>> reportlab_markup("<b>open")
        '<b>open</b>'
        >>> reportlab_markup('<a href="#n1">note</a>')
        'note'
        >>> reportlab_markup('See <img src="https://x.org/a.png" alt="chart">.')
        'See [chart].'
    """

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(True):
        name = _RENAMES.get(tag.name.lower(), tag.name.lower())
        if name in _MONOSPACE:
            tag.name = "font"
            tag.attrs = {"face": monospace_font}
        elif name == "a":
            _rewrite_link(tag)
        elif name == "img":
            _rewrite_image(tag, image_root=image_root)
        elif name == "font":
            tag.attrs = {k: v for k, v in tag.attrs.items() if k in _FONT_ATTRS}
        elif name in _KEEP:
            tag.name = name
            tag.attrs = {}
        else:
            if name in _BREAK_AFTER and tag.next_sibling is not None:
                tag.insert_after(soup.new_tag("br"))
            tag.unwrap()
    return _TRAILING_BREAKS.sub("", soup.decode_contents().strip())


def resolve_image_path(src: str, image_root: Path | None = None) -> Path | None:
    """Return a readable local file for ``src``; remote and inline data yield None.

    Example:
        >>> resolve_image_path("data:image/png;base64,AAAA") is None
        True
    """

    if not src or "://" in src or src.startswith("data:"):
        return None
    path = Path(src)
    if not path.is_absolute() and image_root is not None:
        path = image_root / path
    return path if path.is_file() else None


def html_dimension(value: object) -> float | None:
    """Parse an HTML width/height attribute such as ``"240"`` or ``"240px"``.

    Example:
        >>> html_dimension("240px")
        240.0
        >>> html_dimension("auto") is None
        True
    """

    if not isinstance(value, str):
        return None
    match = _DIMENSION_RE.match(value)
    return float(match.group(1)) if match else None


def _rewrite_link(tag: Tag) -> None:
    """Keep external hrefs; unwrap anchors and in-document links."""

    href = tag.get("href")
    if isinstance(href, str) and href and not href.startswith("#"):
        tag.attrs = {"href": href}
        return
    tag.unwrap()


def _rewrite_image(tag: Tag, *, image_root: Path | None) -> None:
    """Point an inline image at its local file, or fall back to its alt text."""

    path = resolve_image_path(str(tag.get("src") or ""), image_root)
    if path is None:
        alt = str(tag.get("alt") or "").strip()
        if alt:
            tag.replace_with(f"[{alt}]")
        else:
            tag.decompose()
        return
    attrs = {"src": str(path), "valign": "middle"}
    for key in ("width", "height"):
        size = html_dimension(tag.get(key))
        if size is not None:
            attrs[key] = f"{size * PX_TO_PT:g}"
    tag.attrs = attrs
