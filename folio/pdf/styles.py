"""Paragraph styles for rendered pages."""

from __future__ import annotations

from typing import Dict

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet

_BOLD_NAMES = {
    "Times-Roman": "Times-Bold",
    "Helvetica": "Helvetica-Bold",
    "Courier": "Courier-Bold",
}
_ITALIC_NAMES = {
    "Times-Roman": "Times-Italic",
    "Helvetica": "Helvetica-Oblique",
    "Courier": "Courier-Oblique",
}
_HEADING_SIZES = (20.0, 16.0, 13.5, 12.0, 11.0, 10.5)


def bold_font(font_name: str) -> str:
    return _BOLD_NAMES.get(font_name, f"{font_name}-Bold")


def italic_font(font_name: str) -> str:
    return _ITALIC_NAMES.get(font_name, f"{font_name}-Italic")


def build_styles(font_name: str = "Times-Roman") -> Dict[str, ParagraphStyle]:
    """Create paragraph styles used for content and TOC pages.

    Args:
        font_name: Base font name registered with ReportLab.
    Returns:
        Mapping of style keys to ParagraphStyle objects.

    Example:
        >>> styles = build_styles()
        >>> sorted(k for k in styles if k.startswith("h"))
        ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']
    """

    base = getSampleStyleSheet()
    body = ParagraphStyle(
        "body",
        parent=base["BodyText"],
        fontName=font_name,
        fontSize=10.5,
        leading=13.5,
        alignment=TA_JUSTIFY,
        spaceBefore=0,
        spaceAfter=6,
    )
    styles: Dict[str, ParagraphStyle] = {"body": body}
    styles.update(_heading_styles(body=body, font_name=font_name))
    styles.update(_structured_styles(body=body, font_name=font_name))
    styles.update(_toc_styles(body=body, font_name=font_name))
    return styles


def _heading_styles(
    *, body: ParagraphStyle, font_name: str
) -> Dict[str, ParagraphStyle]:
    """Return ``h1``..``h6`` styles, shrinking with depth."""

    result: Dict[str, ParagraphStyle] = {}
    for level, size in enumerate(_HEADING_SIZES, start=1):
        result[f"h{level}"] = ParagraphStyle(
            f"h{level}",
            parent=body,
            fontName=bold_font(font_name),
            fontSize=size,
            leading=size * 1.25,
            alignment=TA_CENTER if level == 1 else TA_LEFT,
            spaceBefore=size * 0.6,
            spaceAfter=size * 0.4,
        )
    return result


def _structured_styles(
    *, body: ParagraphStyle, font_name: str
) -> Dict[str, ParagraphStyle]:
    """Return styles for quotes, callouts, code, lists, tables and captions."""

    quote = ParagraphStyle(
        "quote",
        parent=body,
        fontName=italic_font(font_name),
        leftIndent=18,
        rightIndent=18,
        textColor=colors.HexColor("#444444"),
    )
    callout = ParagraphStyle(
        "callout",
        parent=body,
        backColor=colors.HexColor("#f2f2f2"),
        borderColor=colors.HexColor("#bbbbbb"),
        borderWidth=0.5,
        borderPadding=6,
        leftIndent=6,
        rightIndent=6,
        spaceBefore=6,
        spaceAfter=12,
    )
    code = ParagraphStyle(
        "code",
        parent=body,
        fontName="Courier",
        fontSize=9,
        leading=11,
        alignment=TA_LEFT,
        leftIndent=12,
    )
    list_item = ParagraphStyle(
        "list_item",
        parent=body,
        alignment=TA_LEFT,
        leftIndent=18,
        bulletIndent=6,
        spaceAfter=2,
    )
    table_cell = ParagraphStyle(
        "table_cell",
        parent=body,
        fontSize=9.5,
        leading=11.5,
        alignment=TA_LEFT,
        spaceAfter=0,
    )
    table_header = ParagraphStyle(
        "table_header", parent=table_cell, fontName=bold_font(font_name)
    )
    caption = ParagraphStyle(
        "caption",
        parent=body,
        fontName=italic_font(font_name),
        fontSize=9,
        leading=11,
        alignment=TA_CENTER,
    )
    return {
        "quote": quote,
        "callout": callout,
        "code": code,
        "list_item": list_item,
        "table_cell": table_cell,
        "table_header": table_header,
        "caption": caption,
    }


def _toc_styles(*, body: ParagraphStyle, font_name: str) -> Dict[str, ParagraphStyle]:
    """Return styles for the TOC title, entries and page references."""

    toc_title = ParagraphStyle(
        "toc_title",
        parent=body,
        fontName=bold_font(font_name),
        fontSize=18,
        leading=22,
        alignment=TA_CENTER,
        spaceAfter=14,
    )
    toc_entry = ParagraphStyle(
        "toc_entry", parent=body, alignment=TA_LEFT, spaceAfter=0
    )
    toc_page_ref = ParagraphStyle(
        "toc_page_ref", parent=toc_entry, alignment=TA_RIGHT
    )
    return {
        "toc_title": toc_title,
        "toc_entry": toc_entry,
        "toc_page_ref": toc_page_ref,
    }
