"""Render blocks and TOC entries into ReportLab flowables."""

from __future__ import annotations

import html as htmllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from bs4 import BeautifulSoup, Tag
from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import (
    Flowable,
    Image,
    KeepTogether,
    Paragraph,
    Preformatted,
    Table,
    TableStyle,
)

from ..blocks import (
    Block,
    BlockVariant,
    MediaBlock,
    StructuredBlock,
    TextBlock,
    heading_level,
)
from ..markers import format_page_ordinal
from ..models import HeadingRecord
from .markup import PX_TO_PT, reportlab_markup, resolve_image_path

DEFAULT_MEDIA_HEIGHT = 120.0
COURIER_ADVANCE = 0.6


@dataclass(slots=True)
class BlockRenderer:
    """Render a block as a single flowable sized for a frame width.

    Args:
        styles: Style map from ``build_styles``.
        width: Frame width in points.
        image_root: Directory relative image sources resolve against.
    """

    styles: Dict[str, ParagraphStyle]
    width: float
    image_root: Path | None = None

    def __call__(self, block: Block) -> Flowable:
        return self.render(block)

    def render(self, block: Block, *, anchor: str | None = None) -> Flowable:
        """Return the flowable for ``block``.

        Args:
            block: Block to render.
            anchor: Destination name to attach to a text block.
        Returns:
            One flowable.
        """

        if block.variant is BlockVariant.TEXT:
            return self._text(block, anchor=anchor)
        if block.variant is BlockVariant.STRUCTURED:
            return self._structured(block)
        return self._media(block)

    def _text(self, block: TextBlock, *, anchor: str | None) -> Paragraph:
        level = heading_level(block)
        if level is None:
            style = self.styles.get(block.kind, self.styles["body"])
        else:
            style = self.styles[f"h{max(1, min(level, 6))}"]
        markup = self._markup(block.content)
        if anchor:
            markup = f'<a name="{anchor}"/>{markup}'
        return Paragraph(markup, style)

    def _structured(self, block: StructuredBlock) -> Flowable:
        root = BeautifulSoup(block.html, "html.parser").find(True)
        if not isinstance(root, Tag):
            return self._plain(block.text)
        if block.kind in ("ul", "ol"):
            return self._list(root, ordered=block.kind == "ol") or self._plain(block.text)
        if block.kind == "table":
            return self._table(root) or self._plain(block.text)
        if block.kind == "pre":
            return self._preformatted(root.get_text())
        style_name = {"blockquote": "quote", "callout": "callout"}.get(
            block.kind, "body"
        )
        return Paragraph(self._markup(root.decode_contents()), self.styles[style_name])

    def _markup(self, html: str) -> str:
        return reportlab_markup(html, image_root=self.image_root)

    def _plain(self, text: str) -> Paragraph:
        return Paragraph(htmllib.escape(text), self.styles["body"])

    def _list(self, root: Tag, *, ordered: bool) -> Flowable | None:
        """Return bulleted or numbered paragraphs kept together."""

        items = root.find_all("li", recursive=False)
        if not items:
            return None
        start = _int_attr(root.get("start"), default=1)
        paragraphs: List[Flowable] = []
        for offset, item in enumerate(items):
            bullet = f"{start + offset}." if ordered else "•"
            paragraphs.append(
                Paragraph(
                    self._markup(item.decode_contents()),
                    self.styles["list_item"],
                    bulletText=bullet,
                )
            )
        return KeepTogether(paragraphs)

    def _table(self, root: Tag) -> Table | None:
        """Return a grid table with equal column widths."""

        rows: List[List[object]] = []
        for row in root.find_all("tr"):
            cells = row.find_all(["td", "th"], recursive=False)
            rows.append(
                [
                    Paragraph(
                        self._markup(cell.decode_contents()),
                        self.styles["table_header" if cell.name == "th" else "table_cell"],
                    )
                    for cell in cells
                ]
            )
        columns = max((len(row) for row in rows), default=0)
        if not columns:
            return None
        data = [row + [""] * (columns - len(row)) for row in rows]
        table = Table(data, colWidths=[self.width / columns] * columns, hAlign="LEFT")
        table.setStyle(
            TableStyle(
                [
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 4),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return table

    def _preformatted(self, text: str) -> Preformatted:
        style = self.styles["code"]
        usable = self.width - style.leftIndent - style.rightIndent
        max_line = max(8, int(usable / (style.fontSize * COURIER_ADVANCE)))
        return Preformatted(
            text.strip("\n"), style, maxLineLength=max_line, newLineChars=""
        )

    def _media(self, block: MediaBlock) -> Flowable:
        """Return the image scaled to the frame, or a captioned placeholder box."""

        path = resolve_image_path(block.src, self.image_root)
        if path is not None:
            image = Image(str(path), hAlign="CENTER")
            width = block.width * PX_TO_PT if block.width else image.drawWidth
            height = block.height * PX_TO_PT if block.height else image.drawHeight
            scale = min(1.0, self.width / width) if width else 1.0
            image.drawWidth = width * scale
            image.drawHeight = height * scale
            return image
        width = min(self.width, block.width * PX_TO_PT) if block.width else self.width
        height = block.height * PX_TO_PT if block.height else DEFAULT_MEDIA_HEIGHT
        caption = Paragraph(htmllib.escape(block.alt or block.src), self.styles["caption"])
        box = Table([[caption]], colWidths=[width], rowHeights=[height], hAlign="CENTER")
        box.setStyle(
            TableStyle(
                [
                    ("BOX", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return box


@dataclass(slots=True)
class TocEntryRenderer:
    """Render TOC titles and entries.

    Each entry is a one-row table: the heading text, indented by level and
    linked to its anchor, and the padded page number flush right.
    """

    styles: Dict[str, ParagraphStyle]
    width: float
    indent: float = 14.0
    page_ref_width: float = 36.0

    def __call__(self, record: HeadingRecord) -> Flowable:
        entry_style = ParagraphStyle(
            f"toc_entry_{record.level}",
            parent=self.styles["toc_entry"],
            leftIndent=self.indent * max(0, record.level - 1),
        )
        text = Paragraph(
            f'<a href="#{record.stable_id}">{htmllib.escape(record.text)}</a>',
            entry_style,
        )
        page_ref = Paragraph(
            format_page_ordinal(record.page_number), self.styles["toc_page_ref"]
        )
        row = Table(
            [[text, page_ref]],
            colWidths=[self.width - self.page_ref_width, self.page_ref_width],
        )
        row.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                    ("TOPPADDING", (0, 0), (-1, -1), 2),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                ]
            )
        )
        return row

    def title(self, title: str) -> Paragraph:
        return Paragraph(htmllib.escape(title), self.styles["toc_title"])


def _int_attr(value: object, *, default: int) -> int:
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return default
