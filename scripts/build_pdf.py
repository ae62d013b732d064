"""
Paginate one or more HTML documents and render them as a single PDF book.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Sequence

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tqdm import tqdm

from folio.blocks import Block
from folio.classifier import extract_blocks
from folio.constants import DEFAULT_MARKER_FORMAT, DEFAULT_MIN_SPLIT_LENGTH
from folio.pdf.builder import build_pdf
from folio.pipeline import paginate_blocks
from folio.settings import PAGE_SIZES, PaginationSettings


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return CLI arguments for the build script."""

    parser = argparse.ArgumentParser(
        description="Paginate HTML documents into fixed-size pages and write a PDF."
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="HTML files, concatenated in the order given.",
    )
    parser.add_argument(
        "--output-file",
        "-o",
        type=Path,
        default=Path("output/book.pdf"),
        help="File path into which the resulting pdf will be saved.",
    )
    parser.add_argument(
        "--book-size",
        default="a4",
        help=f"Page size preset ({', '.join(PAGE_SIZES)}).",
    )
    parser.add_argument(
        "--page-height",
        type=float,
        default=None,
        help="Usable page height in points when --book-size names no preset.",
    )
    parser.add_argument(
        "--toc-book-size",
        default=None,
        help="Page size preset for TOC pages (defaults to --book-size).",
    )
    parser.add_argument(
        "--min-split-length",
        type=int,
        default=DEFAULT_MIN_SPLIT_LENGTH,
        help="Minimum characters kept on each side when a paragraph is split.",
    )
    parser.add_argument(
        "--marker-format",
        default=DEFAULT_MARKER_FORMAT,
        help="Page marker template; {page} becomes the zero-padded page number.",
    )
    parser.add_argument(
        "--toc-title",
        default="Contents",
        help="Title printed on each table-of-contents page.",
    )
    parser.add_argument(
        "--toc-max-level",
        type=int,
        default=3,
        help="Deepest heading level listed in the table of contents.",
    )
    parser.add_argument(
        "--no-toc",
        action="store_true",
        help="Skip the table of contents.",
    )
    parser.add_argument(
        "--image-root",
        type=Path,
        default=None,
        help="Directory relative image paths resolve against (defaults to the first input's folder).",
    )
    args = parser.parse_args(argv)
    missing = [str(path) for path in args.inputs if not path.is_file()]
    if missing:
        parser.error(f"input not found: {', '.join(missing)}")
    return args


def _settings_from_args(args: argparse.Namespace) -> PaginationSettings:
    """Return PaginationSettings for parsed CLI arguments."""

    return PaginationSettings.from_options(
        {
            "book_size": args.book_size,
            "page_height": args.page_height,
            "toc_book_size": args.toc_book_size,
            "min_split_length": args.min_split_length,
            "marker_format": args.marker_format,
            "toc_title": args.toc_title,
            "toc_max_level": args.toc_max_level,
            "toc_enabled": not args.no_toc,
        }
    )


def _collect_blocks(paths: Sequence[Path]) -> List[Block]:
    """Classify every input file and return the blocks in reading order."""

    blocks: List[Block] = []
    for path in tqdm(paths, desc="Reading documents", unit="file"):
        blocks.extend(extract_blocks(path.read_text(encoding="utf-8")))
    return blocks


def main(argv: Sequence[str] | None = None) -> None:
    """Render the given HTML inputs into ``--output-file``.

    Example:
        >>> main(["chapter1.html", "-o", "output/book.pdf"])  # doctest: +SKIP
    """

    args = _parse_args(argv)
    settings = _settings_from_args(args)
    image_root = args.image_root or args.inputs[0].resolve().parent
    blocks = _collect_blocks(args.inputs)
    result = paginate_blocks(blocks, settings, image_root=image_root)
    if result.truncated:
        print(
            f"Warning: pagination stopped early after {result.page_count} pages; "
            "some content was not placed."
        )
    build_pdf(
        pages=result.pages,
        toc_pages=result.toc_pages,
        output_path=args.output_file,
        settings=settings,
        image_root=image_root,
        progress=True,
    )
    print(
        f"Wrote {result.page_count} pages and {len(result.toc_pages)} TOC pages "
        f"to {args.output_file}"
    )


if __name__ == "__main__":
    main()
