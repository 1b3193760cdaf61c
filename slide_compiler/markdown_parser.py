"""
Line-oriented parser for the slide markdown dialect.

Only four constructs are recognised: ``#`` headings, ``- `` bullets,
``**bold**`` spans and pipe tables. Anything else is kept as a plain text
line, so no input can make the parser fail.
"""
import logging
import re
from functools import lru_cache
from typing import List, Optional

from .models import Block, Document, HeaderBlock, Slide, TableBlock, TableCell, TableRow, TextBlock
from .splitter import split_slides
from .styled_runs import extract_runs

logger = logging.getLogger(__name__)

MAX_HEADING_LEVEL = 6
BULLET_MARKER = "- "

# More than six hashes is still a heading, clamped to level 6.
_HEADING_RE = re.compile(r"^(#+)\s+")
_SEPARATOR_CELL_RE = re.compile(r"^:?-+:?$")


def parse_heading(line: str):
    """Return ``(level, text)`` for a heading line, otherwise ``None``."""
    match = _HEADING_RE.match(line)
    if not match:
        return None
    level = min(len(match.group(1)), MAX_HEADING_LEVEL)
    return level, line[match.end():].strip()


def split_table_cells(line: str) -> List[str]:
    """Split one pipe row into trimmed cell strings (outer pipes dropped)."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [cell.strip() for cell in row.split("|")]


def is_separator_row(cells: List[str]) -> bool:
    """Check if every cell looks like ``---``, ``:--``, ``--:`` or ``:-:``."""
    return bool(cells) and all(_SEPARATOR_CELL_RE.match(cell) for cell in cells)


def parse_table(lines: List[str]) -> TableBlock:
    """
    Build a table from consecutive pipe lines.

    Separator rows are consumed as markers. When the separator is the second
    line, the first row becomes the header row.
    """
    rows: List[TableRow] = []
    has_header = False

    for line_idx, line in enumerate(lines):
        cells = split_table_cells(line)
        if is_separator_row(cells):
            if line_idx == 1 and len(rows) == 1:
                has_header = True
            continue
        rows.append(TableRow(cells=tuple(TableCell(tuple(extract_runs(c))) for c in cells)))

    if has_header:
        rows[0] = TableRow(cells=rows[0].cells, is_header_row=True)
    return TableBlock(rows=tuple(rows))


def parse_slide(segment: str) -> Slide:
    """
    Parse one raw slide segment into a :class:`Slide`.

    Args:
        segment: Text between two delimiter lines (may be empty)

    Returns:
        Slide with the first heading as title and the remaining lines as
        blocks in source order
    """
    return _parse_slide_cached(segment or "")


@lru_cache(maxsize=512)
def _parse_slide_cached(segment: str) -> Slide:
    title: Optional[str] = None
    title_found = False
    blocks: List[Block] = []
    table_lines: List[str] = []

    def flush_table():
        if table_lines:
            blocks.append(parse_table(table_lines))
            table_lines.clear()

    for raw_line in segment.strip().split("\n"):
        line = raw_line.strip()

        # -------------------------
        # Tables swallow every pipe line, whatever came before
        # -------------------------
        if line.startswith("|"):
            table_lines.append(line)
            continue
        flush_table()

        if not line:
            continue

        heading = parse_heading(line)
        if heading is not None:
            level, text = heading
            if not title_found:
                title = text
                title_found = True
            else:
                blocks.append(HeaderBlock(level=level, runs=tuple(extract_runs(text))))
            continue

        if line.startswith(BULLET_MARKER):
            blocks.append(TextBlock(runs=tuple(extract_runs(line[len(BULLET_MARKER):])), is_bullet=True))
        else:
            blocks.append(TextBlock(runs=tuple(extract_runs(line))))

    flush_table()
    return Slide(title=title, blocks=tuple(blocks))


def parse_document(markdown: str) -> Document:
    """Split *markdown* into segments and parse each one; one slide per segment."""
    slides = tuple(parse_slide(segment) for segment in split_slides(markdown))
    logger.debug("Parsed %d slides", len(slides))
    return Document(slides=slides)
