"""Drawing-command codegen for slide APIs that place absolute shapes and text.

Each slide compiles to one contiguous group of :class:`DrawOp` in a fixed order:

1.  create the slide surface and fill its background;
2.  header bar, footer bar and content card rectangles (header bar and card
    are skipped for Cover themes);
3.  title text box, footer caption text box;
4.  body text box: the whole body is inserted as one string, then bold runs,
    heading lines, alignment and bullets are styled by character range.

Geometry comes from :mod:`slide_compiler.geometry`, the same proportions the
layout engine uses, expressed on the fixed 720x405 pt page.

Nothing here performs I/O. :mod:`slide_compiler.gslide_requests` turns the ops
into Google Slides API requests and :mod:`slide_compiler.pptx_renderer`
replays them into a PPTX file.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .geometry import REFERENCE_HEIGHT, REFERENCE_WIDTH, Box, heading_size_pt, slide_frame
from .markdown_parser import parse_document
from .models import (
    DEFAULT_FOOTER_TEXT, Document, HeaderBlock, Slide, TableBlock, TableRow, TextStyle, Theme,
    ThemeAssignment,
)
from .styled_runs import LineText, line_view
from .theme_loader import default_registry, resolve_theme

logger = logging.getLogger(__name__)

CELL_SEPARATOR = " | "
BULLET_PRESET = "BULLET_DISC_CIRCLE_SQUARE"


class Opcode(str, Enum):
    CREATE_SURFACE = "createSurface"
    SET_FILL = "setFill"
    CREATE_SHAPE = "createShape"
    INSERT_TEXT = "insertText"
    APPLY_TEXT_STYLE = "applyTextStyle"
    APPLY_PARAGRAPH_STYLE = "applyParagraphStyle"
    APPLY_BULLET_STYLE = "applyBulletStyle"


class ShapeType(str, Enum):
    RECTANGLE = "RECTANGLE"
    ROUND_RECTANGLE = "ROUND_RECTANGLE"
    TEXT_BOX = "TEXT_BOX"


@dataclass(frozen=True)
class TextRange:
    """Half-open ``[start, end)`` character range inside one text box."""
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


@dataclass(frozen=True)
class DrawOp:
    """
    One drawing command.

    ``text_range`` of ``None`` means the whole text of ``object_id``. ``style``
    holds the opcode-specific payload: text style fields, paragraph alignment,
    the bullet preset or shape properties.
    """
    op: Opcode
    object_id: str
    page_id: Optional[str] = None
    shape_type: Optional[ShapeType] = None
    box: Optional[Box] = None
    color: Optional[str] = None
    text: Optional[str] = None
    text_range: Optional[TextRange] = None
    style: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"op": self.op.value, "objectId": self.object_id}
        if self.page_id is not None:
            data["pageId"] = self.page_id
        if self.shape_type is not None:
            data["shapeType"] = self.shape_type.value
        if self.box is not None:
            data["box"] = self.box.to_dict()
        if self.color is not None:
            data["color"] = self.color
        if self.text is not None:
            data["text"] = self.text
        if self.text_range is not None:
            data["range"] = {"start": self.text_range.start, "end": self.text_range.end}
        if self.style:
            data["style"] = dict(sorted(self.style.items()))
        return data


# ---------------------------------------------------------------------------
# Body text composition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BodyLine:
    """
    One paragraph of the body text box.

    ``role`` is ``text``, ``bullet``, ``heading``, ``row`` or ``header_row``.
    ``bold_ranges`` are absolute offsets into :attr:`BodyText.text`.
    """
    text: str
    start: int
    role: str
    bold_ranges: Tuple[Tuple[int, int], ...] = ()
    level: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class BodyText:
    text: str
    lines: Tuple[BodyLine, ...] = ()

    @property
    def bold_ranges(self) -> List[Tuple[int, int]]:
        return [r for line in self.lines for r in line.bold_ranges]


def _row_view(row: TableRow) -> LineText:
    """Cells of a table row joined with ``" | "``, bold ranges shifted to match."""
    parts = []
    ranges = []
    cursor = 0
    for cell_idx, cell in enumerate(row.cells):
        if cell_idx:
            parts.append(CELL_SEPARATOR)
            cursor += len(CELL_SEPARATOR)
        view = line_view(cell.runs)
        ranges.extend((cursor + start, cursor + end) for start, end in view.bold_ranges)
        parts.append(view.text)
        cursor += len(view.text)
    return LineText("".join(parts), tuple(ranges))


def compose_body(slide: Slide) -> BodyText:
    """
    Flatten the slide body into newline-separated paragraphs.

    Line *k* starts at the sum of ``len(line) + 1`` over all earlier lines, so
    every bold range points at exactly the characters that are inserted.
    """
    units: List[Tuple[LineText, str, int]] = []
    for block in slide.blocks:
        if isinstance(block, TableBlock):
            for row in block.rows:
                units.append((_row_view(row), "header_row" if row.is_header_row else "row", 0))
        elif isinstance(block, HeaderBlock):
            units.append((line_view(block.runs), "heading", block.level))
        else:
            units.append((line_view(block.runs), "bullet" if block.is_bullet else "text", 0))

    lines = []
    offset = 0
    for view, role, level in units:
        lines.append(BodyLine(
            text=view.text,
            start=offset,
            role=role,
            bold_ranges=tuple((offset + start, offset + end) for start, end in view.bold_ranges),
            level=level,
        ))
        offset += len(view.text) + 1
    return BodyText(text="\n".join(line.text for line in lines), lines=tuple(lines))


def _bullet_ranges(lines: Sequence[BodyLine]) -> List[TextRange]:
    """Contiguous groups of bullet paragraphs; empty groups are dropped."""
    ranges = []
    group: List[BodyLine] = []
    for line in list(lines) + [None]:
        if line is not None and line.role == "bullet":
            group.append(line)
            continue
        if group and group[-1].end > group[0].start:
            ranges.append(TextRange(group[0].start, group[-1].end))
        group = []
    return ranges


# ---------------------------------------------------------------------------
# Op builders
# ---------------------------------------------------------------------------

def _text_style(style: TextStyle, include_bold: bool = True) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "font_family": style.font_family,
        "font_size_pt": style.font_size_pt,
        "color": style.color,
    }
    if include_bold:
        payload["bold"] = style.bold
    return payload


def _shape(object_id: str, page_id: str, shape_type: ShapeType, box: Box, **style) -> DrawOp:
    return DrawOp(Opcode.CREATE_SHAPE, object_id, page_id=page_id, shape_type=shape_type, box=box, style=style)


def _filled_rect(object_id: str, page_id: str, shape_type: ShapeType, box: Box, color: str) -> List[DrawOp]:
    return [
        _shape(object_id, page_id, shape_type, box, outline=False),
        DrawOp(Opcode.SET_FILL, object_id, color=color),
    ]


def object_ids(index: int, prefix: str = "sc") -> Dict[str, str]:
    """Deterministic ids for the objects of slide *index*."""
    parts = ("slide", "header", "footer", "card", "title", "footer_text", "body")
    return {part: f"{prefix}_{index}_{part}" for part in parts}


def compile_slide(
    slide: Slide,
    theme: Theme,
    index: int,
    *,
    canvas_pt: Tuple[float, float] = (REFERENCE_WIDTH, REFERENCE_HEIGHT),
    footer_text: str = DEFAULT_FOOTER_TEXT,
    id_prefix: str = "sc",
) -> List[DrawOp]:
    """Compile one slide into its contiguous group of drawing ops."""
    ids = object_ids(index, id_prefix)
    frame = slide_frame(*canvas_pt)
    cover = theme.is_cover
    colors = theme.colors
    typography = theme.typography
    page = ids["slide"]

    ops: List[DrawOp] = [
        DrawOp(Opcode.CREATE_SURFACE, page),
        DrawOp(Opcode.SET_FILL, page, color=colors.background),
    ]

    # Chrome
    if not cover:
        ops += _filled_rect(ids["header"], page, ShapeType.RECTANGLE, frame.header_bar, colors.primary)
    ops += _filled_rect(ids["footer"], page, ShapeType.RECTANGLE, frame.footer_bar, colors.primary)
    if not cover:
        ops += _filled_rect(ids["card"], page, ShapeType.ROUND_RECTANGLE, frame.card, colors.card)

    # Title
    ops.append(_shape(ids["title"], page, ShapeType.TEXT_BOX, frame.title_box(cover), content_alignment="MIDDLE"))
    if slide.title:
        ops.append(DrawOp(Opcode.INSERT_TEXT, ids["title"], text=slide.title))
        ops.append(DrawOp(Opcode.APPLY_TEXT_STYLE, ids["title"], style=_text_style(typography.header)))

    # Footer caption
    ops.append(_shape(ids["footer_text"], page, ShapeType.TEXT_BOX, frame.footer_text, content_alignment="MIDDLE"))
    if footer_text:
        ops.append(DrawOp(Opcode.INSERT_TEXT, ids["footer_text"], text=footer_text))
        ops.append(DrawOp(Opcode.APPLY_TEXT_STYLE, ids["footer_text"],
                          style=_text_style(typography.footer, include_bold=False)))

    # Body
    body_id = ids["body"]
    ops.append(_shape(body_id, page, ShapeType.TEXT_BOX, frame.body))
    body = compose_body(slide)
    if body.text:
        ops.append(DrawOp(Opcode.INSERT_TEXT, body_id, text=body.text))
        ops.append(DrawOp(Opcode.APPLY_TEXT_STYLE, body_id, style=_text_style(typography.body, include_bold=False)))
        for start, end in body.bold_ranges:
            ops.append(DrawOp(Opcode.APPLY_TEXT_STYLE, body_id, text_range=TextRange(start, end),
                              style={"bold": True}))
        for line in body.lines:
            if line.end <= line.start:
                continue
            if line.role == "heading":
                ops.append(DrawOp(Opcode.APPLY_TEXT_STYLE, body_id, text_range=TextRange(line.start, line.end),
                                  style={
                                      "bold": True,
                                      "color": colors.primary,
                                      "font_size_pt": heading_size_pt(typography.body.font_size_pt, line.level),
                                  }))
            elif line.role == "header_row":
                ops.append(DrawOp(Opcode.APPLY_TEXT_STYLE, body_id, text_range=TextRange(line.start, line.end),
                                  style={"bold": True, "color": colors.primary}))
        ops.append(DrawOp(Opcode.APPLY_PARAGRAPH_STYLE, body_id, style={"alignment": "START"}))
        if not cover:
            for text_range in _bullet_ranges(body.lines):
                ops.append(DrawOp(Opcode.APPLY_BULLET_STYLE, body_id, text_range=text_range,
                                  style={"preset": BULLET_PRESET}))
    return ops


def compile_document(
    document: Document,
    assignment: Optional[ThemeAssignment] = None,
    registry=None,
    *,
    canvas_pt: Tuple[float, float] = (REFERENCE_WIDTH, REFERENCE_HEIGHT),
    footer_text: str = DEFAULT_FOOTER_TEXT,
    id_prefix: str = "sc",
    skip_empty: bool = False,
    debug: bool = False,
) -> List[DrawOp]:
    """
    Compile a whole deck.

    Themes are resolved per slide index, so ``skip_empty`` drops empty slides
    from the output without shifting the theme overrides of later slides.
    """
    assignment = assignment or ThemeAssignment()
    registry = registry if registry is not None else default_registry()
    ops: List[DrawOp] = []
    for index, slide in enumerate(document):
        if skip_empty and slide.is_empty():
            continue
        theme = resolve_theme(index, assignment.theme_id, assignment.overrides, registry)
        slide_ops = compile_slide(slide, theme, index, canvas_pt=canvas_pt,
                                  footer_text=footer_text, id_prefix=id_prefix)
        if debug:
            logger.info(f"Slide {index}: {len(slide_ops)} ops (theme={theme.theme_id})")
        ops.extend(slide_ops)
    return ops


def compile_markdown(markdown: str, assignment: Optional[ThemeAssignment] = None, registry=None, **kwargs) -> List[DrawOp]:
    return compile_document(parse_document(markdown), assignment, registry, **kwargs)
