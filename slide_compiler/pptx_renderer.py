#!/usr/bin/env python3
"""
PowerPoint renderer that replays drawing ops into a .pptx file.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.oxml import parse_xml
from pptx.oxml.ns import nsdecls
from pptx.util import Pt

from .geometry import REFERENCE_HEIGHT, REFERENCE_WIDTH
from .gslide_codegen import DrawOp, Opcode, ShapeType, TextRange

logger = logging.getLogger(__name__)

BLANK_LAYOUT = 6
BULLET_CHAR = "•"
BULLET_INDENT_EMU = 228600  # 0.25in

_ALIGNMENTS = {
    "START": PP_ALIGN.LEFT,
    "CENTER": PP_ALIGN.CENTER,
    "END": PP_ALIGN.RIGHT,
    "JUSTIFIED": PP_ALIGN.JUSTIFY,
}

_SHAPES = {
    ShapeType.RECTANGLE: MSO_SHAPE.RECTANGLE,
    ShapeType.ROUND_RECTANGLE: MSO_SHAPE.ROUNDED_RECTANGLE,
}


def _rgb(hex_color: str) -> RGBColor:
    return RGBColor.from_string(hex_color.lstrip("#").upper())


@dataclass
class _TextBuffer:
    """Character-level text state of one shape until it is written out."""
    text: str = ""
    char_styles: List[Dict[str, Any]] = field(default_factory=list)
    alignment: Optional[str] = None
    bullet_ranges: List[TextRange] = field(default_factory=list)

    def insert(self, text: str, index: int = 0) -> None:
        self.text = self.text[:index] + text + self.text[index:]
        self.char_styles[index:index] = [{} for _ in text]

    def apply(self, style: Dict[str, Any], text_range: Optional[TextRange]) -> None:
        start, end = (0, len(self.text)) if text_range is None else (text_range.start, text_range.end)
        for char_style in self.char_styles[max(0, start):min(end, len(self.text))]:
            char_style.update(style)

    def paragraphs(self) -> List[Tuple[int, int]]:
        """``[start, end)`` span of every newline-separated paragraph."""
        spans = []
        start = 0
        for line in self.text.split("\n"):
            spans.append((start, start + len(line)))
            start += len(line) + 1
        return spans

    def runs(self, start: int, end: int) -> List[Tuple[str, Dict[str, Any]]]:
        """Group consecutive characters with identical style."""
        grouped: List[Tuple[str, Dict[str, Any]]] = []
        for pos in range(start, end):
            char, style = self.text[pos], self.char_styles[pos]
            if grouped and grouped[-1][1] == style:
                grouped[-1] = (grouped[-1][0] + char, style)
            else:
                grouped.append((char, style))
        return grouped

    def is_bullet(self, span: Tuple[int, int]) -> bool:
        start, end = span
        return any(r.start <= start and end <= r.end for r in self.bullet_ranges)


class PPTXRenderer:
    """
    Replay a drawing-op stream onto python-pptx slides.

    Shapes and fills are applied as the ops arrive. Text ops are buffered per
    shape because ranges address characters across paragraph boundaries; the
    buffers are written out as paragraphs and runs once the stream ends.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def render(self, ops: Iterable[DrawOp], output_path: str):
        """
        Render drawing ops to a PowerPoint presentation.

        Args:
            ops: Drawing ops, as produced by ``compile_document``
            output_path: Path where the PPTX file should be saved
        """
        prs = self.build(ops)
        prs.save(output_path)
        if self.debug:
            logger.info(f"Saved {len(prs.slides)} slides to {output_path}")
        return output_path

    def build(self, ops: Iterable[DrawOp]):
        """Replay *ops* into a new in-memory :class:`Presentation`."""
        prs = Presentation()
        prs.slide_width = Pt(REFERENCE_WIDTH)
        prs.slide_height = Pt(REFERENCE_HEIGHT)

        slides: Dict[str, Any] = {}
        shapes: Dict[str, Any] = {}
        buffers: Dict[str, _TextBuffer] = {}

        for op in ops:
            if op.op is Opcode.CREATE_SURFACE:
                slides[op.object_id] = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
            elif op.op is Opcode.SET_FILL:
                target = slides.get(op.object_id)
                if target is not None:
                    fill = target.background.fill
                else:
                    fill = self._shape(shapes, op).fill
                fill.solid()
                fill.fore_color.rgb = _rgb(op.color)
            elif op.op is Opcode.CREATE_SHAPE:
                shapes[op.object_id] = self._add_shape(slides[op.page_id], op)
            elif op.op is Opcode.INSERT_TEXT:
                buffers.setdefault(op.object_id, _TextBuffer()).insert(op.text)
            elif op.op is Opcode.APPLY_TEXT_STYLE:
                self._buffer(buffers, op).apply(dict(op.style), op.text_range)
            elif op.op is Opcode.APPLY_PARAGRAPH_STYLE:
                self._buffer(buffers, op).alignment = op.style.get("alignment", "START")
            elif op.op is Opcode.APPLY_BULLET_STYLE:
                self._buffer(buffers, op).bullet_ranges.append(op.text_range or TextRange(0, 10 ** 9))

        for object_id, buffer in buffers.items():
            self._write_text(shapes[object_id], buffer)

        if self.debug:
            logger.info(f"Replayed {len(slides)} slides, {len(shapes)} shapes, {len(buffers)} text frames")
        return prs

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _shape(shapes: Dict[str, Any], op: DrawOp):
        if op.object_id not in shapes:
            raise KeyError(f"❌ {op.op.value} targets unknown object '{op.object_id}'")
        return shapes[op.object_id]

    @staticmethod
    def _buffer(buffers: Dict[str, _TextBuffer], op: DrawOp) -> _TextBuffer:
        if op.object_id not in buffers:
            raise KeyError(f"❌ {op.op.value} targets '{op.object_id}' before any text was inserted")
        return buffers[op.object_id]

    def _add_shape(self, slide, op: DrawOp):
        box = op.box
        left, top, width, height = Pt(box.x), Pt(box.y), Pt(box.width), Pt(box.height)
        if op.shape_type is ShapeType.TEXT_BOX:
            shape = slide.shapes.add_textbox(left, top, width, height)
            text_frame = shape.text_frame
            text_frame.word_wrap = True
            if op.style.get("content_alignment") == "MIDDLE":
                text_frame.vertical_anchor = MSO_ANCHOR.MIDDLE
            else:
                text_frame.vertical_anchor = MSO_ANCHOR.TOP
        else:
            shape = slide.shapes.add_shape(_SHAPES[op.shape_type], left, top, width, height)
            if op.style.get("outline") is False:
                shape.line.fill.background()  # no border
            shape.shadow.inherit = False
        shape.name = op.object_id
        return shape

    def _write_text(self, shape, buffer: _TextBuffer):
        text_frame = shape.text_frame
        text_frame.clear()
        for idx, span in enumerate(buffer.paragraphs()):
            para = text_frame.paragraphs[0] if idx == 0 else text_frame.add_paragraph()
            if buffer.alignment:
                para.alignment = _ALIGNMENTS.get(buffer.alignment, PP_ALIGN.LEFT)
            if buffer.bullet_ranges and buffer.is_bullet(span):
                self._add_bullet(para)
            for text, style in buffer.runs(*span):
                run = para.add_run()
                run.text = text
                font = run.font
                if "font_family" in style:
                    font.name = style["font_family"]
                if "font_size_pt" in style:
                    font.size = Pt(style["font_size_pt"])
                if "color" in style:
                    font.color.rgb = _rgb(style["color"])
                if "bold" in style:
                    font.bold = style["bold"]

    @staticmethod
    def _add_bullet(para):
        pPr = para._p.get_or_add_pPr()
        pPr.set("marL", str(BULLET_INDENT_EMU))
        pPr.set("indent", str(-BULLET_INDENT_EMU))
        pPr.append(parse_xml(f'<a:buChar {nsdecls("a")} char="{BULLET_CHAR}"/>'))
