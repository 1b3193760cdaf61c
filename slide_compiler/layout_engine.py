#!/usr/bin/env python3
"""Layout engine: turns a parsed slide and its theme into a box tree for DOM rendering."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .geometry import (
    Box, Canvas, CARD_CORNER_RADIUS, TABLE_FONT_SCALE, heading_size_pt, slide_frame,
)
from .markdown_parser import parse_document
from .models import (
    DEFAULT_FOOTER_TEXT, Block, Document, HeaderBlock, Slide, StyledRun, TableBlock, TextBlock, Theme,
    ThemeAssignment,
)
from .theme_loader import default_registry, resolve_theme

logger = logging.getLogger(__name__)

BULLET_GLYPH = "•"
TRANSPARENT = "transparent"


@dataclass(frozen=True)
class LayoutNode:
    """
    One box of the layout tree.

    Chrome nodes (header bar, card, footer...) carry an absolute ``box`` in
    canvas units; body content nodes have no box and flow in source order
    inside their parent.
    """
    kind: str
    box: Optional[Box] = None
    text: Optional[str] = None
    style: Mapping[str, Any] = field(default_factory=dict)
    children: Tuple["LayoutNode", ...] = ()

    def find(self, kind: str) -> List["LayoutNode"]:
        """All descendants (and self) of the given kind, depth-first."""
        found = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find(kind))
        return found

    def plain_text(self) -> str:
        return (self.text or "") + "".join(child.plain_text() for child in self.children)

    def to_dict(self, canvas_width: float, canvas_height: float) -> Dict[str, Any]:
        node: Dict[str, Any] = {"kind": self.kind}
        if self.box is not None:
            node["box"] = self.box.to_dict()
            node["percent"] = self.box.percent_of(canvas_width, canvas_height)
        if self.text is not None:
            node["text"] = self.text
        if self.style:
            node["style"] = dict(sorted(self.style.items()))
        if self.children:
            node["children"] = [c.to_dict(canvas_width, canvas_height) for c in self.children]
        return node


@dataclass(frozen=True)
class LayoutDescriptor:
    """Renderer-agnostic description of one slide on one canvas."""
    canvas: Canvas
    width: float
    height: float
    theme_id: str
    is_cover: bool
    root: LayoutNode

    @property
    def width_px(self) -> float:
        return round(self.width * self.canvas.px_per_unit, 2)

    @property
    def height_px(self) -> float:
        return round(self.height * self.canvas.px_per_unit, 2)

    def find(self, kind: str) -> List[LayoutNode]:
        return self.root.find(kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canvas": {
                "aspect_ratio": self.canvas.aspect_ratio,
                "orientation": self.canvas.orientation,
                "mode": self.canvas.mode,
                "css_aspect_ratio": self.canvas.css_aspect_ratio,
                "width": round(self.width, 4),
                "height": round(self.height, 4),
                "width_px": self.width_px,
                "height_px": self.height_px,
            },
            "theme_id": self.theme_id,
            "is_cover": self.is_cover,
            "root": self.root.to_dict(self.width, self.height),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=False, separators=(",", ":"))


# ---------------------------------------------------------------------------
# Block -> node mapping
# ---------------------------------------------------------------------------

def _px(points: float, canvas: Canvas) -> float:
    return round(points * canvas.px_per_unit, 2)


def _run_nodes(runs: Sequence[StyledRun]) -> Tuple[LayoutNode, ...]:
    return tuple(LayoutNode(kind="run", text=run.text, style={"bold": run.bold}) for run in runs)


def _header_node(block: HeaderBlock, theme: Theme, canvas: Canvas) -> LayoutNode:
    body = theme.typography.body
    return LayoutNode(
        kind="heading",
        style={
            "level": block.level,
            "font_family": body.font_family,
            "font_size": _px(heading_size_pt(body.font_size_pt, block.level), canvas),
            "color": theme.colors.primary,
            "bold": True,
        },
        children=_run_nodes(block.runs),
    )


def _text_node(block: TextBlock, theme: Theme, canvas: Canvas) -> LayoutNode:
    children = _run_nodes(block.runs)
    show_bullet = block.is_bullet and not theme.is_cover
    if show_bullet:
        bullet = LayoutNode(kind="bullet", text=BULLET_GLYPH + " ", style={"color": theme.colors.primary})
        children = (bullet,) + children
    return LayoutNode(
        kind="line",
        style={
            "font_family": theme.typography.body.font_family,
            "font_size": _px(theme.typography.body.font_size_pt, canvas),
            "color": theme.typography.body.color,
            "bullet": show_bullet,
        },
        children=children,
    )


def _table_node(block: TableBlock, theme: Theme, canvas: Canvas) -> LayoutNode:
    columns = block.column_count
    rows = []
    for row in block.rows:
        cells = [LayoutNode(kind="cell", style={"header": row.is_header_row}, children=_run_nodes(cell.runs))
                 for cell in row.cells]
        # Ragged rows are padded so the grid stays rectangular
        cells.extend(LayoutNode(kind="cell", style={"header": row.is_header_row})
                     for _ in range(columns - len(cells)))
        row_style: Dict[str, Any] = {"header": row.is_header_row}
        if row.is_header_row:
            row_style.update(color=theme.colors.primary, bold=True)
        rows.append(LayoutNode(kind="row", style=row_style, children=tuple(cells)))
    return LayoutNode(
        kind="table",
        style={
            "columns": columns,
            "font_family": theme.typography.body.font_family,
            "font_size": _px(theme.typography.body.font_size_pt * TABLE_FONT_SCALE, canvas),
            "color": theme.typography.body.color,
            "border_color": theme.colors.primary,
        },
        children=tuple(rows),
    )


def block_to_node(block: Block, theme: Theme, canvas: Canvas) -> LayoutNode:
    """Map one IR block onto its layout node."""
    if isinstance(block, TableBlock):
        return _table_node(block, theme, canvas)
    if isinstance(block, HeaderBlock):
        return _header_node(block, theme, canvas)
    return _text_node(block, theme, canvas)


def layout_slide(slide: Slide, theme: Theme, canvas: Canvas,
                 footer_text: str = DEFAULT_FOOTER_TEXT) -> LayoutDescriptor:
    """
    Lay out one slide.

    The tree is: slide -> header bar (title) -> card (body stack) -> footer
    bar (caption). Cover themes drop the header bar, make the card
    transparent and pin the title near the top of the canvas.
    """
    width, height = canvas.size
    frame = slide_frame(width, height)
    colors = theme.colors
    typography = theme.typography
    cover = theme.is_cover

    title_node = LayoutNode(
        kind="title",
        box=frame.title_box(cover),
        text=slide.display_title,
        style={
            "position": "absolute",
            "font_family": typography.header.font_family,
            "font_size": _px(typography.header.font_size_pt, canvas),
            "color": typography.header.color,
            "bold": typography.header.bold,
            "vertical_align": "middle",
        },
    )

    children: List[LayoutNode] = []
    if cover:
        children.append(title_node)
    else:
        children.append(LayoutNode(
            kind="header_bar", box=frame.header_bar,
            style={"background": colors.primary}, children=(title_node,),
        ))

    body = LayoutNode(
        kind="body",
        box=frame.body,
        style={"font_family": typography.body.font_family, "color": typography.body.color},
        children=tuple(block_to_node(block, theme, canvas) for block in slide.blocks),
    )
    children.append(LayoutNode(
        kind="card",
        box=frame.card,
        style={
            "background": TRANSPARENT if cover else colors.card,
            "border_radius": _px(CARD_CORNER_RADIUS, canvas),
        },
        children=(body,),
    ))

    caption = LayoutNode(
        kind="footer_text",
        box=frame.footer_text,
        text=footer_text,
        style={
            "font_family": typography.footer.font_family,
            "font_size": _px(typography.footer.font_size_pt, canvas),
            "color": typography.footer.color,
            "vertical_align": "middle",
        },
    )
    children.append(LayoutNode(
        kind="footer_bar", box=frame.footer_bar,
        style={"background": colors.primary}, children=(caption,),
    ))

    root = LayoutNode(
        kind="slide",
        box=Box(0, 0, width, height),
        style={"background": colors.background, "color": colors.text},
        children=tuple(children),
    )
    return LayoutDescriptor(canvas=canvas, width=width, height=height,
                            theme_id=theme.theme_id, is_cover=cover, root=root)


class LayoutEngine:
    """
    Lay out every slide of a deck with per-slide theme resolution.
    """

    def __init__(
        self,
        *,
        registry=None,
        assignment: Optional[ThemeAssignment] = None,
        canvas: Optional[Canvas] = None,
        footer_text: str = DEFAULT_FOOTER_TEXT,
        debug: bool = False,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.assignment = assignment or ThemeAssignment()
        self.canvas = canvas or Canvas()
        self.footer_text = footer_text
        self.debug = debug

    def theme_for(self, index: int) -> Theme:
        return resolve_theme(index, self.assignment.theme_id, self.assignment.overrides, self.registry)

    def layout_document(self, document: Document) -> List[LayoutDescriptor]:
        pages = []
        for index, slide in enumerate(document):
            theme = self.theme_for(index)
            if self.debug:
                logger.info(f"Slide {index}: theme={theme.theme_id} blocks={len(slide.blocks)} cover={theme.is_cover}")
            pages.append(layout_slide(slide, theme, self.canvas, footer_text=self.footer_text))
        return pages

    def layout_markdown(self, markdown: str) -> List[LayoutDescriptor]:
        """Grid preview: every slide of the deck, including empty segments."""
        return self.layout_document(parse_document(markdown))

    def layout_index(self, markdown: str, index: int) -> LayoutDescriptor:
        """Presentation overlay: a single slide, clamped to the deck bounds."""
        document = parse_document(markdown)
        index = max(0, min(index, len(document) - 1))
        return layout_slide(document[index], self.theme_for(index), self.canvas, footer_text=self.footer_text)
