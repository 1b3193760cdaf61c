#!/usr/bin/env python3
"""
HTML preview renderer for layout descriptors.

Renders the grid preview (every slide as a thumbnail) or the presentation
overlay (one fullscreen slide) as a self-contained HTML page. Positioned
chrome boxes are emitted as percentages of their parent box so the page
scales with the container; body content flows in source order.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from jinja2 import DictLoader, Environment

from .layout_engine import LayoutDescriptor, LayoutNode

logger = logging.getLogger(__name__)

_BASE_CSS = """
body { margin: 0; font-family: sans-serif; background: #e8e8e8; }
.sc-grid { display: flex; flex-wrap: wrap; gap: 16px; padding: 16px; }
.sc-fullscreen { display: flex; align-items: center; justify-content: center; min-height: 100vh; background: #000; }
.sc-frame { position: relative; overflow: hidden; box-shadow: 0 1px 4px rgba(0, 0, 0, 0.3); }
.sc-frame.sc-selected { outline: 3px solid #4a90d9; }
.sc-slide { position: absolute; inset: 0; overflow: hidden; }
.sc-body { overflow: hidden; }
.sc-title, .sc-footer-text { white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
.sc-body p, .sc-body h1, .sc-body h2, .sc-body h3, .sc-body h4, .sc-body h5, .sc-body h6 { margin: 0 0 0.3em 0; }
.sc-table { border-collapse: collapse; width: 100%; }
.sc-table td, .sc-table th { border: 1px solid; border-color: inherit; padding: 0.2em 0.4em; text-align: left; }
"""

TEMPLATES = {
    "node.html": """
{%- macro render_node(node, parent) -%}
{%- set tag = node|node_tag -%}
<{{ tag }} class="sc-{{ node.kind|replace('_', '-') }}" data-kind="{{ node.kind }}"
{%- if node.kind == 'heading' %} data-level="{{ node.style.level }}"{% endif %}
{%- set css = node|node_style(parent) %}{% if css %} style="{{ css }}"{% endif %}>
{%- if node.text is not none %}{{ node.text }}{% endif -%}
{%- for child in node.children %}{{ render_node(child, node) }}{% endfor -%}
</{{ tag }}>
{%- endmacro -%}
""",
    "deck.html": """<!DOCTYPE html>
{%- from "node.html" import render_node %}
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<style>{{ base_css|safe }}</style>
</head>
<body>
<div class="{{ 'sc-fullscreen' if fullscreen else 'sc-grid' }}">
{%- for page in pages %}
<section class="sc-frame{% if loop.index0 + offset in selection %} sc-selected{% endif %}" data-index="{{ loop.index0 + offset }}" data-theme="{{ page.theme_id }}" style="width: {{ page.width_px }}px; aspect-ratio: {{ page.canvas.css_aspect_ratio }}">
{{ render_node(page.root, none) }}
</section>
{%- endfor %}
</div>
</body>
</html>
""",
}


def _pct(value: float) -> str:
    return f"{round(value * 100, 4)}%"


def node_tag(node: LayoutNode) -> str:
    """HTML element used for a layout node."""
    if node.kind == "heading":
        return f"h{max(1, min(int(node.style.get('level', 1)), 6))}"
    if node.kind == "line":
        return "p"
    if node.kind == "run":
        return "strong" if node.style.get("bold") else "span"
    if node.kind == "bullet":
        return "span"
    if node.kind == "table":
        return "table"
    if node.kind == "row":
        return "tr"
    if node.kind == "cell":
        return "th" if node.style.get("header") else "td"
    return "div"


def node_style(node: LayoutNode, parent: Optional[LayoutNode] = None) -> str:
    """Inline CSS for a layout node, positioned relative to *parent*."""
    decls = []
    if node.box is not None and parent is not None and parent.box is not None:
        box, outer = node.box, parent.box
        decls += [
            ("position", "absolute"),
            ("left", _pct((box.x - outer.x) / outer.width)),
            ("top", _pct((box.y - outer.y) / outer.height)),
            ("width", _pct(box.width / outer.width)),
            ("height", _pct(box.height / outer.height)),
        ]
    style = node.style
    if "background" in style:
        decls.append(("background", style["background"]))
    if "color" in style:
        decls.append(("color", style["color"]))
    if "border_color" in style:
        decls.append(("border-color", style["border_color"]))
    if "font_family" in style:
        decls.append(("font-family", f"'{style['font_family']}', sans-serif"))
    if "font_size" in style:
        decls.append(("font-size", f"{style['font_size']}px"))
    if style.get("bold"):
        decls.append(("font-weight", "bold"))
    if "border_radius" in style:
        decls.append(("border-radius", f"{style['border_radius']}px"))
    if style.get("vertical_align") == "middle":
        decls += [("display", "flex"), ("align-items", "center")]
    return "; ".join(f"{name}: {value}" for name, value in decls)


class HTMLRenderer:
    """
    Render layout descriptors to an HTML page.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.env = Environment(loader=DictLoader(TEMPLATES), autoescape=True)
        self.env.filters["node_tag"] = node_tag
        self.env.filters["node_style"] = node_style

    def render_deck(
        self,
        pages: Sequence[LayoutDescriptor],
        title: str = "Slides",
        selection: Iterable[int] = (),
    ) -> str:
        """Grid preview of every slide; selected indices are outlined."""
        return self._render(pages, title=title, selection=set(selection), fullscreen=False, offset=0)

    def render_slide(self, page: LayoutDescriptor, index: int = 0, title: str = "Slides") -> str:
        """Presentation overlay: a single slide."""
        return self._render([page], title=title, selection=set(), fullscreen=True, offset=index)

    def render(self, pages: Sequence[LayoutDescriptor], output_path: Union[str, Path], title: str = "Slides") -> str:
        html = self.render_deck(pages, title=title)
        Path(output_path).write_text(html, encoding="utf-8")
        if self.debug:
            logger.info(f"Wrote {len(pages)} slides to {output_path}")
        return str(output_path)

    def _render(self, pages: List[LayoutDescriptor], **context) -> str:
        template = self.env.get_template("deck.html")
        return template.render(pages=list(pages), base_css=_BASE_CSS, **context)
