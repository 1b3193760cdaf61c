"""Test the box-tree layout engine (DOM backend)."""

import json

import pytest

from slide_compiler.geometry import Canvas, slide_frame
from slide_compiler.layout_engine import LayoutEngine, layout_slide
from slide_compiler.markdown_parser import parse_document, parse_slide
from slide_compiler.models import ThemeAssignment
from slide_compiler.theme_loader import default_registry


@pytest.fixture
def registry():
    return default_registry()


def test_business_slide_tree(registry, sample_deck):
    """Header bar holds the title, the card holds the body, footer bar the caption."""
    slide = parse_document(sample_deck)[0]
    page = layout_slide(slide, registry["default"], Canvas())

    assert page.root.kind == "slide"
    assert [child.kind for child in page.root.children] == ["header_bar", "card", "footer_bar"]
    title = page.find("title")[0]
    assert title.text == "Quarterly Review"
    assert title.box == slide_frame(720, 405).title
    assert page.find("footer_text")[0].text == "Made with Markdown Slides"
    assert page.root.style["background"] == "#f5f5f0"


def test_bullets_and_bold_runs(registry, sample_deck):
    page = layout_slide(parse_document(sample_deck)[0], registry["default"], Canvas())

    bullets = page.find("bullet")
    assert len(bullets) == 2
    assert all(b.text == "• " and b.style["color"] == "#268f80" for b in bullets)
    runs = page.find("run")
    assert [(r.text, r.style["bold"]) for r in runs] == [
        ("Revenue", True), (" up 12%", False), ("Costs flat", False),
    ]


def test_cover_theme_policy(registry, sample_deck):
    """Cover: no header bar, transparent card, title on the background, no bullet glyphs."""
    page = layout_slide(parse_document(sample_deck)[0], registry["bw_simple"], Canvas())

    assert page.is_cover
    assert page.find("header_bar") == []
    assert page.find("bullet") == []
    assert page.find("card")[0].style["background"] == "transparent"
    title = page.find("title")[0]
    assert title.box == slide_frame(720, 405).cover_title
    assert page.root.children[0] is title


def test_heading_and_table_nodes(registry, sample_deck):
    canvas = Canvas(mode="fullscreen")
    page = layout_slide(parse_document(sample_deck)[1], registry["default"], canvas)

    heading = page.find("heading")[0]
    assert heading.style["level"] == 2
    assert heading.style["font_size"] == pytest.approx(18.0 * canvas.px_per_unit, abs=0.01)
    assert heading.style["color"] == "#268f80"

    table = page.find("table")[0]
    assert table.style["columns"] == 2
    header_row, *rows = table.children
    assert header_row.style["header"] is True
    assert header_row.style["color"] == "#268f80"
    assert header_row.style["bold"] is True
    assert "background" not in header_row.style
    assert [row.style["header"] for row in rows] == [False, False]
    assert [cell.plain_text() for cell in header_row.children] == ["Region", "Sales"]


def test_ragged_rows_are_padded(registry):
    page = layout_slide(parse_slide("| a | b | c |\n| 1 |"), registry["default"], Canvas())
    rows = page.find("row")
    assert [len(row.children) for row in rows] == [3, 3]


def test_untitled_slide_label(registry):
    page = layout_slide(parse_slide("text only"), registry["default"], Canvas())
    assert page.find("title")[0].text == "No Title"


@pytest.mark.parametrize("ratio, orientation, mode, size, px", [
    ("16:9", "landscape", "fullscreen", (720, 405), (1280, 720)),
    ("4:3", "landscape", "fullscreen", (540, 405), (960, 720)),
    ("1:1", "landscape", "fullscreen", (405, 405), (720, 720)),
    ("16:9", "portrait", "fullscreen", (405, 720), (720, 1280)),
    ("16:9", "landscape", "thumbnail", (720, 405), (640, 360)),
])
def test_canvas_sizes(registry, ratio, orientation, mode, size, px):
    canvas = Canvas(aspect_ratio=ratio, orientation=orientation, mode=mode)
    page = layout_slide(parse_slide("# T"), registry["default"], canvas)
    assert (page.width, page.height) == pytest.approx(size)
    assert (page.width_px, page.height_px) == pytest.approx(px, abs=0.01)


def test_descriptor_json(registry, sample_deck):
    page = layout_slide(parse_document(sample_deck)[1], registry["dark"], Canvas(aspect_ratio="4/3"))
    data = json.loads(page.to_json())

    assert data["theme_id"] == "dark"
    assert data["canvas"]["aspect_ratio"] == "4:3"
    assert data["canvas"]["css_aspect_ratio"] == "4 / 3"
    header_bar = data["root"]["children"][0]
    assert header_bar["percent"] == {"left": 0.0, "top": 0.0, "width": 100.0, "height": pytest.approx(14.8148, abs=1e-3)}
    assert page.to_json() == page.to_json()


def test_engine_resolves_per_slide_themes(sample_deck):
    engine = LayoutEngine(assignment=ThemeAssignment("dark", {1: "bw_simple", 2: "missing"}))
    pages = engine.layout_markdown(sample_deck)

    assert [p.theme_id for p in pages] == ["dark", "bw_simple", "default"]
    assert [p.is_cover for p in pages] == [False, True, False]


def test_engine_keeps_empty_slides():
    pages = LayoutEngine().layout_markdown("---\n# B\n---")
    assert len(pages) == 3
    assert pages[0].find("title")[0].text == "No Title"


def test_layout_index_clamped(sample_deck):
    engine = LayoutEngine(canvas=Canvas(mode="fullscreen"))
    assert engine.layout_index(sample_deck, 99).find("title")[0].text == "No Title"
    assert engine.layout_index(sample_deck, -5).find("title")[0].text == "Quarterly Review"


def test_invalid_canvas():
    with pytest.raises(ValueError):
        Canvas(aspect_ratio="21:9")
    with pytest.raises(ValueError):
        Canvas(orientation="sideways")
    with pytest.raises(ValueError):
        Canvas(mode="poster")
