#!/usr/bin/env python3
"""
Test the PPTX replay of drawing ops by re-opening the saved deck.
"""

import pytest
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR
from pptx.oxml.ns import qn
from pptx.util import Pt

from slide_compiler.gslide_codegen import DrawOp, Opcode, compile_markdown
from slide_compiler.models import ThemeAssignment
from slide_compiler.pptx_renderer import PPTXRenderer


@pytest.fixture
def deck(tmp_path, sample_deck):
    output_path = tmp_path / "deck.pptx"
    ops = compile_markdown(sample_deck, ThemeAssignment("default", {2: "bw_simple"}))
    PPTXRenderer().render(ops, str(output_path))
    return Presentation(str(output_path))


def _shapes(slide):
    return {shape.name: shape for shape in slide.shapes}


def test_slide_count_and_size(deck):
    assert len(deck.slides) == 3
    assert deck.slide_width == Pt(720)
    assert deck.slide_height == Pt(405)


def test_chrome_shapes(deck):
    shapes = _shapes(deck.slides[0])
    assert set(shapes) == {
        "sc_0_header", "sc_0_footer", "sc_0_card", "sc_0_title", "sc_0_footer_text", "sc_0_body",
    }
    header = shapes["sc_0_header"]
    assert (header.left, header.top, header.width, header.height) == (0, 0, Pt(720), Pt(60))
    assert header.fill.fore_color.rgb == RGBColor.from_string("268F80")
    assert deck.slides[0].background.fill.fore_color.rgb == RGBColor.from_string("F5F5F0")


def test_title_and_caption(deck):
    shapes = _shapes(deck.slides[0])
    title = shapes["sc_0_title"].text_frame
    assert title.text == "Quarterly Review"
    assert title.vertical_anchor == MSO_ANCHOR.MIDDLE
    run = title.paragraphs[0].runs[0]
    assert run.font.name == "Montserrat"
    assert run.font.size == Pt(24)
    assert run.font.bold is True
    assert shapes["sc_0_footer_text"].text_frame.text == "Made with Markdown Slides"


def test_body_runs_and_bullets(deck):
    body = _shapes(deck.slides[0])["sc_0_body"].text_frame
    paragraphs = body.paragraphs

    assert [p.text for p in paragraphs] == ["Revenue up 12%", "Costs flat"]
    runs = paragraphs[0].runs
    assert [(r.text, r.font.bold) for r in runs] == [("Revenue", True), (" up 12%", None)]
    assert runs[1].font.name == "Roboto"
    for para in paragraphs:
        assert para._p.pPr.find(qn("a:buChar")) is not None


def test_table_lines_without_bullets(deck):
    body = _shapes(deck.slides[1])["sc_1_body"].text_frame
    assert [p.text for p in body.paragraphs] == [
        "Regional split", "Region | Sales", "EMEA | 40", "APAC | 35", "Closing note",
    ]
    for para in body.paragraphs:
        ppr = para._p.pPr
        assert ppr is None or ppr.find(qn("a:buChar")) is None


def test_cover_slide(deck):
    shapes = _shapes(deck.slides[2])
    assert "sc_2_header" not in shapes
    assert "sc_2_card" not in shapes
    assert shapes["sc_2_title"].text_frame.text == ""
    assert deck.slides[2].background.fill.fore_color.rgb == RGBColor.from_string("000000")


def test_unknown_target_raises():
    ops = [DrawOp(Opcode.CREATE_SURFACE, "p"), DrawOp(Opcode.SET_FILL, "ghost", color="#000000")]
    with pytest.raises(KeyError):
        PPTXRenderer().build(ops)
    with pytest.raises(KeyError):
        PPTXRenderer().build([DrawOp(Opcode.APPLY_TEXT_STYLE, "ghost", style={"bold": True})])


def test_empty_stream(tmp_path):
    output_path = tmp_path / "empty.pptx"
    assert PPTXRenderer().render([], str(output_path)) == str(output_path)
    assert len(Presentation(str(output_path)).slides) == 0
