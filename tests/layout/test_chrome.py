#!/usr/bin/env python3
"""
Chrome rectangles must stay on the canvas and must not overlap, on every
canvas the preview supports.
"""

import itertools

import pytest

from slide_compiler.geometry import ASPECT_RATIOS, MODES, ORIENTATIONS, Box, Canvas, slide_frame, swap_ratio


def rectangles_overlap(a: Box, b: Box) -> bool:
    """Check if two rectangles overlap (touching edges do not count)."""
    if a.right <= b.x or b.right <= a.x:
        return False
    if a.bottom <= b.y or b.bottom <= a.y:
        return False
    return True


CANVASES = [Canvas(r, o, m) for r, o, m in itertools.product(ASPECT_RATIOS, ORIENTATIONS, MODES)]


@pytest.mark.parametrize("canvas", CANVASES, ids=lambda c: f"{c.aspect_ratio}-{c.orientation}-{c.mode}")
def test_chrome_inside_canvas(canvas):
    width, height = canvas.size
    frame = slide_frame(width, height)
    page = Box(0, 0, width, height)

    for box in (frame.header_bar, frame.footer_bar, frame.card, frame.title, frame.cover_title,
                frame.footer_text, frame.body):
        assert page.contains(box)
        assert box.width > 0 and box.height > 0

    assert frame.card.contains(frame.body)
    assert frame.header_bar.contains(frame.title)
    assert frame.footer_bar.contains(frame.footer_text)


@pytest.mark.parametrize("canvas", CANVASES, ids=lambda c: f"{c.aspect_ratio}-{c.orientation}-{c.mode}")
def test_bars_and_card_do_not_overlap(canvas):
    frame = slide_frame(*canvas.size)
    for a, b in itertools.combinations((frame.header_bar, frame.card, frame.footer_bar), 2):
        assert not rectangles_overlap(a, b)


def test_short_side_is_constant():
    for canvas in CANVASES:
        assert min(canvas.size) == pytest.approx(405)


@pytest.mark.parametrize("ratio", ["16:9", "4:3", "1:1", "16/9"])
def test_swap_is_involutive(ratio):
    normalized = ratio.replace("/", ":")
    assert swap_ratio(swap_ratio(ratio)) == normalized
