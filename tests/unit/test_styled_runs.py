"""Test bold run extraction and the offset view built from it."""

import pytest

from slide_compiler.models import StyledRun
from slide_compiler.styled_runs import extract_runs, line_view, plain_text


def test_bold_then_plain():
    assert extract_runs("**Bold** item") == [StyledRun("Bold", True), StyledRun(" item", False)]


def test_multiple_bold_spans():
    runs = extract_runs("**a** and **b**")
    assert [(r.text, r.bold) for r in runs] == [("a", True), (" and ", False), ("b", True)]


def test_unterminated_marker_is_literal():
    """An odd '**' stays in the plain text."""
    assert extract_runs("a **b") == [StyledRun("a **b", False)]
    assert extract_runs("**a** b **c") == [StyledRun("a", True), StyledRun(" b **c", False)]


def test_empty_runs_dropped():
    assert extract_runs("") == []
    assert extract_runs("****") == []


@pytest.mark.parametrize("line, expected", [
    ("plain", "plain"),
    ("**Bold** item", "Bold item"),
    ("x **y** z **w**", "x y z w"),
    ("dangling **", "dangling **"),
    ("**only**", "only"),
])
def test_runs_reconstruct_line_without_markers(line, expected):
    assert plain_text(extract_runs(line)) == expected


def test_line_view_offsets():
    view = line_view(extract_runs("x **bb** y **c**"))
    assert view.text == "x bb y c"
    assert view.bold_ranges == ((2, 4), (7, 8))
    assert [view.text[s:e] for s, e in view.bold_ranges] == ["bb", "c"]
