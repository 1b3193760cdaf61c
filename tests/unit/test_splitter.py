"""Test slide splitting on delimiter lines."""

from slide_compiler.splitter import count_slides, join_slides, split_slides


def test_split_basic():
    """Two slides around a single delimiter line."""
    assert split_slides("a\n---\nb") == ["a\n", "\nb"]


def test_split_keeps_empty_edges():
    """Leading and trailing empty segments are not filtered."""
    assert split_slides("---\nx\n---") == ["", "\nx\n", ""]
    assert count_slides("---") == 2


def test_empty_and_whitespace_input():
    assert split_slides("") == [""]
    assert split_slides(None) == [""]
    assert count_slides("   \n  ") == 1


def test_inline_dashes_are_not_delimiters():
    """'---' inside a paragraph or longer rules do not split."""
    assert count_slides("a --- b") == 1
    assert count_slides("a\n----\nb") == 1
    assert count_slides("a\n--- x\nb") == 1


def test_trimmed_delimiter_line():
    """Blanks around the delimiter are tolerated."""
    assert count_slides("a\n  ---  \nb") == 2
    assert count_slides("a\r\n---\r\nb") == 2


def test_join_preserves_slide_count():
    markdown = "# One\n---\n# Two\n---\n\n---\n# Four"
    segments = split_slides(markdown)
    assert len(segments) == 4
    assert count_slides(join_slides(segments)) == 4
    assert join_slides(["a", "b"]) == "a\n---\nb"
