"""Test the line-oriented slide parser."""

from slide_compiler.markdown_parser import (
    is_separator_row, parse_document, parse_heading, parse_slide, split_table_cells,
)
from slide_compiler.models import HeaderBlock, StyledRun, TableBlock, TextBlock
from slide_compiler.splitter import split_slides


def test_title_and_bullets_scenario():
    """Bold bullet, plain bullet, then a second slide with only a title."""
    doc = parse_document("# Title\n- **Bold** item\n- plain item\n---\n# Slide 2")

    assert len(doc) == 2
    first, second = doc.slides
    assert first.title == "Title"
    assert first.blocks == (
        TextBlock(runs=(StyledRun("Bold", True), StyledRun(" item", False)), is_bullet=True),
        TextBlock(runs=(StyledRun("plain item", False),), is_bullet=True),
    )
    assert second.title == "Slide 2"
    assert second.blocks == ()


def test_table_scenario():
    """Separator on the second line marks row 0 as the header row."""
    slide = parse_slide("| a | b |\n|---|---|\n| 1 | 2 |")

    assert len(slide.blocks) == 1
    table = slide.blocks[0]
    assert isinstance(table, TableBlock)
    assert [[c.text for c in row.cells] for row in table.rows] == [["a", "b"], ["1", "2"]]
    assert [row.is_header_row for row in table.rows] == [True, False]


def test_first_heading_is_title_only():
    slide = parse_slide("## Intro\n# Big\n### Small")
    assert slide.title == "Intro"
    assert [(h.level, h.text) for h in slide.headers()] == [(1, "Big"), (3, "Small")]
    assert all(h.text != "Intro" for h in slide.headers())


def test_heading_level_clamped():
    slide = parse_slide("# T\n######## Deep")
    assert slide.blocks == (HeaderBlock(level=6, runs=(StyledRun("Deep", False),)),)


def test_heading_needs_space():
    assert parse_heading("#hashtag") is None
    assert parse_heading("### Three") == (3, "Three")
    slide = parse_slide("#hashtag")
    assert slide.title is None
    assert slide.blocks == (TextBlock(runs=(StyledRun("#hashtag", False),)),)


def test_no_heading_falls_back_to_label():
    slide = parse_slide("just text")
    assert slide.title is None
    assert slide.display_title == "No Title"


def test_empty_segment():
    slide = parse_slide("   \n\n ")
    assert slide.title is None
    assert slide.blocks == ()
    assert slide.is_empty()


def test_blank_lines_skipped_and_order_kept():
    slide = parse_slide("# T\n\nfirst\n\n- second\n\n## third")
    kinds = [block.kind for block in slide.blocks]
    assert kinds == ["text", "text", "header"]
    assert [b.text for b in slide.blocks] == ["first", "second", "third"]


def test_table_interrupts_bullets():
    slide = parse_slide("- x\n| a | b |\n| c | d |\n- y")
    assert [b.kind for b in slide.blocks] == ["text", "table", "text"]
    table = slide.tables()[0]
    assert len(table.rows) == 2
    assert not any(row.is_header_row for row in table.rows)


def test_separator_not_on_second_line():
    """A late separator is dropped but does not create a header row."""
    slide = parse_slide("| a |\n| b |\n|---|\n| c |")
    table = slide.tables()[0]
    assert [row.cells[0].text for row in table.rows] == ["a", "b", "c"]
    assert not any(row.is_header_row for row in table.rows)


def test_ragged_table():
    slide = parse_slide("| a | b | c |\n|---|---|---|\n| 1 |")
    table = slide.tables()[0]
    assert table.column_count == 3
    assert len(table.rows[1].cells) == 1


def test_bold_inside_cells():
    slide = parse_slide("| **x** | y |")
    cell = slide.tables()[0].rows[0].cells[0]
    assert cell.runs == (StyledRun("x", True),)


def test_table_cell_helpers():
    assert split_table_cells("| a | b |") == ["a", "b"]
    assert split_table_cells("|a|") == ["a"]
    assert is_separator_row([":--", "--:", ":-:", "---"])
    assert not is_separator_row(["--", "x"])
    assert not is_separator_row([])


def test_unterminated_bold_in_bullet():
    slide = parse_slide("- half **open")
    assert slide.blocks == (TextBlock(runs=(StyledRun("half **open", False),), is_bullet=True),)


def test_slide_count_matches_segments():
    for markdown in ["", "---", "# a\n---\n\n---\n# c", "a\n---\n---\n---"]:
        assert len(parse_document(markdown)) == len(split_slides(markdown))
