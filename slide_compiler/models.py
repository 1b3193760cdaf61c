"""
Data models for the slide compiler.

Everything here is immutable: the intermediate representation is rebuilt from
the raw markdown on every compile, so no object holds a back-reference or is
ever edited in place.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union


NO_TITLE_LABEL = "No Title"
DEFAULT_FOOTER_TEXT = "Made with Markdown Slides"


@dataclass(frozen=True)
class StyledRun:
    """A contiguous span of text with a uniform bold attribute."""
    text: str
    bold: bool = False


@dataclass(frozen=True)
class HeaderBlock:
    """A heading line other than the slide title."""
    level: int
    runs: Tuple[StyledRun, ...] = ()

    kind = "header"

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TextBlock:
    """A body line, optionally a bullet item (marker already stripped)."""
    runs: Tuple[StyledRun, ...] = ()
    is_bullet: bool = False

    kind = "text"

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TableCell:
    runs: Tuple[StyledRun, ...] = ()

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[TableCell, ...] = ()
    is_header_row: bool = False


@dataclass(frozen=True)
class TableBlock:
    """A maximal run of pipe-prefixed lines, separator rows removed."""
    rows: Tuple[TableRow, ...] = ()

    kind = "table"

    @property
    def column_count(self) -> int:
        """Width of the widest row; ragged tables are allowed."""
        return max((len(row.cells) for row in self.rows), default=0)


Block = Union[HeaderBlock, TextBlock, TableBlock]


@dataclass(frozen=True)
class Slide:
    """
    One delimiter-separated segment of the deck.

    ``title`` is the text of the first heading line, or ``None`` when the
    segment has no heading. The title line never appears in ``blocks``.
    """
    title: Optional[str] = None
    blocks: Tuple[Block, ...] = ()

    @property
    def display_title(self) -> str:
        """Title label shown by the preview surfaces."""
        return self.title if self.title is not None else NO_TITLE_LABEL

    def is_empty(self) -> bool:
        """Check if this slide has neither a title nor body content."""
        return self.title is None and not self.blocks

    def headers(self):
        return [b for b in self.blocks if isinstance(b, HeaderBlock)]

    def tables(self):
        return [b for b in self.blocks if isinstance(b, TableBlock)]

    def text_lines(self):
        return [b for b in self.blocks if isinstance(b, TextBlock)]


@dataclass(frozen=True)
class Document:
    """Ordered slides; the list index is the only slide identity."""
    slides: Tuple[Slide, ...] = ()

    def __len__(self) -> int:
        return len(self.slides)

    def __iter__(self):
        return iter(self.slides)

    def __getitem__(self, index: int) -> Slide:
        return self.slides[index]


# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------

class ThemeCategory(str, Enum):
    BUSINESS = "Business"
    COVER = "Cover"
    LECTURE = "Lecture"
    PITCH_DECK = "Pitch Deck"

    @classmethod
    def parse(cls, value: str) -> "ThemeCategory":
        """Accept both ``Pitch Deck`` and ``PitchDeck`` spellings."""
        normalized = value.strip().strip('"\'').replace(" ", "").lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == normalized:
                return member
        raise ValueError(f"Unknown theme category: {value!r}")


@dataclass(frozen=True)
class TextStyle:
    """Resolved typography for one text role (header, body or footer)."""
    font_family: str
    font_size_pt: float
    color: str
    bold: bool = False


@dataclass(frozen=True)
class ThemeColors:
    background: str
    primary: str
    card: str
    text: str


@dataclass(frozen=True)
class Typography:
    header: TextStyle
    body: TextStyle
    footer: TextStyle


@dataclass(frozen=True)
class Theme:
    theme_id: str
    name: str
    category: ThemeCategory
    colors: ThemeColors
    typography: Typography

    @property
    def is_cover(self) -> bool:
        """Cover themes drop the header bar, the card and bullet glyphs."""
        return self.category is ThemeCategory.COVER


@dataclass(frozen=True)
class ThemeAssignment:
    """Global theme id plus per-slide-index overrides."""
    theme_id: str = "default"
    overrides: Mapping[int, str] = field(default_factory=dict)

    def theme_for(self, index: int) -> str:
        return self.overrides.get(index, self.theme_id)

    def with_overrides(self, updates: Dict[int, str]) -> "ThemeAssignment":
        merged = dict(self.overrides)
        merged.update(updates)
        return ThemeAssignment(theme_id=self.theme_id, overrides=merged)
