"""
Slide geometry shared by both backends.

All distances are in canvas units, which are points. The reference canvas
is the 720x405 pt page of the remote slide API; other aspect ratios keep the
short side at 405 so the header, footer and card margins are the same size on
every canvas and the live preview matches the export.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

REFERENCE_WIDTH = 720.0
REFERENCE_HEIGHT = 405.0
SHORT_SIDE = REFERENCE_HEIGHT

HEADER_HEIGHT = 60.0
FOOTER_HEIGHT = 30.0
CARD_MARGIN = 20.0
BODY_PADDING = 20.0
TEXT_INSET = 20.0
COVER_TITLE_TOP = 30.0
COVER_TITLE_HEIGHT = 60.0

# Body-relative size of in-body headings; level 1 is the largest.
HEADING_SCALE = {1: 1.5, 2: 1.3, 3: 1.15, 4: 1.05, 5: 1.0, 6: 0.9}
TABLE_FONT_SCALE = 0.9
CARD_CORNER_RADIUS = 12.0

# 16:9 fullscreen renders at 1280x720 px; the grid thumbnail at half that.
FULLSCREEN_PX_PER_UNIT = 1280.0 / REFERENCE_WIDTH
THUMBNAIL_PX_PER_UNIT = FULLSCREEN_PX_PER_UNIT / 2

ASPECT_RATIOS = ("16:9", "4:3", "1:1")
ORIENTATIONS = ("landscape", "portrait")
MODES = ("thumbnail", "fullscreen")


def _round(value: float) -> float:
    return round(value, 4)


def parse_ratio(ratio: str) -> Tuple[int, int]:
    """``"16:9"`` -> ``(16, 9)``; also accepts ``16/9`` and ``16 / 9``."""
    normalized = ratio.replace("/", ":").replace(" ", "")
    try:
        width, height = (int(part) for part in normalized.split(":"))
    except ValueError:
        raise ValueError(f"Invalid aspect ratio: {ratio!r}") from None
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid aspect ratio: {ratio!r}")
    return width, height


def swap_ratio(ratio: str) -> str:
    """Portrait orientation swaps the fraction; ``swap_ratio(swap_ratio(r)) == r``."""
    width, height = parse_ratio(ratio)
    return f"{height}:{width}"


def heading_scale(level: int) -> float:
    return HEADING_SCALE[max(1, min(level, 6))]


def heading_size_pt(body_pt: float, level: int) -> float:
    """Heading font size for *level*, rounded to the nearest half point."""
    return round(body_pt * heading_scale(level) * 2) / 2


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in canvas units."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, other: "Box") -> bool:
        return (self.x <= other.x and self.y <= other.y
                and other.right <= self.right and other.bottom <= self.bottom)

    def to_dict(self) -> Dict[str, float]:
        return {"x": _round(self.x), "y": _round(self.y),
                "width": _round(self.width), "height": _round(self.height)}

    def percent_of(self, canvas_width: float, canvas_height: float) -> Dict[str, float]:
        """Same rectangle as percentages of the canvas (for CSS positioning)."""
        return {
            "left": _round(100 * self.x / canvas_width),
            "top": _round(100 * self.y / canvas_height),
            "width": _round(100 * self.width / canvas_width),
            "height": _round(100 * self.height / canvas_height),
        }


@dataclass(frozen=True)
class Canvas:
    """Render target for the layout engine."""
    aspect_ratio: str = "16:9"
    orientation: str = "landscape"
    mode: str = "thumbnail"

    def __post_init__(self):
        # The editor toolbar spells ratios as "16/9"
        if isinstance(self.aspect_ratio, str) and "/" in self.aspect_ratio:
            object.__setattr__(self, "aspect_ratio", self.aspect_ratio.replace(" ", "").replace("/", ":"))
        if self.aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"aspect_ratio must be one of {ASPECT_RATIOS}, got {self.aspect_ratio!r}")
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"orientation must be one of {ORIENTATIONS}, got {self.orientation!r}")
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.mode!r}")

    @property
    def effective_ratio(self) -> str:
        if self.orientation == "portrait":
            return swap_ratio(self.aspect_ratio)
        return self.aspect_ratio

    @property
    def css_aspect_ratio(self) -> str:
        width, height = parse_ratio(self.effective_ratio)
        return f"{width} / {height}"

    @property
    def size(self) -> Tuple[float, float]:
        """Canvas size in units; the short side is always 405."""
        width, height = parse_ratio(self.effective_ratio)
        if width >= height:
            return SHORT_SIDE * width / height, SHORT_SIDE
        return SHORT_SIDE, SHORT_SIDE * height / width

    @property
    def px_per_unit(self) -> float:
        return FULLSCREEN_PX_PER_UNIT if self.mode == "fullscreen" else THUMBNAIL_PX_PER_UNIT


@dataclass(frozen=True)
class SlideFrame:
    """Chrome rectangles of one slide."""
    width: float
    height: float
    header_bar: Box
    footer_bar: Box
    card: Box
    title: Box
    cover_title: Box
    footer_text: Box
    body: Box

    def title_box(self, cover: bool) -> Box:
        return self.cover_title if cover else self.title


def slide_frame(width: float = REFERENCE_WIDTH, height: float = REFERENCE_HEIGHT) -> SlideFrame:
    """
    Compute the chrome rectangles for a ``width`` x ``height`` canvas.

    Header bar on top, footer bar at the bottom, a rounded card between them
    inset by ``CARD_MARGIN`` and the body text inset a further
    ``BODY_PADDING`` inside the card.
    """
    content_top = HEADER_HEIGHT + CARD_MARGIN
    card_height = height - HEADER_HEIGHT - FOOTER_HEIGHT - 2 * CARD_MARGIN
    return SlideFrame(
        width=width,
        height=height,
        header_bar=Box(0, 0, width, HEADER_HEIGHT),
        footer_bar=Box(0, height - FOOTER_HEIGHT, width, FOOTER_HEIGHT),
        card=Box(CARD_MARGIN, content_top, width - 2 * CARD_MARGIN, card_height),
        title=Box(TEXT_INSET, 0, width - 2 * TEXT_INSET, HEADER_HEIGHT),
        cover_title=Box(2 * TEXT_INSET, COVER_TITLE_TOP, width - 4 * TEXT_INSET, COVER_TITLE_HEIGHT),
        footer_text=Box(TEXT_INSET, height - FOOTER_HEIGHT, width - 2 * TEXT_INSET, FOOTER_HEIGHT),
        body=Box(
            CARD_MARGIN + BODY_PADDING,
            content_top + BODY_PADDING,
            width - 2 * (CARD_MARGIN + BODY_PADDING),
            card_height - 2 * BODY_PADDING,
        ),
    )
