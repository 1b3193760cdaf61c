"""
Slide-level edits on the raw markdown, plus the selection and theme-override
helpers the editor keeps next to it.

Every edit re-splits the deck, changes the list of segments and joins it
back with ``"\\n---\\n"``. The parsed IR is never touched.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import ThemeAssignment
from .splitter import join_slides, split_slides

logger = logging.getLogger(__name__)

NEW_SLIDE_TEMPLATE = "\n\n# New Slide\n\n- Content"
UP = "up"
DOWN = "down"


def insert_position(selection: Iterable[int], count: int) -> int:
    """Where the next slide goes: after the last selected slide, else at the end."""
    selection = list(selection)
    if selection:
        return max(selection) + 1
    return count


def add_slide(markdown: str, insert_at: Optional[int] = None) -> str:
    """
    Insert the new-slide template at ``insert_at`` (append when ``None``).

    Out-of-range positions are clamped to the deck.
    """
    segments = split_slides(markdown)
    position = len(segments) if insert_at is None else max(0, min(insert_at, len(segments)))
    segments.insert(position, NEW_SLIDE_TEMPLATE)
    logger.debug("Added slide at %d (now %d slides)", position, len(segments))
    return join_slides(segments)


def delete_slides(markdown: str, indices: Iterable[int]) -> str:
    """Drop the slides at ``indices``; an empty selection returns the input unchanged."""
    doomed = set(indices)
    if not doomed:
        return markdown
    segments = split_slides(markdown)
    kept = [segment for index, segment in enumerate(segments) if index not in doomed]
    logger.debug("Deleted %d slides", len(segments) - len(kept))
    return join_slides(kept)


def move_slides(markdown: str, indices: Iterable[int], direction: str) -> Tuple[str, List[int]]:
    """
    Move every selected slide one step ``up`` or ``down``.

    Returns the new markdown and the shifted selection. When the selection is
    empty, or any selected slide already sits at the boundary in that
    direction, the markdown and selection come back unchanged.

    Raises:
        ValueError: If direction is not ``up`` or ``down``
    """
    if direction not in (UP, DOWN):
        raise ValueError(f"direction must be '{UP}' or '{DOWN}', got {direction!r}")

    segments = split_slides(markdown)
    selection = sorted({i for i in indices if 0 <= i < len(segments)})
    if not selection:
        return markdown, selection

    step = -1 if direction == UP else 1
    if (direction == UP and selection[0] == 0) or (direction == DOWN and selection[-1] == len(segments) - 1):
        return markdown, selection

    # Moving down swaps from the bottom so a block of adjacent slides shifts together
    order = selection if direction == UP else list(reversed(selection))
    for index in order:
        segments[index + step], segments[index] = segments[index], segments[index + step]
    return join_slides(segments), [i + step for i in selection]


def toggle_selection(selection: Sequence[int], index: int, multi: bool = False) -> List[int]:
    """
    Click handling for the slide grid.

    A plain click selects only ``index``; a ctrl/cmd click (``multi``) adds it
    to or removes it from the current selection.
    """
    if not multi:
        return [index]
    if index in selection:
        return [i for i in selection if i != index]
    return list(selection) + [index]


def apply_theme(assignment: ThemeAssignment, theme_id: str, selection: Iterable[int]) -> ThemeAssignment:
    """Override the theme of the selected slides, or change the global theme when nothing is selected."""
    selection = list(selection)
    if selection:
        return assignment.with_overrides({index: theme_id for index in selection})
    return ThemeAssignment(theme_id=theme_id, overrides=dict(assignment.overrides))
