"""Split a markdown deck into raw slide segments and join them back."""
import re
from typing import Iterable, List

SLIDE_DELIMITER = "---"
SLIDE_JOINER = "\n---\n"

# A delimiter must own its line; surrounding blanks are tolerated.
_DELIMITER_RE = re.compile(r"^[ \t\r]*---[ \t\r]*$", re.MULTILINE)


def split_slides(markdown: str) -> List[str]:
    """
    Split *markdown* on delimiter lines.

    Empty leading and trailing segments are kept verbatim so that slide
    indices stay stable; the caller decides how to show an empty slide.
    """
    return _DELIMITER_RE.split(markdown or "")


def join_slides(segments: Iterable[str]) -> str:
    """Inverse of :func:`split_slides` up to the newlines around delimiters."""
    return SLIDE_JOINER.join(segments)


def count_slides(markdown: str) -> int:
    return len(split_slides(markdown))
