"""
Inline ``**bold**`` handling.

The run list is the single parse of a line. The offset view used by the
drawing-command backend (:func:`line_view`) is derived from it rather than
re-parsing, so the characters styled remotely are always the characters
inserted.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .models import StyledRun

_BOLD_SPLIT_RE = re.compile(r"(\*\*.*?\*\*)")


@dataclass(frozen=True)
class LineText:
    """Plain text of a line plus the ``[start, end)`` span of each bold run."""
    text: str
    bold_ranges: Tuple[Tuple[int, int], ...] = ()


def extract_runs(line: str) -> List[StyledRun]:
    """
    Split *line* into styled runs.

    Paired ``**`` markers become bold runs with the markers stripped; an
    unpaired ``**`` stays in the surrounding plain text. Zero-length runs are
    dropped.
    """
    runs: List[StyledRun] = []
    for index, part in enumerate(_BOLD_SPLIT_RE.split(line or "")):
        # re.split puts captured groups at odd indices
        if index % 2 == 1:
            inner = part[2:-2]
            if inner:
                runs.append(StyledRun(inner, True))
        elif part:
            runs.append(StyledRun(part, False))
    return runs


def plain_text(runs: Iterable[StyledRun]) -> str:
    return "".join(run.text for run in runs)


def line_view(runs: Sequence[StyledRun]) -> LineText:
    """Concatenate *runs* and record where each bold run lands."""
    parts = []
    ranges = []
    cursor = 0
    for run in runs:
        if run.bold:
            ranges.append((cursor, cursor + len(run.text)))
        parts.append(run.text)
        cursor += len(run.text)
    return LineText("".join(parts), tuple(ranges))
