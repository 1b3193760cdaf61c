import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so `import slide_compiler` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def sample_deck():
    """Three-slide deck touching every construct of the dialect."""
    return (
        "# Quarterly Review\n"
        "- **Revenue** up 12%\n"
        "- Costs flat\n"
        "---\n"
        "# Numbers\n"
        "## Regional split\n"
        "| Region | **Sales** |\n"
        "|---|---:|\n"
        "| EMEA | 40 |\n"
        "| APAC | **35** |\n"
        "Closing note\n"
        "---\n"
        "Just text, no heading"
    )
