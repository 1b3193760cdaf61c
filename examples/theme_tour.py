#!/usr/bin/env python3
"""Render one small deck in every packaged theme.

For each theme the script writes ``<theme>.pptx``, ``<theme>.html`` and
``<theme>.requests.json`` (the Google Slides ``batchUpdate`` bodies) into
``output/theme_tour/``. The last slide of each deck is switched to a Cover
theme to show per-slide overrides.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from slide_compiler import SlideCompiler, batch_requests, split_slides  # noqa: E402
from slide_compiler.theme_loader import list_available_themes  # noqa: E402

logger = logging.getLogger(__name__)

DECK = """# Theme Tour
- **One** markdown source
- Three surfaces: grid, fullscreen, export
---
# Results
## Pipeline
| Stage | Output |
|---|---|
| Parse | Slide IR |
| Layout | **Box tree** |
| Codegen | Draw ops |
Both backends read the same IR.
---
# Thank you
Questions?
"""


def main():
    out_dir = project_root / "output" / "theme_tour"
    out_dir.mkdir(parents=True, exist_ok=True)
    last_index = len(split_slides(DECK)) - 1

    for theme in list_available_themes():
        compiler = SlideCompiler(theme=theme, slide_themes={last_index: "vibrant_yellow"})
        compiler.render_pptx(DECK, str(out_dir / f"{theme}.pptx"))
        compiler.render_html(DECK, str(out_dir / f"{theme}.html"))
        batches = [{"requests": batch} for batch in batch_requests(compiler.requests(DECK))]
        (out_dir / f"{theme}.requests.json").write_text(json.dumps(batches, indent=2), encoding="utf-8")
        logger.info(f"✓ {theme}")

    print(f"🎉 Theme tour written to {out_dir}")


if __name__ == "__main__":
    main()
