"""Slide Compiler – top-level package

Exposes the public API (`SlideCompiler`, etc.) **and** sets up a minimal
logging configuration so that every sub-module can call

```python
import logging
logger = logging.getLogger(__name__)
```

and honour a single environment variable `SLIDE_COMPILER_LOG_LEVEL`.
"""

from __future__ import annotations

import logging
import os

# ------------------------------------------------------------------
# Default logging – honour env var, otherwise INFO.
# ------------------------------------------------------------------
LOG_LEVEL = os.getenv("SLIDE_COMPILER_LOG_LEVEL", "INFO").upper()
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

# Public API re-exports ------------------------------------------------
from .generator import SlideCompiler  # noqa: E402  (import after logger)
from .geometry import Canvas, swap_ratio  # noqa: E402
from .gslide_codegen import DrawOp, Opcode, compile_document  # noqa: E402
from .gslide_requests import batch_requests, to_slides_requests  # noqa: E402
from .html_renderer import HTMLRenderer  # noqa: E402
from .layout_engine import LayoutDescriptor, LayoutEngine, layout_slide  # noqa: E402
from .markdown_parser import parse_document, parse_slide  # noqa: E402
from .models import Document, Slide, Theme, ThemeAssignment  # noqa: E402
from .pptx_renderer import PPTXRenderer  # noqa: E402
from .slide_ops import add_slide, apply_theme, delete_slides, move_slides, toggle_selection  # noqa: E402
from .splitter import join_slides, split_slides  # noqa: E402
from .styled_runs import extract_runs  # noqa: E402
from .theme_loader import ThemeRegistry, load_registry, resolve_theme  # noqa: E402

__all__ = [
    "SlideCompiler",
    "Canvas",
    "swap_ratio",
    "DrawOp",
    "Opcode",
    "compile_document",
    "batch_requests",
    "to_slides_requests",
    "HTMLRenderer",
    "LayoutDescriptor",
    "LayoutEngine",
    "layout_slide",
    "parse_document",
    "parse_slide",
    "Document",
    "Slide",
    "Theme",
    "ThemeAssignment",
    "PPTXRenderer",
    "add_slide",
    "apply_theme",
    "delete_slides",
    "move_slides",
    "toggle_selection",
    "split_slides",
    "join_slides",
    "extract_runs",
    "ThemeRegistry",
    "load_registry",
    "resolve_theme",
]
