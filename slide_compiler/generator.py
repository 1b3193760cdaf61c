#!/usr/bin/env python3
"""
Main slide compiler module that ties the parser, theme registry and both backends together.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .geometry import Canvas
from .gslide_codegen import DrawOp, compile_document
from .gslide_requests import batch_requests, to_slides_requests
from .html_renderer import HTMLRenderer
from .layout_engine import LayoutDescriptor, LayoutEngine
from .markdown_parser import parse_document
from .models import DEFAULT_FOOTER_TEXT, Document, ThemeAssignment
from .pptx_renderer import PPTXRenderer
from .theme_loader import DEFAULT_THEME_ID, default_registry, load_registry

logger = logging.getLogger(__name__)

FORMATS = ("layout", "html", "requests", "pptx")


class SlideCompiler:
    """
    Main class for compiling slide markdown into previews and exports.
    """

    def __init__(
        self,
        *,
        theme: str = DEFAULT_THEME_ID,
        slide_themes: Optional[Mapping[int, str]] = None,
        footer_text: str = DEFAULT_FOOTER_TEXT,
        aspect_ratio: str = "16:9",
        orientation: str = "landscape",
        mode: str = "thumbnail",
        themes_dir=None,
        debug: bool = False,
    ):
        """Create a new :class:`SlideCompiler`.

        Parameters
        ----------
        theme
            Global theme id (``default`` / ``dark`` / …). Unknown ids fall
            back to the default theme.
        slide_themes
            Per-slide theme overrides keyed by slide index.
        footer_text
            Caption drawn in the footer bar of every slide.
        aspect_ratio, orientation, mode
            Canvas parameters of the preview (``16:9`` / ``4:3`` / ``1:1``,
            ``landscape`` / ``portrait``, ``thumbnail`` / ``fullscreen``).
        themes_dir
            Directory of ``*.css`` theme files; the packaged themes by default.
        debug
            Enable verbose logging of per-slide decisions.
        """
        self.debug = debug
        self.footer_text = footer_text
        self.registry = load_registry(themes_dir) if themes_dir is not None else default_registry()
        self.assignment = ThemeAssignment(theme_id=theme, overrides=dict(slide_themes or {}))
        self.canvas = Canvas(aspect_ratio=aspect_ratio, orientation=orientation, mode=mode)

        if theme not in self.registry:
            logger.warning(f"Theme '{theme}' not found, falling back to '{self.registry.default_id}'")

        self.html_renderer = HTMLRenderer(debug=debug)
        self.pptx_renderer = PPTXRenderer(debug=debug)

    @property
    def layout_engine(self) -> LayoutEngine:
        return LayoutEngine(registry=self.registry, assignment=self.assignment, canvas=self.canvas,
                            footer_text=self.footer_text, debug=self.debug)

    def set_slide_theme(self, index: int, theme_id: str) -> None:
        self.assignment = self.assignment.with_overrides({index: theme_id})

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def parse(self, markdown: str) -> Document:
        return parse_document(markdown)

    def layout(self, markdown: str) -> List[LayoutDescriptor]:
        """Layout descriptors for every slide (grid preview)."""
        return self.layout_engine.layout_markdown(markdown)

    def layout_slide(self, markdown: str, index: int) -> LayoutDescriptor:
        """Layout descriptor for one slide (presentation overlay)."""
        return self.layout_engine.layout_index(markdown, index)

    def compile(self, markdown: str, skip_empty: bool = False) -> List[DrawOp]:
        """Drawing ops for the whole deck on the 720x405 pt page."""
        document = self.parse(markdown)
        ops = compile_document(document, self.assignment, self.registry, footer_text=self.footer_text,
                               skip_empty=skip_empty, debug=self.debug)
        if self.debug:
            logger.info(f"Compiled {len(document)} slides into {len(ops)} drawing ops")
        return ops

    def requests(self, markdown: str) -> List[Dict]:
        """Google Slides ``batchUpdate`` requests for the deck."""
        return to_slides_requests(self.compile(markdown), debug=self.debug)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def render_html(self, markdown: str, output_path: Optional[str] = None,
                    selection: Iterable[int] = ()) -> str:
        """
        Render the grid preview.

        Returns the HTML, after writing it to *output_path* when one is given.
        """
        html = self.html_renderer.render_deck(self.layout(markdown), selection=selection)
        if output_path:
            _ensure_parent(output_path)
            Path(output_path).write_text(html, encoding="utf-8")
            if self.debug:
                logger.info(f"Preview saved to: {output_path}")
        return html

    def render_pptx(self, markdown: str, output_path: str = "output/presentation.pptx") -> str:
        """
        Export the deck as a PowerPoint file.

        Args:
            markdown: The slide markdown
            output_path: Path where the PPTX file should be saved

        Returns:
            str: Path to the generated PPTX file
        """
        output_path = str(output_path)
        if not output_path.endswith('.pptx'):
            output_path = f"{output_path}.pptx"
        _ensure_parent(output_path)

        self.pptx_renderer.render(self.compile(markdown), output_path)

        if self.debug:
            logger.info(f"Generated presentation saved to: {output_path}")
            logger.info(f"Theme: {self.assignment.theme_id}")
        return output_path


def _ensure_parent(output_path) -> None:
    parent = os.path.dirname(str(output_path))
    if parent:
        os.makedirs(parent, exist_ok=True)


def _slide_theme(value: str):
    """Parse ``INDEX=THEME`` for ``--slide-theme``."""
    import argparse

    index, sep, theme_id = value.partition("=")
    if not sep or not index.strip().isdigit() or not theme_id.strip():
        raise argparse.ArgumentTypeError(f"expected INDEX=THEME, got '{value}'")
    return int(index), theme_id.strip()


def main(argv=None):
    """Command-line entry point for the slide compiler."""
    import argparse

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="slide-compiler", description="Compile slide markdown into previews and exports.")
        p.add_argument("markdown", type=Path, help="Markdown file to compile")
        p.add_argument("--format", "-f", choices=FORMATS, default="pptx", help="Output format (default: pptx)")
        p.add_argument("--output", "-o", type=Path, help="Destination path (stdout for text formats when omitted)")
        p.add_argument("--theme", "-t", default=DEFAULT_THEME_ID, help="Global theme id (default, dark, …)")
        p.add_argument("--slide-theme", type=_slide_theme, action="append", default=[], metavar="INDEX=THEME",
                       help="Override the theme of one slide; may be repeated")
        p.add_argument("--aspect-ratio", default="16:9", help="Preview aspect ratio (16:9, 4:3, 1:1)")
        p.add_argument("--orientation", choices=("landscape", "portrait"), default="landscape")
        p.add_argument("--mode", choices=("thumbnail", "fullscreen"), default="thumbnail")
        p.add_argument("--footer", default=DEFAULT_FOOTER_TEXT, help="Footer caption text")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        return p

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger("slide_compiler").setLevel(logging.DEBUG)

    md_path: Path = args.markdown
    if not md_path.exists():
        logger.error(f"Markdown file '{md_path}' not found")
        sys.exit(1)
    markdown_text = md_path.read_text(encoding="utf-8")

    try:
        compiler = SlideCompiler(
            theme=args.theme,
            slide_themes=dict(args.slide_theme),
            footer_text=args.footer,
            aspect_ratio=args.aspect_ratio,
            orientation=args.orientation,
            mode=args.mode,
            debug=args.debug,
        )
    except ValueError as exc:
        logger.error(str(exc))
        sys.exit(1)

    if args.format == "pptx":
        output_path = compiler.render_pptx(markdown_text, args.output or Path("output/presentation.pptx"))
        logger.info("✅ Presentation written to %s", output_path)
        return

    if args.format == "html":
        text = compiler.render_html(markdown_text)
    elif args.format == "layout":
        text = json.dumps([page.to_dict() for page in compiler.layout(markdown_text)], indent=2, ensure_ascii=False)
    else:
        batches = [{"requests": batch} for batch in batch_requests(compiler.requests(markdown_text))]
        text = json.dumps(batches, indent=2, ensure_ascii=False)

    if args.output:
        _ensure_parent(args.output)
        args.output.write_text(text, encoding="utf-8")
        logger.info("✅ %s written to %s", args.format, args.output)
    else:
        sys.stdout.write(text + "\n")


if __name__ == "__main__":
    main()
