"""Theme loading, the theme registry and per-slide theme resolution."""
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional

from .models import Theme, ThemeCategory, ThemeColors, TextStyle, Typography

logger = logging.getLogger(__name__)

DEFAULT_THEME_ID = "default"
THEMES_DIR = Path(__file__).parent / "themes"


def _themes_dir(themes_dir=None) -> Path:
    return Path(themes_dir) if themes_dir is not None else THEMES_DIR


def get_css(theme: str = "default", themes_dir=None) -> str:
    """
    Load CSS content for the specified theme.

    Args:
        theme: Theme name (default, dark, etc.)
        themes_dir: Directory holding ``<theme>.css`` files (package themes by default)

    Returns:
        CSS content as string

    Raises:
        FileNotFoundError: If theme file doesn't exist
        ValueError: If theme name is invalid
    """
    # Validate theme name (security: prevent path traversal)
    if not theme or not theme.replace("_", "").replace("-", "").isalnum():
        raise ValueError(f"Invalid theme name: {theme}")

    directory = _themes_dir(themes_dir)
    theme_path = directory / f"{theme}.css"

    if not theme_path.exists():
        raise FileNotFoundError(
            f"Theme '{theme}' not found. Available themes: {list_available_themes(directory)}"
        )

    with open(theme_path, 'r', encoding='utf-8') as f:
        return f.read()


def list_available_themes(themes_dir=None) -> List[str]:
    """
    List all available themes.

    Returns:
        Sorted list of theme names
    """
    directory = _themes_dir(themes_dir)
    if not directory.exists():
        return []
    return sorted(f.stem for f in directory.glob("*.css") if f.is_file())


def validate_theme(theme: str, themes_dir=None) -> bool:
    """
    Check if a theme exists.

    Returns:
        True if theme exists, False otherwise
    """
    try:
        get_css(theme, themes_dir=themes_dir)
        return True
    except (FileNotFoundError, ValueError):
        return False


def load_theme(theme: str, themes_dir=None) -> Theme:
    """Build a :class:`Theme` from its stylesheet variables."""
    from .css_utils import CSSParser

    css = CSSParser(theme, themes_dir=themes_dir)

    def text_style(role: str, bold: bool = False) -> TextStyle:
        return TextStyle(
            font_family=css.get_string(f"{role}-font"),
            font_size_pt=css.get_px_value(f"{role}-size"),
            color=css.get_color(f"{role}-color"),
            bold=bold or css.get_flag(f"{role}-weight"),
        )

    return Theme(
        theme_id=theme,
        name=css.get_string("theme-name"),
        category=ThemeCategory.parse(css.get_raw_value("theme-category")),
        colors=ThemeColors(
            background=css.get_color("background"),
            primary=css.get_color("primary"),
            card=css.get_color("card"),
            text=css.get_color("text"),
        ),
        typography=Typography(
            header=text_style("header"),
            body=text_style("body"),
            footer=text_style("footer"),
        ),
    )


class ThemeRegistry(Mapping):
    """
    Immutable id -> :class:`Theme` mapping that always holds the default theme.

    The default-theme invariant is checked once here so that resolution
    further down can never come back empty-handed.
    """

    def __init__(self, themes: Mapping[str, Theme], default_id: str = DEFAULT_THEME_ID):
        self._themes: Dict[str, Theme] = dict(themes)
        if default_id not in self._themes:
            raise ValueError(
                f"❌ Theme registry is missing the default theme '{default_id}'. "
                f"Available themes: {sorted(self._themes)}"
            )
        self.default_id = default_id

    def __getitem__(self, theme_id: str) -> Theme:
        return self._themes[theme_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._themes)

    def __len__(self) -> int:
        return len(self._themes)

    @property
    def default(self) -> Theme:
        return self._themes[self.default_id]

    def by_category(self, category: ThemeCategory) -> List[Theme]:
        """Themes of one category, in id order (template picker grouping)."""
        return [self._themes[k] for k in sorted(self._themes) if self._themes[k].category is category]


def load_registry(themes_dir=None, default_id: str = DEFAULT_THEME_ID) -> ThemeRegistry:
    """Load every ``*.css`` theme in *themes_dir* into a registry."""
    themes = {name: load_theme(name, themes_dir=themes_dir) for name in list_available_themes(themes_dir)}
    logger.debug("Loaded %d themes from %s", len(themes), _themes_dir(themes_dir))
    return ThemeRegistry(themes, default_id=default_id)


_default_registry: Optional[ThemeRegistry] = None


def default_registry() -> ThemeRegistry:
    """Registry of the packaged themes, loaded on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = load_registry()
    return _default_registry


def resolve_theme(
    index: int,
    global_id: str,
    overrides: Optional[Mapping[int, str]],
    registry: Mapping[str, Theme],
) -> Theme:
    """
    Pick the theme for slide *index*.

    The per-slide override wins over the global id; an id missing from the
    registry falls back to the default theme.
    """
    theme_id = (overrides or {}).get(index, global_id)
    theme = registry.get(theme_id)
    if theme is None:
        logger.debug("Unknown theme id %r for slide %d, using '%s'", theme_id, index, DEFAULT_THEME_ID)
        theme = registry[getattr(registry, "default_id", DEFAULT_THEME_ID)]
    return theme
