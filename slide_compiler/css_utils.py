"""
CSS variable extraction for theme files.

Each theme lives in ``themes/<id>.css`` and declares everything the compiler
needs as custom properties inside its ``:root`` block. This module is the only
place that reads those values, so both backends see identical numbers.
"""
import re
from typing import Dict, Optional

from .theme_loader import get_css

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def normalize_hex(value: str) -> str:
    """Return ``#rrggbb`` in lower case; accepts the ``#rgb`` short form."""
    value = value.strip()
    if not _HEX_COLOR_RE.match(value):
        raise ValueError(f"Not a hex colour: {value!r}")
    hex_part = value[1:]
    if len(hex_part) == 3:
        hex_part = "".join(c * 2 for c in hex_part)
    return "#" + hex_part.lower()


class CSSParser:
    """
    Read ``:root`` custom properties from a theme stylesheet.

    Values are parsed once and cached for the lifetime of the parser.
    """

    def __init__(self, theme: str = "default", themes_dir=None, css_content: Optional[str] = None):
        self.theme = theme
        self.css_content = css_content if css_content is not None else get_css(theme, themes_dir=themes_dir)
        self._css_vars = None

    def get_css_variables(self) -> Dict[str, str]:
        """Extract all CSS variables from :root section. Cached for performance."""
        if self._css_vars is not None:
            return self._css_vars

        root_match = re.search(r':root\s*\{([^}]+)\}', self.css_content, re.DOTALL)
        if not root_match:
            raise ValueError(f"No :root section found in theme '{self.theme}'")

        variable_pattern = r'--([^:]+):\s*([^;]+);'
        css_vars = re.findall(variable_pattern, root_match.group(1))
        self._css_vars = {name.strip(): value.strip() for name, value in css_vars}
        return self._css_vars

    def get_raw_value(self, variable_name: str) -> str:
        """Get raw CSS variable value."""
        value = self.get_css_variables().get(variable_name)
        if not value:
            raise ValueError(f"CSS variable '--{variable_name}' not found in theme '{self.theme}'")
        return value

    def get_string(self, variable_name: str) -> str:
        """Raw value with surrounding quotes removed (font names, labels)."""
        return self.get_raw_value(variable_name).strip('"\'')

    def get_px_value(self, variable_name: str) -> float:
        """Get a pixel value; theme sizes are authored in px and used 1:1 as pt."""
        value = self.get_raw_value(variable_name)
        px_match = re.fullmatch(r'(\d+(?:\.\d+)?)px', value)
        if not px_match:
            raise ValueError(f"CSS variable '--{variable_name}' is not a pixel value: {value}")
        # Round to nearest 0.5pt, the precision slide editors accept
        return round(float(px_match.group(1)) * 2) / 2

    def get_color(self, variable_name: str) -> str:
        value = self.get_raw_value(variable_name)
        try:
            return normalize_hex(value)
        except ValueError:
            raise ValueError(
                f"❌ CSS variable '--{variable_name}' in theme '{self.theme}' must be a hex colour, got {value!r}"
            ) from None

    def get_flag(self, variable_name: str, truthy: str = "bold") -> bool:
        """Optional keyword flag such as ``--header-weight: bold``."""
        value = self.get_css_variables().get(variable_name)
        return bool(value) and value.strip().lower() == truthy
