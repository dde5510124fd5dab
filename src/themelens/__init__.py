"""
themelens - static theme path resolution for styled-component code.

Reads the theme object a JavaScript/TypeScript project defines (MUI
``createTheme``, styled-components themes, plain objects) without running it,
and answers editor questions about ``theme.palette.primary.main`` style
accesses: completion, hover values, inlay previews and colors.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import (
    ThemeDocument,
    ThemeLensError,
    ThemeOptions,
    classify,
    load_theme,
    resolve_path,
    suggest_children,
)


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("themelens")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ThemeDocument",
    "ThemeOptions",
    "ThemeLensError",
    "load_theme",
    "classify",
    "resolve_path",
    "suggest_children",
]
