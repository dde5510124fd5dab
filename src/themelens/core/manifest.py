"""
Project configuration.

Settings come from ``themelens.toml`` at the project root, or from the
``[tool.themelens]`` table of ``pyproject.toml``. Both use the same layout::

    [theme]
    file = "src/theme.ts"
    constructors = ["createTheme", "extendTheme"]
    styled_prefixes = ["styled"]
    import_depth = 1
    require_styled_context = false
    imports_manifest = "theme-imports.json"

The legacy ``theme-imports.json`` file maps aliases to JSON theme files
(``{"brand": "themes/brand.json"}``) and is read by ``load_theme_imports``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import make_manifest_error
from .options import ThemeOptions

logger = logging.getLogger(__name__)

MANIFEST_NAME = "themelens.toml"
PYPROJECT_NAME = "pyproject.toml"
DEFAULT_IMPORTS_MANIFEST = "theme-imports.json"


class ThemeSection(BaseModel):
    """The ``[theme]`` table."""

    file: str | None = Field(default=None, description="Theme source, relative to the project root")
    constructors: list[str] = Field(default_factory=lambda: ["createTheme", "extendTheme"])
    styled_prefixes: list[str] = Field(default_factory=lambda: ["styled"])
    import_depth: int = Field(default=1, ge=0)
    require_styled_context: bool = False
    imports_manifest: str = DEFAULT_IMPORTS_MANIFEST

    model_config = ConfigDict(extra="forbid")


class ThemeLensManifest(BaseModel):
    """Parsed project configuration."""

    theme: ThemeSection = Field(default_factory=ThemeSection)
    path: Path | None = Field(default=None, description="File the settings were read from")

    model_config = ConfigDict(extra="forbid")

    def to_options(self) -> ThemeOptions:
        return ThemeOptions(
            constructor_names=tuple(self.theme.constructors),
            styled_prefixes=tuple(self.theme.styled_prefixes),
            max_import_depth=self.theme.import_depth,
            require_styled_context=self.theme.require_styled_context,
        )

    def theme_file(self, project_root: Path) -> Path | None:
        if self.theme.file is None:
            return None
        return (project_root / self.theme.file).resolve()

    def imports_manifest(self, project_root: Path) -> Path:
        return (project_root / self.theme.imports_manifest).resolve()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise make_manifest_error(f"Invalid TOML in {path.name}: {e}", file=path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise make_manifest_error(f"Cannot read {path}: {e}", file=path) from e


def parse_manifest(data: dict[str, Any], path: Path | None = None) -> ThemeLensManifest:
    """Validate a settings table (the contents of ``themelens.toml``)."""
    try:
        return ThemeLensManifest(theme=data.get("theme", {}), path=path)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise make_manifest_error(f"Invalid themelens configuration: {details}", file=path) from e


def load_manifest(project_root: Path) -> ThemeLensManifest:
    """
    Load settings for a project.

    ``themelens.toml`` wins over ``[tool.themelens]`` in ``pyproject.toml``.
    Without either, defaults are returned.

    Raises:
        ManifestError: The settings file is malformed or has invalid values
    """
    manifest_path = project_root / MANIFEST_NAME
    if manifest_path.exists():
        return parse_manifest(_read_toml(manifest_path), manifest_path)

    pyproject_path = project_root / PYPROJECT_NAME
    if pyproject_path.exists():
        tool = _read_toml(pyproject_path).get("tool", {}).get("themelens")
        if tool is not None:
            return parse_manifest(tool, pyproject_path)

    logger.debug("No themelens configuration in %s, using defaults", project_root)
    return ThemeLensManifest()


def load_theme_imports(path: Path) -> dict[str, Path]:
    """
    Read a legacy ``{alias: relativePath}`` manifest.

    Paths are resolved against the manifest's directory. A missing file gives
    an empty mapping.

    Raises:
        ManifestError: The file is not a JSON object of strings
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise make_manifest_error(
            f"Invalid JSON in {path.name}: {e.msg}", file=path, line=e.lineno, column=e.colno
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise make_manifest_error(f"Cannot read {path}: {e}", file=path) from e

    if not isinstance(data, dict):
        raise make_manifest_error(f"{path.name} must contain a JSON object", file=path)

    aliases: dict[str, Path] = {}
    for alias, relative in data.items():
        if not isinstance(relative, str):
            raise make_manifest_error(
                f"{path.name}: path for {alias!r} must be a string", file=path
            )
        aliases[alias] = (path.parent / relative).resolve()
    return aliases
