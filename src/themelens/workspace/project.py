"""
File-system host for the theme engine.

``ThemeWorkspace`` is the collaborator the core leaves to its host: it reads
and parses files, resolves relative imports, publishes loaded documents into a
``ThemeDocumentCache`` and reads legacy JSON themes. It does not watch files;
callers invoke ``refresh`` when something changed.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path

from ..core.api import load_theme
from ..core.discovery import DiscoveredTheme, discover_theme
from ..core.document import ThemeDocument
from ..core.errors import SourceError
from ..core.manifest import ThemeLensManifest, load_manifest, load_theme_imports
from ..core.syntax import SOURCE_SUFFIXES, SourceFile, parse_source
from ..core.values import ObjectValue, flatten, from_plain
from .cache import ThemeDocumentCache

logger = logging.getLogger(__name__)

IMPORT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
SKIPPED_DIRS = frozenset({"node_modules", "dist", "build", "coverage"})

# "./theme.js" written in TypeScript sources refers to "./theme.ts"
_COMPILED_SUFFIXES = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}


class ThemeWorkspace:
    """Theme state for one project directory."""

    def __init__(
        self,
        root: Path,
        manifest: ThemeLensManifest | None = None,
        cache: ThemeDocumentCache | None = None,
        project_id: str | None = None,
    ):
        self.root = root.resolve()
        self.manifest = manifest if manifest is not None else load_manifest(self.root)
        self.options = self.manifest.to_options()
        self.cache = cache if cache is not None else ThemeDocumentCache()
        self.project_id = project_id or str(self.root)
        self.theme_path: Path | None = None
        self.legacy_themes: dict[str, ObjectValue] = {}
        self._sources: dict[Path, SourceFile] = {}

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def read_source(self, path: Path) -> SourceFile:
        """
        Parse a file, reusing the parse until ``invalidate``.

        Raises:
            SourceError: The file is missing or not UTF-8
        """
        path = path.resolve()
        cached = self._sources.get(path)
        if cached is not None:
            return cached
        try:
            data = path.read_bytes()
            data.decode("utf-8")
        except FileNotFoundError as e:
            raise SourceError(f"Theme source not found: {path}") from e
        except UnicodeDecodeError as e:
            raise SourceError(f"Theme source is not UTF-8: {path}") from e
        except OSError as e:
            raise SourceError(f"Cannot read {path}: {e}") from e
        source = parse_source(data, path)
        self._sources[path] = source
        return source

    def invalidate(self, path: Path | None = None) -> None:
        """Drop parsed sources: one file, or all of them."""
        if path is None:
            self._sources.clear()
        else:
            self._sources.pop(path.resolve(), None)

    def _import_candidates(self, base: Path) -> Iterator[Path]:
        if base.suffix in SOURCE_SUFFIXES:
            yield base
            for suffix in _COMPILED_SUFFIXES.get(base.suffix, ()):
                yield base.with_suffix(suffix)
        for ext in IMPORT_EXTENSIONS:
            yield base.with_name(base.name + ext)
        for ext in IMPORT_EXTENSIONS:
            yield base / f"index{ext}"

    def resolve_import(self, from_source: SourceFile, specifier: str) -> SourceFile | None:
        """
        Resolve a relative module specifier to a parsed file.

        Bare specifiers (packages) are not resolved.
        """
        if from_source.path is None or not specifier.startswith(("./", "../")):
            return None
        base = from_source.path.parent / specifier
        for candidate in self._import_candidates(base):
            if not candidate.is_file():
                continue
            try:
                return self.read_source(candidate)
            except SourceError as e:
                logger.warning("Skipping import %s: %s", candidate, e.message)
                return None
        return None

    def project_files(self) -> Iterator[Path]:
        """Source files under the root, skipping dependency and hidden directories."""
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(
                name for name in dirnames if name not in SKIPPED_DIRS and not name.startswith(".")
            )
            for filename in sorted(filenames):
                if filename.endswith(SOURCE_SUFFIXES) and not filename.endswith(".d.ts"):
                    yield Path(dirpath) / filename

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def document(self) -> ThemeDocument | None:
        """The live theme document, if one has been loaded."""
        if self.theme_path is None:
            return None
        return self.cache.get(self.project_id, str(self.theme_path))

    def discover(self) -> DiscoveredTheme | None:
        """Find the theme through ``ThemeProvider`` usage in project files."""
        sources: list[SourceFile] = []
        for path in self.project_files():
            try:
                sources.append(self.read_source(path))
            except SourceError as e:
                logger.warning("Skipping %s: %s", path, e.message)
        return discover_theme(sources, self.resolve_import, self.options)

    def locate_theme_file(self) -> Path | None:
        """Configured theme file, or the discovered one."""
        configured = self.manifest.theme_file(self.root)
        if configured is not None:
            return configured
        discovered = self.discover()
        return discovered.path if discovered is not None else None

    def load(self) -> ThemeDocument | None:
        """
        Load the theme and publish it.

        Raises:
            SourceError: The configured theme file cannot be read
        """
        path = self.theme_path or self.locate_theme_file()
        self.load_legacy_themes()
        if path is None:
            logger.info("No theme file configured or discovered in %s", self.root)
            return None

        self.theme_path = path
        document = load_theme(self.read_source(path), self.resolve_import, self.options)
        if document is None:
            logger.info("No theme object found in %s", path)
            self.cache.drop(self.project_id, str(path))
            return None

        if self.cache.publish(self.project_id, str(path), document):
            logger.info(
                "Loaded theme from %s (%d top-level keys)", path, len(document.root.entries)
            )
        return self.document

    def refresh(self) -> bool:
        """
        Re-read every file and reload the theme.

        Returns:
            True when the live document changed
        """
        before = self.document
        self.invalidate()
        after = self.load()
        return before is not after

    def is_theme_file(self, path: Path) -> bool:
        """True when a change to ``path`` can affect the loaded themes."""
        path = path.resolve()
        document = self.document
        if document is not None and path in document.files:
            return True
        if path == self.theme_path:
            return True
        if self.manifest.path is not None and path == self.manifest.path.resolve():
            return True
        imports_manifest = self.manifest.imports_manifest(self.root)
        if path == imports_manifest:
            return True
        return path in load_theme_imports(imports_manifest).values()

    # ------------------------------------------------------------------
    # Legacy JSON themes
    # ------------------------------------------------------------------

    def load_legacy_themes(self) -> dict[str, ObjectValue]:
        """Read the aliases of the imports manifest as JSON themes."""
        themes: dict[str, ObjectValue] = {}
        for alias, path in load_theme_imports(self.manifest.imports_manifest(self.root)).items():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("Skipping theme alias %r (%s): %s", alias, path, e)
                continue
            value = from_plain(data)
            if not isinstance(value, ObjectValue):
                logger.warning("Skipping theme alias %r: %s is not a JSON object", alias, path)
                continue
            themes[alias] = value
        self.legacy_themes = themes
        return themes

    def legacy_flat_keys(self) -> dict[str, list[str]]:
        """Alias to dotted keys, e.g. ``{"brand": ["colors.primary", ...]}``."""
        return {alias: list(flatten(theme)) for alias, theme in self.legacy_themes.items()}
