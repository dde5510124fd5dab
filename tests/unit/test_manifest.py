"""Tests for project configuration loading."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from themelens.core.errors import ManifestError
from themelens.core.manifest import (
    ThemeLensManifest,
    load_manifest,
    load_theme_imports,
    parse_manifest,
)

MakeProject = Callable[[dict[str, str]], Path]


class TestLoadManifest:
    """Locating and parsing settings."""

    def test_defaults(self, tmp_path: Path) -> None:
        manifest = load_manifest(tmp_path)
        assert manifest.path is None
        assert manifest.theme.file is None
        options = manifest.to_options()
        assert options.constructor_names == ("createTheme", "extendTheme")
        assert options.max_import_depth == 1

    def test_themelens_toml(self, make_project: MakeProject) -> None:
        root = make_project(
            {
                "themelens.toml": (
                    "[theme]\n"
                    'file = "src/theme.ts"\n'
                    'constructors = ["makeTheme"]\n'
                    "import_depth = 3\n"
                    "require_styled_context = true\n"
                )
            }
        )
        manifest = load_manifest(root)
        assert manifest.path == root / "themelens.toml"
        assert manifest.theme_file(root) == (root / "src/theme.ts").resolve()
        options = manifest.to_options()
        assert options.constructor_names == ("makeTheme",)
        assert options.max_import_depth == 3
        assert options.require_styled_context

    def test_pyproject_table(self, make_project: MakeProject) -> None:
        root = make_project(
            {"pyproject.toml": '[tool.themelens.theme]\nfile = "theme.js"\n'}
        )
        manifest = load_manifest(root)
        assert manifest.theme.file == "theme.js"
        assert manifest.path == root / "pyproject.toml"

    def test_pyproject_without_table(self, make_project: MakeProject) -> None:
        root = make_project({"pyproject.toml": '[project]\nname = "x"\n'})
        assert load_manifest(root) == ThemeLensManifest()

    def test_themelens_toml_wins(self, make_project: MakeProject) -> None:
        root = make_project(
            {
                "themelens.toml": '[theme]\nfile = "a.ts"\n',
                "pyproject.toml": '[tool.themelens.theme]\nfile = "b.ts"\n',
            }
        )
        assert load_manifest(root).theme.file == "a.ts"

    def test_invalid_toml(self, make_project: MakeProject) -> None:
        root = make_project({"themelens.toml": "[theme\nfile = "})
        with pytest.raises(ManifestError, match="Invalid TOML") as excinfo:
            load_manifest(root)
        assert excinfo.value.context is not None
        assert excinfo.value.context.file == root / "themelens.toml"
        assert str(excinfo.value).startswith(f"{root / 'themelens.toml'}\n")

    def test_unknown_key(self) -> None:
        with pytest.raises(ManifestError, match="theme.colour"):
            parse_manifest({"theme": {"colour": "red"}})

    def test_negative_depth(self) -> None:
        with pytest.raises(ManifestError, match="import_depth"):
            parse_manifest({"theme": {"import_depth": -1}})

    def test_imports_manifest_path(self, tmp_path: Path) -> None:
        manifest = parse_manifest({"theme": {"imports_manifest": "config/themes.json"}})
        assert manifest.imports_manifest(tmp_path) == (tmp_path / "config/themes.json").resolve()


class TestThemeImports:
    """The legacy alias manifest."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_theme_imports(tmp_path / "theme-imports.json") == {}

    def test_aliases(self, make_project: MakeProject) -> None:
        root = make_project({"theme-imports.json": '{"brand": "themes/brand.json"}'})
        aliases = load_theme_imports(root / "theme-imports.json")
        assert aliases == {"brand": (root / "themes/brand.json").resolve()}

    def test_invalid_json_has_location(self, make_project: MakeProject) -> None:
        root = make_project({"theme-imports.json": '{\n  "brand": \n}'})
        with pytest.raises(ManifestError) as excinfo:
            load_theme_imports(root / "theme-imports.json")
        assert excinfo.value.context is not None
        assert excinfo.value.context.line == 3

    def test_not_an_object(self, make_project: MakeProject) -> None:
        root = make_project({"theme-imports.json": '["brand.json"]'})
        with pytest.raises(ManifestError, match="JSON object") as excinfo:
            load_theme_imports(root / "theme-imports.json")
        assert excinfo.value.context is not None
        assert excinfo.value.context.format() == str(root / "theme-imports.json")

    def test_non_string_path(self, make_project: MakeProject) -> None:
        root = make_project({"theme-imports.json": '{"brand": 3}'})
        with pytest.raises(ManifestError, match="must be a string"):
            load_theme_imports(root / "theme-imports.json")
