"""Shared pytest fixtures for themelens tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from themelens.core.api import load_theme_text
from themelens.core.document import ThemeDocument
from themelens.core.syntax import SourceFile, parse_source

MUI_THEME = """
import { createTheme } from "@mui/material/styles";

const theme = createTheme({
  palette: {
    primary: { main: "#1976d2", contrastText: "#fff" },
    secondary: { main: "rgb(220, 0, 78)" },
    mode: "light",
  },
  spacing: (factor) => `${0.25 * factor}rem`,
  shape: { borderRadius: 4 },
  typography: {
    fontFamily: "Roboto, sans-serif",
    h1: { fontSize: 96, fontWeight: 300 },
  },
  zIndex: { modal: 1300 },
});

export default theme;
"""


@pytest.fixture
def parse() -> Callable[..., SourceFile]:
    """Parse TSX source text."""

    def _parse(text: str, path: str | None = None) -> SourceFile:
        return parse_source(text, path)

    return _parse


@pytest.fixture
def mui_document() -> ThemeDocument:
    """Theme document for a typical MUI createTheme file."""
    document = load_theme_text(MUI_THEME)
    assert document is not None
    return document


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative_path: content}`` files under a temporary project root."""

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _make
