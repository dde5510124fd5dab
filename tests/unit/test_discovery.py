"""Tests for ThemeProvider-based theme discovery."""

from __future__ import annotations

from pathlib import Path

from themelens.core.discovery import (
    discover_theme,
    provider_theme_expressions,
    theme_attribute,
)
from themelens.core.options import ThemeOptions
from themelens.core.syntax import NodeKind, SourceFile, parse_source, walk

APP = """
import { ThemeProvider } from "@mui/material/styles";
import theme from "./theme";

export function App({ children }) {
  return <ThemeProvider theme={theme}>{children}</ThemeProvider>;
}
"""


def _resolver(files: dict[str, SourceFile]):
    def resolve(_from: SourceFile, specifier: str) -> SourceFile | None:
        return files.get(specifier)

    return resolve


class TestProviderExpressions:
    """Finding ``theme={...}`` on provider elements."""

    def test_opening_element(self) -> None:
        source = parse_source(APP, "App.tsx")
        expressions = provider_theme_expressions(source)
        assert [expr.text for expr in expressions] == ["theme"]

    def test_self_closing_and_member_name(self) -> None:
        source = parse_source("const el = <MUI.ThemeProvider theme={darkTheme} />;", "App.tsx")
        assert [e.text for e in provider_theme_expressions(source)] == ["darkTheme"]

    def test_other_elements_ignored(self) -> None:
        source = parse_source("const el = <Box theme={theme} />;", "App.tsx")
        assert provider_theme_expressions(source) == []

    def test_custom_provider_names(self) -> None:
        source = parse_source("const el = <CssVarsProvider theme={theme} />;", "App.tsx")
        assert provider_theme_expressions(source) == []
        options = ThemeOptions(provider_names=("CssVarsProvider",))
        assert len(provider_theme_expressions(source, options)) == 1

    def test_string_attribute(self) -> None:
        source = parse_source('const el = <ThemeProvider theme="dark" />;', "App.tsx")
        element = next(n for n in walk(source.root) if n.kind == NodeKind.JSX_SELF_CLOSING_ELEMENT)
        assert theme_attribute(element) is None


class TestDiscoverTheme:
    """Tracing the provider's theme to its defining file."""

    def test_imported_theme(self) -> None:
        theme_file = parse_source("export default createTheme({});", "src/theme.ts")
        app = parse_source(APP, "src/App.tsx")
        found = discover_theme([app], _resolver({"./theme": theme_file}))
        assert found is not None
        assert found.path == Path("src/theme.ts")
        assert found.provider_file == Path("src/App.tsx")

    def test_theme_defined_in_provider_file(self) -> None:
        text = (
            "const theme = createTheme({ palette: {} });\n"
            "export const App = () => <ThemeProvider theme={theme} />;\n"
        )
        app = parse_source(text, "App.tsx")
        found = discover_theme([app])
        assert found is not None
        assert found.path == Path("App.tsx")

    def test_inline_object(self) -> None:
        app = parse_source("const el = <ThemeProvider theme={{ a: 1 }} />;", "App.tsx")
        found = discover_theme([app])
        assert found is not None
        assert found.path == Path("App.tsx")

    def test_unresolvable_import(self) -> None:
        app = parse_source(APP, "App.tsx")
        assert discover_theme([app], _resolver({})) is None
        assert discover_theme([app]) is None

    def test_first_provider_in_file_order(self) -> None:
        first = parse_source("const el = <ThemeProvider theme={{ a: 1 }} />;", "First.tsx")
        second = parse_source("const el = <ThemeProvider theme={{ b: 1 }} />;", "Second.tsx")
        found = discover_theme([first, second])
        assert found is not None
        assert found.provider_file == Path("First.tsx")

    def test_no_providers(self) -> None:
        assert discover_theme([parse_source("export const x = 1;", "x.ts")]) is None

    def test_in_memory_sources_skipped(self) -> None:
        assert discover_theme([parse_source("const el = <ThemeProvider theme={{}} />;")]) is None
