"""Tests for property path extraction and resolution."""

from __future__ import annotations

import pytest

from themelens.core.classifier import CHAIN_KINDS, NOT_THEME, classify
from themelens.core.paths import chain_segments, extract, resolve, suggest_children
from themelens.core.syntax import SyntaxNode, parse_source, walk
from themelens.core.values import (
    NumberValue,
    ObjectValue,
    StringValue,
    UnresolvedValue,
    from_plain,
)


def _chain(expression: str) -> SyntaxNode:
    source = parse_source(f"x = {expression};")
    return next(n for n in walk(source.root) if n.kind in CHAIN_KINDS and n.text == expression)


def _extract(expression: str) -> list[str]:
    chain = _chain(expression)
    return extract(chain, classify(chain))


@pytest.fixture
def theme() -> ObjectValue:
    value = from_plain(
        {
            "palette": {"primary": {"main": "#1976d2", "light": "#42a5f5"}, "mode": "light"},
            "shape": {"borderRadius": 4},
            "shadows": ["none", "0 1px 2px"],
        }
    )
    assert isinstance(value, ObjectValue)
    return value


class TestExtract:
    """Member chains to theme-relative paths."""

    def test_direct(self) -> None:
        assert _extract("theme.palette.primary.main") == ["palette", "primary", "main"]

    def test_destructured_prop(self) -> None:
        assert _extract("props.theme.palette.primary") == ["palette", "primary"]

    def test_string_subscripts(self) -> None:
        assert _extract("theme['palette'][\"primary\"].main") == ["palette", "primary", "main"]

    def test_dynamic_subscript(self) -> None:
        assert _extract("theme.palette[key].main") == []

    def test_numeric_subscript(self) -> None:
        assert _extract("theme.shadows[1]") == []

    def test_bare_root(self) -> None:
        assert _extract("props.theme") == []

    def test_not_theme(self) -> None:
        chain = _chain("colors.primary.main")
        assert extract(chain, NOT_THEME) == []

    def test_optional_chaining(self) -> None:
        assert _extract("theme?.palette?.mode") == ["palette", "mode"]

    def test_chain_segments_include_root(self) -> None:
        assert chain_segments(_chain("props.theme.palette")) == ["props", "theme", "palette"]

    def test_chain_segments_non_identifier_root(self) -> None:
        assert chain_segments(_chain("useTheme().palette")) is None


class TestResolve:
    """Walking paths through the value tree."""

    def test_leaf(self, theme: ObjectValue) -> None:
        assert resolve(theme, ["palette", "primary", "main"]) == StringValue(value="#1976d2")

    def test_container(self, theme: ObjectValue) -> None:
        primary = resolve(theme, ["palette", "primary"])
        assert isinstance(primary, ObjectValue)
        assert primary.keys() == ["main", "light"]

    def test_empty_path_is_root(self, theme: ObjectValue) -> None:
        assert resolve(theme, []) is theme

    def test_missing_segment(self, theme: ObjectValue) -> None:
        assert resolve(theme, ["palette", "tertiary"]) is None

    def test_through_scalar(self, theme: ObjectValue) -> None:
        assert resolve(theme, ["shape", "borderRadius", "px"]) is None

    def test_through_list(self, theme: ObjectValue) -> None:
        assert resolve(theme, ["shadows", "0"]) is None

    def test_through_unresolved(self) -> None:
        root = ObjectValue(entries={"spacing": UnresolvedValue(source="(n) => n * 8")})
        assert resolve(root, ["spacing"]) == UnresolvedValue(source="(n) => n * 8")
        assert resolve(root, ["spacing", "unit"]) is None

    def test_keys_are_case_sensitive(self, theme: ObjectValue) -> None:
        assert resolve(theme, ["Palette"]) is None


class TestSuggestChildren:
    """Completion candidates."""

    def test_declaration_order(self, theme: ObjectValue) -> None:
        names = [s.name for s in suggest_children(theme, [])]
        assert names == ["palette", "shape", "shadows"]

    def test_prefix(self, theme: ObjectValue) -> None:
        names = [s.name for s in suggest_children(theme, [], "sh")]
        assert names == ["shape", "shadows"]

    def test_prefix_is_case_sensitive(self, theme: ObjectValue) -> None:
        assert suggest_children(theme, [], "Sh") == []

    def test_previews(self, theme: ObjectValue) -> None:
        suggestions = {s.name: s for s in suggest_children(theme, ["palette"])}
        assert suggestions["primary"].preview == "{…}"
        assert suggestions["mode"].preview == '"light"'
        assert suggestions["mode"].value == StringValue(value="light")

    def test_non_object(self, theme: ObjectValue) -> None:
        assert suggest_children(theme, ["shape", "borderRadius"]) == []
        assert suggest_children(theme, ["missing"]) == []

    def test_spread_placeholders_skipped(self) -> None:
        root = ObjectValue(
            entries={
                "...base": UnresolvedValue(source="...base"),
                "radius": NumberValue(value=4),
            }
        )
        assert [s.name for s in suggest_children(root, [])] == ["radius"]
