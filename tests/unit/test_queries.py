"""Tests for cursor-level editor queries."""

from __future__ import annotations

from themelens.core.classifier import BindingStyle, StructuralContext
from themelens.core.colors import RGBA
from themelens.core.document import ThemeDocument
from themelens.core.options import ThemeOptions
from themelens.core.queries import (
    color_references,
    complete_alias_at,
    complete_at,
    hover_at,
    inlay_hints,
    inlay_label,
    member_chain_at,
    theme_references,
)
from themelens.core.syntax import SourceFile, parse_source
from themelens.core.values import NumberValue, ObjectValue, StringValue, from_plain


def _caret(text: str) -> tuple[SourceFile, int]:
    """Parse ``text`` with ``|`` marking the cursor; returns the source and offset."""
    offset = text.index("|")
    return parse_source(text.replace("|", "", 1)), offset


class TestMemberChainAt:
    """Finding the chain under the cursor."""

    def test_inside_name(self) -> None:
        source, offset = _caret("x = theme.pal|ette.primary;")
        chain = member_chain_at(source, offset)
        assert chain is not None and chain.text == "theme.palette"

    def test_after_name(self) -> None:
        source, offset = _caret("x = theme.palette.primary|;")
        chain = member_chain_at(source, offset)
        assert chain is not None and chain.text == "theme.palette.primary"

    def test_on_root_identifier(self) -> None:
        source, offset = _caret("x = th|eme.palette;")
        assert member_chain_at(source, offset) is None

    def test_outside_any_chain(self) -> None:
        source, offset = _caret("const x = 1|;")
        assert member_chain_at(source, offset) is None


class TestHover:
    """hover_at resolves the access under the cursor."""

    def test_leaf(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.palette.primary.ma|in;")
        result = hover_at(mui_document, source, offset)
        assert result is not None
        assert result.path == ["palette", "primary", "main"]
        assert result.value == StringValue(value="#1976d2")
        assert source.data[result.start : result.end] == b"theme.palette.primary.main"

    def test_intermediate_segment(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.pal|ette.primary.main;")
        result = hover_at(mui_document, source, offset)
        assert result is not None
        assert result.path == ["palette"]
        assert isinstance(result.value, ObjectValue)

    def test_styled_destructured_prop(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret(
            "const Box = styled.div`\n"
            "  border-radius: ${(props) => props.theme.shape.border|Radius}px;\n"
            "`;"
        )
        result = hover_at(mui_document, source, offset)
        assert result is not None
        assert result.value == NumberValue(value=4)
        assert result.context.binding_style == BindingStyle.DESTRUCTURED_PROP
        assert result.context.structural_context == StructuralContext.STYLED_TAG

    def test_missing_path(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.palette.tertiary.ma|in;")
        assert hover_at(mui_document, source, offset) is None

    def test_not_theme(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = colors.palette.primary.ma|in;")
        assert hover_at(mui_document, source, offset) is None

    def test_plain_context_can_be_excluded(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.palette.mo|de;")
        assert hover_at(mui_document, source, offset) is not None
        strict = ThemeOptions(require_styled_context=True)
        assert hover_at(mui_document, source, offset, strict) is None


class TestCompletion:
    """complete_at suggests children of the chain being typed."""

    def test_after_dot(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.palette.|")
        result = complete_at(mui_document, source, offset)
        assert result is not None
        assert result.path == ["palette"]
        assert result.prefix == ""
        assert [s.name for s in result.suggestions] == ["primary", "secondary", "mode"]

    def test_partial_name(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.palette.pri|")
        result = complete_at(mui_document, source, offset)
        assert result is not None
        assert result.prefix == "pri"
        assert [s.name for s in result.suggestions] == ["primary"]

    def test_theme_root(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.|;")
        result = complete_at(mui_document, source, offset)
        assert result is not None
        assert result.path == []
        assert result.suggestions[0].name == "palette"

    def test_inside_styled_template(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret(
            "const Box = styled.div`\n  color: ${({ theme }) => theme.palette.|}\n`;"
        )
        result = complete_at(mui_document, source, offset)
        assert result is not None
        assert result.context.structural_context == StructuralContext.STYLED_TAG
        assert "primary" in [s.name for s in result.suggestions]

    def test_props_theme(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const f = (props) => props.theme.shape.|")
        result = complete_at(mui_document, source, offset)
        assert result is not None
        assert [s.name for s in result.suggestions] == ["borderRadius"]

    def test_props_alone_is_not_theme(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const f = (props) => props.|")
        assert complete_at(mui_document, source, offset) is None

    def test_leaf_has_no_suggestions(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = theme.palette.mode.|")
        result = complete_at(mui_document, source, offset)
        assert result is not None
        assert result.suggestions == []

    def test_not_a_member(self, mui_document: ThemeDocument) -> None:
        source, offset = _caret("const c = foo|;")
        assert complete_at(mui_document, source, offset) is None


class TestAliasCompletion:
    """Legacy JSON themes completed through an alias identifier."""

    def test_keys(self) -> None:
        brand = from_plain({"colors": {"primary": "#000"}, "radius": 2})
        assert isinstance(brand, ObjectValue)
        source, offset = _caret("const c = brand.|")
        result = complete_alias_at({"brand": brand}, source, offset)
        assert result is not None
        assert result.alias == "brand"
        assert [key for key, _ in result.keys] == ["colors.primary", "radius"]

    def test_prefix(self) -> None:
        brand = from_plain({"colors": {"primary": "#000"}, "radius": 2})
        assert isinstance(brand, ObjectValue)
        source, offset = _caret("const c = brand.ra|")
        result = complete_alias_at({"brand": brand}, source, offset)
        assert result is not None
        assert [key for key, _ in result.keys] == ["radius"]

    def test_unknown_alias(self) -> None:
        source, offset = _caret("const c = other.|")
        assert complete_alias_at({"brand": ObjectValue()}, source, offset) is None


class TestReferences:
    """Whole-file scans for inlay hints and colors."""

    SOURCE = (
        "const a = theme.palette.primary.main;\n"
        "const b = theme.palette;\n"
        "const c = theme.spacing(2);\n"
        "const d = theme.typography.h1.fontSize;\n"
        "const e = theme.palette.secondary.main;\n"
        "const f = theme.missing.key;\n"
    )

    def test_references_are_outermost(self, mui_document: ThemeDocument) -> None:
        refs = theme_references(mui_document, parse_source(self.SOURCE))
        assert [ref.path for ref in refs] == [
            ["palette", "primary", "main"],
            ["palette"],
            ["spacing"],
            ["typography", "h1", "fontSize"],
            ["palette", "secondary", "main"],
        ]

    def test_inlay_hints_only_for_scalars(self, mui_document: ThemeDocument) -> None:
        source = parse_source(self.SOURCE)
        hints = inlay_hints(mui_document, source)
        assert [hint.label for hint in hints] == [': "#1976d2"', ": 96", ': "rgb(220, 0, 78)"']
        first_line_end = source.data.index(b";")
        assert hints[0].offset == first_line_end

    def test_inlay_label(self) -> None:
        assert inlay_label(NumberValue(value=300)) == ": 300"

    def test_color_references(self, mui_document: ThemeDocument) -> None:
        colors = color_references(mui_document, parse_source(self.SOURCE))
        assert [(ref.text, ref.color) for ref in colors] == [
            ("#1976d2", RGBA(25, 118, 210, 1.0)),
            ("rgb(220, 0, 78)", RGBA(220, 0, 78, 1.0)),
        ]

    def test_color_references_skip_unparseable_colors(self) -> None:
        root = from_plain(
            {"palette": {"hot": "rgb(1e400, 0, 0)", "font": "Roboto", "ok": "#000"}}
        )
        doc = ThemeDocument.create(root, fingerprint="x")
        source = parse_source(
            "const a = theme.palette.hot;\n"
            "const b = theme.palette.font;\n"
            "const c = theme.palette.ok;\n"
        )
        colors = color_references(doc, source)
        assert [ref.path for ref in colors] == [["palette", "ok"]]
