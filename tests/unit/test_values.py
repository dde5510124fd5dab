"""Tests for the theme value model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from themelens.core.values import (
    BoolValue,
    ListValue,
    NullValue,
    NumberValue,
    ObjectValue,
    StringValue,
    UnresolvedValue,
    flatten,
    flatten_paths,
    from_plain,
    is_scalar,
    preview,
    to_plain,
)


class TestFromPlain:
    """from_plain converts JSON data to values."""

    def test_nested(self) -> None:
        value = from_plain({"colors": {"primary": "#000", "levels": [1, 2.5]}, "dark": True})
        assert isinstance(value, ObjectValue)
        colors = value.get("colors")
        assert isinstance(colors, ObjectValue)
        assert colors.get("primary") == StringValue(value="#000")
        assert colors.get("levels") == ListValue(
            items=[NumberValue(value=1), NumberValue(value=2.5)]
        )
        assert value.get("dark") == BoolValue(value=True)

    def test_null(self) -> None:
        assert from_plain(None) == NullValue()

    def test_bool_is_not_number(self) -> None:
        assert from_plain(False) == BoolValue(value=False)

    def test_unknown_type_is_unresolved(self) -> None:
        value = from_plain({1, 2})
        assert isinstance(value, UnresolvedValue)

    def test_keys_keep_order(self) -> None:
        value = from_plain({"z": 1, "a": 2, "m": 3})
        assert isinstance(value, ObjectValue)
        assert value.keys() == ["z", "a", "m"]


class TestToPlain:
    """to_plain turns values back into JSON data."""

    def test_unresolved_is_marked(self) -> None:
        value = ObjectValue(entries={"spacing": UnresolvedValue(source="(n) => n * 8")})
        assert to_plain(value) == {"spacing": {"$unresolved": "(n) => n * 8"}}

    def test_plain_data(self) -> None:
        data = {"a": [1, "x", None, False], "b": {"c": 2.5}}
        assert to_plain(from_plain(data)) == data


class TestModels:
    """Value models are immutable and tagged."""

    def test_frozen(self) -> None:
        value = StringValue(value="x")
        with pytest.raises(ValidationError):
            value.value = "y"  # type: ignore[misc]

    def test_scalars(self) -> None:
        assert is_scalar(NullValue())
        assert is_scalar(NumberValue(value=1))
        assert not is_scalar(UnresolvedValue(source="f()"))
        assert not is_scalar(ObjectValue())

    def test_integral_float_prints_as_int(self) -> None:
        assert str(NumberValue(value=4.0)) == "4"
        assert str(NumberValue(value=0.5)) == "0.5"

    def test_json_round_trip_through_pydantic(self) -> None:
        value = from_plain({"a": {"b": [1, "two"]}, "c": None})
        assert ObjectValue.model_validate_json(value.model_dump_json()) == value


class TestPreview:
    """preview renders short value text."""

    def test_string_is_quoted(self) -> None:
        assert preview(StringValue(value="#1976d2")) == '"#1976d2"'

    def test_long_string_is_truncated(self) -> None:
        text = preview(StringValue(value="x" * 80))
        assert text == '"' + "x" * 47 + '..."'

    def test_object(self) -> None:
        assert preview(from_plain({"a": 1})) == "{…}"
        assert preview(ObjectValue()) == "{}"

    def test_list(self) -> None:
        assert preview(from_plain([1, 2, 3])) == "[3 items]"

    def test_unresolved_shows_source(self) -> None:
        assert preview(UnresolvedValue(source="alpha(base, 0.5)")) == "alpha(base, 0.5)"

    def test_scalars(self) -> None:
        assert preview(NumberValue(value=-2)) == "-2"
        assert preview(BoolValue(value=True)) == "true"
        assert preview(NullValue()) == "null"


class TestFlatten:
    """flatten lists leaves as dotted keys."""

    def test_dotted_keys(self) -> None:
        value = from_plain({"palette": {"primary": {"main": "#000"}}, "radius": 4})
        flat = flatten(value)
        assert list(flat) == ["palette.primary.main", "radius"]
        assert flat["radius"] == NumberValue(value=4)

    def test_empty_object_is_leaf(self) -> None:
        value = from_plain({"mixins": {}, "a": 1})
        assert list(flatten(value)) == ["mixins", "a"]

    def test_lists_are_leaves(self) -> None:
        value = from_plain({"shadows": ["none", "0 1px"]})
        paths = flatten_paths(value)
        shadows = ListValue(items=[StringValue(value="none"), StringValue(value="0 1px")])
        assert paths == [(["shadows"], shadows)]

    def test_empty_root(self) -> None:
        assert flatten(ObjectValue()) == {}
