"""
Value model for statically extracted themes.

A theme is a plain nested structure of maps, lists and scalars. Anything the
converter cannot know without running code is kept as ``UnresolvedValue``
carrying the original source text, so hosts can still show something.

"Not found" is expressed as ``None`` throughout themelens and is never one of
these models; ``NullValue`` is the JavaScript ``null`` literal.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

PREVIEW_LIMIT = 50

# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class NullValue(BaseModel):
    """The ``null`` (or ``undefined``) literal."""

    kind: Literal["null"] = "null"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "null"


class BoolValue(BaseModel):
    """A ``true``/``false`` literal."""

    kind: Literal["bool"] = "bool"
    value: bool

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class NumberValue(BaseModel):
    """A numeric literal, with unary minus already folded in."""

    kind: Literal["number"] = "number"
    value: int | float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)


class StringValue(BaseModel):
    """A string literal or a template literal without interpolation."""

    kind: Literal["string"] = "string"
    value: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f'"{self.value}"'


class UnresolvedValue(BaseModel):
    """
    Something that cannot be evaluated statically.

    Examples: ``(n) => n * 8``, ``alpha(base, 0.5)``, ``colors.blue``,
    ``...baseTheme``. ``source`` is for display only and is never re-parsed.
    """

    kind: Literal["unresolved"] = "unresolved"
    source: str = Field(description="Original source text of the subexpression")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.source


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class ObjectValue(BaseModel):
    """
    An object literal.

    ``entries`` keeps source declaration order. Keys are unique; a later
    duplicate key replaces the earlier value, as object literal evaluation does.
    """

    kind: Literal["object"] = "object"
    entries: dict[str, Value] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "{" + ", ".join(self.entries) + "}"

    def get(self, name: str) -> Value | None:
        return self.entries.get(name)

    def keys(self) -> list[str]:
        return list(self.entries)


class ListValue(BaseModel):
    """An array literal."""

    kind: Literal["list"] = "list"
    items: list[Value] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{len(self.items)} items]"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Value = Annotated[
    NullValue | BoolValue | NumberValue | StringValue | ObjectValue | ListValue | UnresolvedValue,
    Field(discriminator="kind"),
]

SCALAR_TYPES = (NullValue, BoolValue, NumberValue, StringValue)

# Rebuild models for recursive forward references
ObjectValue.model_rebuild()
ListValue.model_rebuild()


def is_scalar(value: Value) -> bool:
    """True for null, boolean, number and string values."""
    return isinstance(value, SCALAR_TYPES)


def type_name(value: Value) -> str:
    """Short type label used by completion and hover text."""
    return value.kind


# ---------------------------------------------------------------------------
# Plain data conversion
# ---------------------------------------------------------------------------


def from_plain(data: Any) -> Value:
    """
    Build a Value from JSON-like Python data.

    Used for legacy JSON theme files. Anything that is not JSON data becomes
    ``UnresolvedValue`` of its ``repr``.
    """
    if data is None:
        return NullValue()
    if isinstance(data, bool):
        return BoolValue(value=data)
    if isinstance(data, int | float):
        return NumberValue(value=data)
    if isinstance(data, str):
        return StringValue(value=data)
    if isinstance(data, dict):
        return ObjectValue(entries={str(k): from_plain(v) for k, v in data.items()})
    if isinstance(data, list | tuple):
        return ListValue(items=[from_plain(item) for item in data])
    return UnresolvedValue(source=repr(data))


def to_plain(value: Value) -> Any:
    """
    Convert a Value to JSON-like Python data.

    Unresolved values become ``{"$unresolved": source}`` so they stay
    distinguishable from real strings.
    """
    if isinstance(value, NullValue):
        return None
    if isinstance(value, BoolValue | NumberValue | StringValue):
        return value.value
    if isinstance(value, ObjectValue):
        return {key: to_plain(child) for key, child in value.entries.items()}
    if isinstance(value, ListValue):
        return [to_plain(item) for item in value.items]
    return {"$unresolved": value.source}


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def preview(value: Value, limit: int = PREVIEW_LIMIT) -> str:
    """Render a value for a completion tail, hover line or inlay hint."""
    if isinstance(value, ObjectValue):
        text = "{…}" if value.entries else "{}"
    elif isinstance(value, ListValue):
        text = f"[{len(value.items)} items]"
    elif isinstance(value, StringValue):
        text = value.value
        if len(text) > limit:
            text = text[: limit - 3] + "..."
        return f'"{text}"'
    else:
        text = str(value)

    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return text


def flatten_paths(value: Value, prefix: tuple[str, ...] = ()) -> list[tuple[list[str], Value]]:
    """
    List every leaf under ``value`` with its property path.

    Leaves are all non-object values plus empty objects. Declaration order is
    kept, depth first.
    """
    if not isinstance(value, ObjectValue) or (not value.entries and prefix):
        return [(list(prefix), value)]

    leaves: list[tuple[list[str], Value]] = []
    for key, child in value.entries.items():
        leaves.extend(flatten_paths(child, prefix + (key,)))
    return leaves


def flatten(value: Value) -> dict[str, Value]:
    """Dotted-key view of a value, e.g. ``{"palette.primary.main": ...}``."""
    return {".".join(path): leaf for path, leaf in flatten_paths(value) if path}
