"""
Property paths: extraction from member chains and resolution against values.

A property path is a plain ``list[str]`` from the theme root to a value, e.g.
``["palette", "primary", "main"]``. It is produced and consumed immediately
and never stored.
"""

from __future__ import annotations

from typing import NamedTuple

from .classifier import CHAIN_KINDS, ThemeAccessContext, chain_object
from .converter import SPREAD_KEY_PREFIX, string_value
from .syntax import NodeKind, SyntaxNode
from .values import ObjectValue, Value, preview

PropertyPath = list[str]


def chain_segments(node: SyntaxNode) -> PropertyPath | None:
    """
    All names of a member chain, root identifier included.

    ``theme.palette['primary']`` gives ``["theme", "palette", "primary"]``.
    Returns None when a segment has no literal name (``theme[key]``,
    ``theme[0]``) or the chain does not start at an identifier.
    """
    segments: list[str] = []
    current = node.unwrap()
    while current.kind in CHAIN_KINDS:
        if current.kind == NodeKind.MEMBER_EXPRESSION:
            prop = current.field("property")
            if prop is None or prop.kind != NodeKind.PROPERTY_IDENTIFIER:
                return None
            segments.append(prop.text)
        else:
            index = current.field("index")
            name = string_value(index.unwrap()) if index is not None else None
            if name is None:
                return None
            segments.append(name)
        obj = chain_object(current)
        if obj is None:
            return None
        current = obj

    if current.kind != NodeKind.IDENTIFIER:
        return None
    segments.append(current.text)
    segments.reverse()
    return segments


def extract(node: SyntaxNode, context: ThemeAccessContext) -> PropertyPath:
    """
    Path of a member chain relative to the theme root.

    Drops ``theme`` (direct) or ``props.theme`` (destructured prop). An empty
    result means "not resolvable", never "the theme root".
    """
    if not context.is_theme_access:
        return []
    segments = chain_segments(node)
    if segments is None or len(segments) <= context.root_segments:
        return []
    return segments[context.root_segments :]


def resolve(root: Value, path: PropertyPath) -> Value | None:
    """
    Walk ``path`` from ``root``.

    Every intermediate value must be an object holding the next segment;
    otherwise None. The terminal value is returned as is, unresolved values
    and whole containers included. An empty path yields ``root``.
    """
    current = root
    for segment in path:
        if not isinstance(current, ObjectValue):
            return None
        found = current.get(segment)
        if found is None:
            return None
        current = found
    return current


class Suggestion(NamedTuple):
    """A completion candidate: child name, short preview and the value itself."""

    name: str
    preview: str
    value: Value


def suggest_children(root: Value, path: PropertyPath, prefix: str = "") -> list[Suggestion]:
    """
    Children of the object at ``path`` whose names start with ``prefix``.

    Declaration order is kept. Spread placeholders are skipped. Anything that
    is not an object yields no suggestions.
    """
    parent = resolve(root, path)
    if not isinstance(parent, ObjectValue):
        return []
    return [
        Suggestion(name, preview(child), child)
        for name, child in parent.entries.items()
        if name.startswith(prefix) and not name.startswith(SPREAD_KEY_PREFIX)
    ]
