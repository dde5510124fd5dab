"""
Cursor-level queries used by editor hosts.

These compose the classifier, extractor and path resolver over a parsed file
and a ``ThemeDocument``. Offsets are byte offsets into ``SourceFile.data``;
hosts convert line/column positions with ``SourceFile.offset_at``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .classifier import CHAIN_KINDS, ThemeAccessContext, chain_head, chain_object, classify
from .colors import RGBA, is_color_string, parse_color
from .document import ThemeDocument
from .options import DEFAULT_OPTIONS, ThemeOptions
from .paths import PropertyPath, Suggestion, extract, resolve, suggest_children
from .syntax import NodeKind, SourceFile, SyntaxNode, parse_source, walk
from .values import PREVIEW_LIMIT, ObjectValue, StringValue, Value, flatten, is_scalar, preview

CARET_MARKER = "__themelens_caret__"

_NAME_KINDS = frozenset({NodeKind.IDENTIFIER, NodeKind.PROPERTY_IDENTIFIER})


@dataclass(frozen=True)
class HoverResult:
    path: PropertyPath
    value: Value
    context: ThemeAccessContext
    start: int
    end: int


@dataclass(frozen=True)
class CompletionResult:
    path: PropertyPath
    prefix: str
    context: ThemeAccessContext
    suggestions: list[Suggestion] = field(default_factory=list)


@dataclass(frozen=True)
class InlayHint:
    offset: int
    label: str
    path: PropertyPath


@dataclass(frozen=True)
class ColorReference:
    start: int
    end: int
    path: PropertyPath
    text: str
    color: RGBA


@dataclass(frozen=True)
class ThemeReference:
    """A complete theme access found in a file, with its resolved value."""

    node: SyntaxNode
    context: ThemeAccessContext
    path: PropertyPath
    value: Value


def _chain_at(node: SyntaxNode | None) -> SyntaxNode | None:
    if node is None:
        return None
    if node.kind in _NAME_KINDS:
        parent = node.parent
        if parent is None or parent.kind not in CHAIN_KINDS:
            return None
        prop = parent.field("property")
        return parent if prop is not None and prop == node else None
    if node.kind in CHAIN_KINDS:
        return node
    return None


def member_chain_at(source: SourceFile, offset: int) -> SyntaxNode | None:
    """
    Member-access expression ending at the name under the cursor.

    On ``theme.pal|ette.primary`` this is ``theme.palette``. The character
    just before the cursor is tried too, so a caret right after a name works.
    """
    for candidate in (offset, offset - 1):
        chain = _chain_at(source.node_at(candidate))
        if chain is not None:
            return chain
    return None


def hover_at(
    doc: ThemeDocument, source: SourceFile, offset: int, options: ThemeOptions = DEFAULT_OPTIONS
) -> HoverResult | None:
    """Resolved theme value for the access under the cursor, or None."""
    chain = member_chain_at(source, offset)
    if chain is None:
        return None
    context = classify(chain, options)
    path = extract(chain, context)
    if not path:
        return None
    value = resolve(doc.root, path)
    if value is None:
        return None
    return HoverResult(path=path, value=value, context=context, start=chain.start, end=chain.end)


def _caret_chain(source: SourceFile, offset: int) -> tuple[SyntaxNode, str] | None:
    """Member chain whose last name holds the caret, and the typed part of that name."""
    marker = CARET_MARKER.encode("utf-8")
    spliced = parse_source(
        source.data[:offset] + marker + source.data[offset:], source.path, source.dialect
    )
    name = spliced.node_at(offset + 1)
    if name is None or name.kind not in _NAME_KINDS or CARET_MARKER not in name.text:
        return None
    chain = _chain_at(name)
    if chain is None:
        return None
    return chain, name.text.split(CARET_MARKER, 1)[0]


def complete_at(
    doc: ThemeDocument, source: SourceFile, offset: int, options: ThemeOptions = DEFAULT_OPTIONS
) -> CompletionResult | None:
    """
    Child suggestions for a chain being typed at ``offset``.

    ``theme.palette.|`` and ``theme.palette.pri|`` both complete the children
    of ``palette``, the second filtered by ``pri``. A marker identifier is
    spliced in at the caret and the file is re-parsed, so a dangling dot is
    still a member access.
    """
    found = _caret_chain(source, offset)
    if found is None:
        return None
    chain, prefix = found

    context = classify(chain, options)
    segments = extract(chain, context)
    if not segments:
        return None

    path = segments[:-1]
    return CompletionResult(
        path=path,
        prefix=prefix,
        context=context,
        suggestions=suggest_children(doc.root, path, prefix),
    )


@dataclass(frozen=True)
class AliasCompletion:
    alias: str
    prefix: str
    keys: list[tuple[str, Value]]


def complete_alias_at(
    themes: dict[str, ObjectValue], source: SourceFile, offset: int
) -> AliasCompletion | None:
    """
    Dotted keys of a legacy JSON theme for ``Alias.|``.

    ``brand.|`` with a ``brand`` alias offers every flattened key of that
    theme (``colors.primary``, ``fonts.size``...), filtered by what is typed.
    """
    found = _caret_chain(source, offset)
    if found is None:
        return None
    chain, prefix = found
    qualifier = chain_object(chain)
    if qualifier is None or qualifier.kind != NodeKind.IDENTIFIER:
        return None
    theme = themes.get(qualifier.text)
    if theme is None:
        return None
    keys = [(key, value) for key, value in flatten(theme).items() if key.startswith(prefix)]
    return AliasCompletion(alias=qualifier.text, prefix=prefix, keys=keys)


def theme_references(
    doc: ThemeDocument, source: SourceFile, options: ThemeOptions = DEFAULT_OPTIONS
) -> list[ThemeReference]:
    """Every outermost theme access in ``source`` that resolves, in source order."""
    references: list[ThemeReference] = []
    for node in walk(source.root):
        if node.kind not in CHAIN_KINDS or chain_head(node) != node:
            continue
        context = classify(node, options)
        path = extract(node, context)
        if not path:
            continue
        value = resolve(doc.root, path)
        if value is not None:
            references.append(ThemeReference(node=node, context=context, path=path, value=value))
    return references


def inlay_label(value: Value) -> str:
    return ": " + preview(value, PREVIEW_LIMIT)


def inlay_hints(
    doc: ThemeDocument, source: SourceFile, options: ThemeOptions = DEFAULT_OPTIONS
) -> list[InlayHint]:
    """``: value`` hints after each complete theme access holding a scalar."""
    return [
        InlayHint(offset=ref.node.end, label=inlay_label(ref.value), path=ref.path)
        for ref in theme_references(doc, source, options)
        if is_scalar(ref.value)
    ]


def color_references(
    doc: ThemeDocument, source: SourceFile, options: ThemeOptions = DEFAULT_OPTIONS
) -> list[ColorReference]:
    """Theme accesses whose value is a CSS color string."""
    found: list[ColorReference] = []
    for ref in theme_references(doc, source, options):
        if not isinstance(ref.value, StringValue) or not is_color_string(ref.value.value):
            continue
        color = parse_color(ref.value.value)
        if color is not None:
            found.append(
                ColorReference(
                    start=ref.node.start,
                    end=ref.node.end,
                    path=ref.path,
                    text=ref.value.value,
                    color=color,
                )
            )
    return found
