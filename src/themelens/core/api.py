"""
Host-facing entry points.

    load_theme(source)             -> ThemeDocument | None
    classify(expr)                 -> ThemeAccessContext
    resolve_path(doc, path)        -> Value | None
    suggest_children(doc, path)    -> list[Suggestion]

Everything here is synchronous and free of I/O apart from the injected
``resolve_import`` capability.
"""

from __future__ import annotations

import logging
from pathlib import Path

from . import paths
from .classifier import ThemeAccessContext
from .classifier import classify as classify_expression
from .converter import convert_object
from .document import ThemeDocument, compute_fingerprint
from .errors import ThemeInvariantError
from .options import DEFAULT_OPTIONS, ThemeOptions
from .paths import PropertyPath, Suggestion
from .resolver import ImportResolver, locate_theme
from .syntax import NodeKind, SourceFile, SyntaxNode, parse_source
from .values import Value

logger = logging.getLogger(__name__)


def load_theme(
    source: SourceFile,
    resolve_import: ImportResolver | None = None,
    options: ThemeOptions = DEFAULT_OPTIONS,
) -> ThemeDocument | None:
    """
    Locate and convert the theme defined by ``source``.

    Returns None when the file holds no theme. Raises ThemeInvariantError
    only when the located node is not an object literal.
    """
    location = locate_theme(source, resolve_import, options)
    if location is None:
        return None
    if location.node.kind != NodeKind.OBJECT:
        raise ThemeInvariantError(
            f"Theme locator returned {location.node.type_name}, expected an object literal"
        )

    root = convert_object(location.node)
    fingerprint = compute_fingerprint(*(visited.data for visited in location.visited))
    imported = tuple(
        visited.path
        for visited in location.visited
        if visited.path is not None and visited is not location.source
    )
    logger.debug(
        "Theme located in %s by rule %d (%d top-level keys)",
        location.source,
        location.rule,
        len(root.entries),
    )
    return ThemeDocument.create(
        root,
        fingerprint=fingerprint,
        source_path=location.source.path,
        imported_paths=imported,
    )


def load_theme_text(
    text: str | bytes,
    path: Path | str | None = None,
    resolve_import: ImportResolver | None = None,
    options: ThemeOptions = DEFAULT_OPTIONS,
) -> ThemeDocument | None:
    """Parse ``text`` and load the theme it defines."""
    return load_theme(parse_source(text, path), resolve_import, options)


def classify(expr: SyntaxNode, options: ThemeOptions = DEFAULT_OPTIONS) -> ThemeAccessContext:
    """Classify a member-access node; its enclosing tree is reachable from the node."""
    return classify_expression(expr, options)


def resolve_path(doc: ThemeDocument, path: PropertyPath) -> Value | None:
    return paths.resolve(doc.root, path)


def suggest_children(
    doc: ThemeDocument, path: PropertyPath, partial: bool = False
) -> list[Suggestion]:
    """
    Completion candidates under ``path``.

    With ``partial`` the last segment is a name still being typed: candidates
    are the children of the path without it, filtered by it as a prefix.
    """
    if partial and path:
        return paths.suggest_children(doc.root, path[:-1], path[-1])
    return paths.suggest_children(doc.root, path)
