"""
Theme discovery from ``<ThemeProvider theme={...}>`` usage.

Given parsed project files, find a provider element and follow its ``theme``
attribute to the file that defines the theme.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .options import DEFAULT_OPTIONS, ThemeOptions
from .resolver import (
    ImportResolver,
    ModuleScope,
    import_reference,
    module_scope,
    theme_literal,
)
from .syntax import NodeKind, SourceFile, SyntaxNode, walk

logger = logging.getLogger(__name__)

_PROVIDER_KINDS = frozenset({NodeKind.JSX_OPENING_ELEMENT, NodeKind.JSX_SELF_CLOSING_ELEMENT})


@dataclass(frozen=True)
class DiscoveredTheme:
    """
    Attributes:
        path: File that defines the theme
        provider_file: File containing the ``ThemeProvider`` element
    """

    path: Path
    provider_file: Path


def _element_name(element: SyntaxNode) -> str:
    name = element.field("name")
    text = name.text if name is not None else ""
    return text.rsplit(".", 1)[-1]


def theme_attribute(element: SyntaxNode) -> SyntaxNode | None:
    """Expression inside ``theme={...}`` of a JSX element, if present."""
    for attribute in element.named_children:
        if attribute.kind != NodeKind.JSX_ATTRIBUTE:
            continue
        parts = attribute.named_children
        if len(parts) < 2 or parts[0].text != "theme":
            continue
        value = parts[-1]
        if value.kind != NodeKind.JSX_EXPRESSION:
            return None
        inner = [child for child in value.named_children if child.type_name != "comment"]
        return inner[0] if inner else None
    return None


def provider_theme_expressions(
    source: SourceFile, options: ThemeOptions = DEFAULT_OPTIONS
) -> list[SyntaxNode]:
    """``theme`` expressions of every provider element in ``source``."""
    found: list[SyntaxNode] = []
    for node in walk(source.root):
        if node.kind in _PROVIDER_KINDS and _element_name(node) in options.provider_names:
            expr = theme_attribute(node)
            if expr is not None:
                found.append(expr)
    return found


def _definition_file(
    expr: SyntaxNode,
    source: SourceFile,
    scope: ModuleScope,
    resolve_import: ImportResolver | None,
    options: ThemeOptions,
) -> Path | None:
    if theme_literal(expr, scope, options) is not None:
        return source.path

    binding = import_reference(expr, scope, options)
    if binding is None or resolve_import is None:
        return None
    target = resolve_import(source, binding.specifier)
    if target is None:
        logger.debug("Provider theme import %r not resolvable from %s", binding.specifier, source)
        return None
    return target.path


def discover_theme(
    files: Iterable[SourceFile],
    resolve_import: ImportResolver | None = None,
    options: ThemeOptions = DEFAULT_OPTIONS,
) -> DiscoveredTheme | None:
    """First provider whose theme can be traced to a file, in ``files`` order."""
    for source in files:
        if source.path is None:
            continue
        expressions = provider_theme_expressions(source, options)
        if not expressions:
            continue
        scope = module_scope(source.root)
        for expr in expressions:
            path = _definition_file(expr, source, scope, resolve_import, options)
            if path is not None:
                logger.debug("Theme provider in %s uses theme from %s", source.path, path)
                return DiscoveredTheme(path=path, provider_file=source.path)
    return None
