"""
Theme engine core.

Static extraction of a theme object from JavaScript/TypeScript sources and
resolution of ``theme.a.b.c`` property paths against it. Nothing in here
executes user code or touches the file system.
"""

from .api import classify, load_theme, load_theme_text, resolve_path, suggest_children
from .classifier import BindingStyle, StructuralContext, ThemeAccessContext
from .document import ThemeDocument, compute_fingerprint
from .errors import ManifestError, SourceError, ThemeInvariantError, ThemeLensError
from .options import DEFAULT_OPTIONS, ThemeOptions
from .paths import PropertyPath, Suggestion, extract
from .syntax import NodeKind, SourceFile, SyntaxNode, parse_source
from .values import (
    BoolValue,
    ListValue,
    NullValue,
    NumberValue,
    ObjectValue,
    StringValue,
    UnresolvedValue,
    Value,
)

__all__ = [
    # Entry points
    "load_theme",
    "load_theme_text",
    "classify",
    "extract",
    "resolve_path",
    "suggest_children",
    # Types
    "ThemeDocument",
    "ThemeOptions",
    "DEFAULT_OPTIONS",
    "ThemeAccessContext",
    "BindingStyle",
    "StructuralContext",
    "PropertyPath",
    "Suggestion",
    "compute_fingerprint",
    # Syntax
    "NodeKind",
    "SourceFile",
    "SyntaxNode",
    "parse_source",
    # Values
    "Value",
    "NullValue",
    "BoolValue",
    "NumberValue",
    "StringValue",
    "ObjectValue",
    "ListValue",
    "UnresolvedValue",
    # Errors
    "ThemeLensError",
    "ThemeInvariantError",
    "ManifestError",
    "SourceError",
]
