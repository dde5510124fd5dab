"""
Read-only syntax view over JavaScript/TypeScript sources.

Parsing is delegated to tree-sitter (TSX grammar by default). Everything else
in themelens works with ``SyntaxNode`` and its closed ``NodeKind`` tag, never
with raw tree-sitter node type strings.
"""

from __future__ import annotations

import logging
from enum import StrEnum, auto
from functools import cache
from pathlib import Path

import tree_sitter
import tree_sitter_typescript

logger = logging.getLogger(__name__)


class NodeKind(StrEnum):
    """Node kinds the theme engine distinguishes."""

    PROGRAM = auto()

    # Modules
    IMPORT_STATEMENT = auto()
    IMPORT_CLAUSE = auto()
    NAMED_IMPORTS = auto()
    IMPORT_SPECIFIER = auto()
    NAMESPACE_IMPORT = auto()
    EXPORT_STATEMENT = auto()
    EXPORT_CLAUSE = auto()
    EXPORT_SPECIFIER = auto()

    # Declarations
    LEXICAL_DECLARATION = auto()
    VARIABLE_DECLARATION = auto()
    VARIABLE_DECLARATOR = auto()
    EXPRESSION_STATEMENT = auto()

    # Literals
    OBJECT = auto()
    PAIR = auto()
    SHORTHAND_PROPERTY = auto()
    SPREAD = auto()
    METHOD = auto()
    COMPUTED_PROPERTY_NAME = auto()
    ARRAY = auto()
    STRING = auto()
    TEMPLATE_STRING = auto()
    TEMPLATE_SUBSTITUTION = auto()
    NUMBER = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    UNDEFINED = auto()

    # Expressions
    IDENTIFIER = auto()
    PROPERTY_IDENTIFIER = auto()
    MEMBER_EXPRESSION = auto()
    SUBSCRIPT_EXPRESSION = auto()
    CALL_EXPRESSION = auto()
    ARGUMENTS = auto()
    ARROW_FUNCTION = auto()
    FUNCTION_EXPRESSION = auto()
    PARENTHESIZED_EXPRESSION = auto()
    UNARY_EXPRESSION = auto()

    # TypeScript wrappers around an expression
    AS_EXPRESSION = auto()
    SATISFIES_EXPRESSION = auto()
    NON_NULL_EXPRESSION = auto()
    TYPE_ASSERTION = auto()

    # JSX
    JSX_ELEMENT = auto()
    JSX_SELF_CLOSING_ELEMENT = auto()
    JSX_OPENING_ELEMENT = auto()
    JSX_ATTRIBUTE = auto()
    JSX_EXPRESSION = auto()

    ERROR = auto()
    OTHER = auto()


_TS_KINDS: dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "import_statement": NodeKind.IMPORT_STATEMENT,
    "import_clause": NodeKind.IMPORT_CLAUSE,
    "named_imports": NodeKind.NAMED_IMPORTS,
    "import_specifier": NodeKind.IMPORT_SPECIFIER,
    "namespace_import": NodeKind.NAMESPACE_IMPORT,
    "export_statement": NodeKind.EXPORT_STATEMENT,
    "export_clause": NodeKind.EXPORT_CLAUSE,
    "export_specifier": NodeKind.EXPORT_SPECIFIER,
    "lexical_declaration": NodeKind.LEXICAL_DECLARATION,
    "variable_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "expression_statement": NodeKind.EXPRESSION_STATEMENT,
    "object": NodeKind.OBJECT,
    "pair": NodeKind.PAIR,
    "shorthand_property_identifier": NodeKind.SHORTHAND_PROPERTY,
    "spread_element": NodeKind.SPREAD,
    "method_definition": NodeKind.METHOD,
    "computed_property_name": NodeKind.COMPUTED_PROPERTY_NAME,
    "array": NodeKind.ARRAY,
    "string": NodeKind.STRING,
    "template_string": NodeKind.TEMPLATE_STRING,
    "template_substitution": NodeKind.TEMPLATE_SUBSTITUTION,
    "number": NodeKind.NUMBER,
    "true": NodeKind.TRUE,
    "false": NodeKind.FALSE,
    "null": NodeKind.NULL,
    "undefined": NodeKind.UNDEFINED,
    "identifier": NodeKind.IDENTIFIER,
    "property_identifier": NodeKind.PROPERTY_IDENTIFIER,
    "member_expression": NodeKind.MEMBER_EXPRESSION,
    "subscript_expression": NodeKind.SUBSCRIPT_EXPRESSION,
    "call_expression": NodeKind.CALL_EXPRESSION,
    "arguments": NodeKind.ARGUMENTS,
    "arrow_function": NodeKind.ARROW_FUNCTION,
    "function_expression": NodeKind.FUNCTION_EXPRESSION,
    "function": NodeKind.FUNCTION_EXPRESSION,
    "parenthesized_expression": NodeKind.PARENTHESIZED_EXPRESSION,
    "unary_expression": NodeKind.UNARY_EXPRESSION,
    "as_expression": NodeKind.AS_EXPRESSION,
    "satisfies_expression": NodeKind.SATISFIES_EXPRESSION,
    "non_null_expression": NodeKind.NON_NULL_EXPRESSION,
    "type_assertion": NodeKind.TYPE_ASSERTION,
    "jsx_element": NodeKind.JSX_ELEMENT,
    "jsx_self_closing_element": NodeKind.JSX_SELF_CLOSING_ELEMENT,
    "jsx_opening_element": NodeKind.JSX_OPENING_ELEMENT,
    "jsx_attribute": NodeKind.JSX_ATTRIBUTE,
    "jsx_expression": NodeKind.JSX_EXPRESSION,
    "ERROR": NodeKind.ERROR,
}

# Wrappers that do not change the value of the expression they hold
TRANSPARENT_KINDS = frozenset(
    {
        NodeKind.PARENTHESIZED_EXPRESSION,
        NodeKind.AS_EXPRESSION,
        NodeKind.SATISFIES_EXPRESSION,
        NodeKind.NON_NULL_EXPRESSION,
        NodeKind.TYPE_ASSERTION,
    }
)


class Dialect(StrEnum):
    """Grammar used to parse a file."""

    TSX = "tsx"
    TYPESCRIPT = "typescript"


SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts")


def dialect_for(path: Path | None) -> Dialect:
    """TypeScript grammar for ``.ts``-family files, TSX for everything else."""
    if path is not None and path.suffix in (".ts", ".mts", ".cts"):
        return Dialect.TYPESCRIPT
    return Dialect.TSX


@cache
def _parser(dialect: Dialect) -> tree_sitter.Parser:
    if dialect == Dialect.TYPESCRIPT:
        language = tree_sitter.Language(tree_sitter_typescript.language_typescript())
    else:
        language = tree_sitter.Language(tree_sitter_typescript.language_tsx())
    return tree_sitter.Parser(language)


class SyntaxNode:
    """A node of a parsed ``SourceFile``."""

    __slots__ = ("_node", "source", "kind")

    def __init__(self, node: tree_sitter.Node, source: SourceFile) -> None:
        self._node = node
        self.source = source
        self.kind = _TS_KINDS.get(node.type, NodeKind.OTHER)

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind}, {self.text[:40]!r}, {self.start}..{self.end})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return (
            self.source is other.source
            and self.start == other.start
            and self.end == other.end
            and self._node.type == other._node.type
        )

    def __hash__(self) -> int:
        return hash((id(self.source), self.start, self.end, self._node.type))

    @property
    def type_name(self) -> str:
        """The parser's own node type, for debugging output only."""
        return self._node.type

    @property
    def start(self) -> int:
        return self._node.start_byte

    @property
    def end(self) -> int:
        return self._node.end_byte

    @property
    def text(self) -> str:
        return self.source.slice(self.start, self.end)

    @property
    def is_named(self) -> bool:
        return self._node.is_named

    @property
    def is_missing(self) -> bool:
        return self._node.is_missing

    @property
    def parent(self) -> SyntaxNode | None:
        parent = self._node.parent
        return SyntaxNode(parent, self.source) if parent is not None else None

    @property
    def children(self) -> list[SyntaxNode]:
        return [SyntaxNode(child, self.source) for child in self._node.children]

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [SyntaxNode(child, self.source) for child in self._node.named_children]

    def field(self, name: str) -> SyntaxNode | None:
        """Child stored under a grammar field (``value``, ``object``, ``property``...)."""
        child = self._node.child_by_field_name(name)
        return SyntaxNode(child, self.source) if child is not None else None

    def fields(self, name: str) -> list[SyntaxNode]:
        return [SyntaxNode(child, self.source) for child in self._node.children_by_field_name(name)]

    def first_child(self, *kinds: NodeKind) -> SyntaxNode | None:
        for child in self.named_children:
            if child.kind in kinds:
                return child
        return None

    def has_token(self, token: str) -> bool:
        """True when an anonymous child token (``default``, ``*``...) is present."""
        return any(not child.is_named and child.type_name == token for child in self.children)

    def ancestors(self) -> list[SyntaxNode]:
        """Parents from the nearest up to the program node."""
        chain: list[SyntaxNode] = []
        parent = self.parent
        while parent is not None:
            chain.append(parent)
            parent = parent.parent
        return chain

    def contains(self, other: SyntaxNode) -> bool:
        return self.start <= other.start and other.end <= self.end

    def unwrap(self) -> SyntaxNode:
        """Strip parentheses and TypeScript casts around an expression."""
        node = self
        while node.kind in TRANSPARENT_KINDS:
            inner = [child for child in node.named_children if child.type_name != "comment"]
            if not inner:
                break
            # <T>x keeps its type arguments first
            node = inner[-1] if node.kind == NodeKind.TYPE_ASSERTION else inner[0]
        return node


class SourceFile:
    """A parsed source file: path, bytes and syntax tree."""

    def __init__(self, text: str | bytes, path: Path | None = None, dialect: Dialect | None = None):
        self.path = path
        self.data = text.encode("utf-8") if isinstance(text, str) else text
        self.dialect = dialect or dialect_for(path)
        self.tree = _parser(self.dialect).parse(self.data)

    def __repr__(self) -> str:
        return f"SourceFile({self.path or '<memory>'}, {self.dialect})"

    @property
    def root(self) -> SyntaxNode:
        return SyntaxNode(self.tree.root_node, self)

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    @property
    def has_errors(self) -> bool:
        return self.tree.root_node.has_error

    def slice(self, start: int, end: int) -> str:
        return self.data[start:end].decode("utf-8", errors="replace")

    def node_at(self, offset: int) -> SyntaxNode | None:
        """Smallest named node covering the byte ``offset``."""
        if offset < 0 or offset > len(self.data):
            return None
        node = self.tree.root_node.named_descendant_for_byte_range(offset, offset)
        return SyntaxNode(node, self) if node is not None else None

    def offset_at(self, line: int, column: int) -> int:
        """Byte offset of a 0-based line/column (column counted in characters)."""
        lines = self.data.split(b"\n")
        if line >= len(lines):
            return len(self.data)
        offset = sum(len(chunk) + 1 for chunk in lines[:line])
        prefix = lines[line].decode("utf-8", errors="replace")[:column]
        return offset + len(prefix.encode("utf-8"))

    def position_at(self, offset: int) -> tuple[int, int]:
        """0-based line/column (in characters) of a byte offset."""
        offset = max(0, min(offset, len(self.data)))
        line = self.data.count(b"\n", 0, offset)
        line_start = self.data.rfind(b"\n", 0, offset) + 1
        column = len(self.data[line_start:offset].decode("utf-8", errors="replace"))
        return line, column


def parse_source(
    text: str | bytes, path: Path | str | None = None, dialect: Dialect | None = None
) -> SourceFile:
    """Parse JavaScript/TypeScript source into a ``SourceFile``."""
    source_path = Path(path) if path is not None else None
    source = SourceFile(text, source_path, dialect)
    if source.has_errors:
        logger.debug("Parsed %s with syntax errors", source_path or "<memory>")
    return source


def walk(node: SyntaxNode) -> list[SyntaxNode]:
    """All named descendants of ``node`` (inclusive), in source order."""
    found: list[SyntaxNode] = []
    stack = [node]
    while stack:
        current = stack.pop()
        found.append(current)
        stack.extend(reversed(current.named_children))
    return found
