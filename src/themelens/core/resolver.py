"""
Theme object resolver.

Finds the object literal that constitutes "the theme" among the top-level
statements of a file. Rules, first match wins:

1. A variable (exported or not) named ``theme``, or one exported as ``theme``,
   initialized with an object literal.
2. A variable or default export initialized with a call to a theme constructor
   (``createTheme``/``extendTheme``) whose first argument is an object literal.
3. A default export (``export default`` or ``export { x as default }``) that is
   an object literal.
4. A reference bound to an import or re-export: the imported file is searched
   with the same rules, bounded by ``ThemeOptions.max_import_depth``.

Local variable indirection (``const base = {...}; export default base``) is
followed inside each rule. Files are reached only through the injected
``ImportResolver``; the resolver itself never touches the file system.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum

from .converter import string_value
from .options import DEFAULT_OPTIONS, ThemeOptions
from .syntax import NodeKind, SourceFile, SyntaxNode

logger = logging.getLogger(__name__)

ImportResolver = Callable[[SourceFile, str], SourceFile | None]

DEFAULT_EXPORT = "default"
NAMESPACE = "*"


class LocateRule(IntEnum):
    """Which rule located the theme literal."""

    THEME_VARIABLE = 1
    CONSTRUCTOR_CALL = 2
    DEFAULT_EXPORT = 3
    IMPORT = 4


@dataclass(frozen=True)
class ThemeLocation:
    """
    Where the theme literal was found.

    Attributes:
        node: The object literal node
        source: File that contains ``node``
        rule: Rule that matched in ``source``
        visited: Every file read while searching, in visit order
    """

    node: SyntaxNode
    source: SourceFile
    rule: LocateRule
    visited: tuple[SourceFile, ...]


# =============================================================================
# Module scope
# =============================================================================


@dataclass
class ImportBinding:
    """A local name bound by an import statement."""

    specifier: str
    imported: str


@dataclass
class ReExport:
    """``export { a as b } from "x"`` or ``export * from "x"``."""

    specifier: str
    exported: str
    imported: str


@dataclass
class ModuleScope:
    """Top-level bindings of one file, in source order."""

    declarations: list[tuple[str, SyntaxNode]] = field(default_factory=list)
    default_export: SyntaxNode | None = None
    imports: dict[str, ImportBinding] = field(default_factory=dict)
    reexports: list[ReExport] = field(default_factory=list)
    export_aliases: dict[str, str] = field(default_factory=dict)

    def initializer(self, name: str) -> SyntaxNode | None:
        """Initializer of the first top-level declaration of ``name``."""
        for declared, value in self.declarations:
            if declared == name:
                return value
        return None

    def exported(self, name: str) -> SyntaxNode | None:
        """Expression behind an export name, following ``export { a as name }``."""
        if name == DEFAULT_EXPORT:
            if self.default_export is not None:
                return self.default_export
            local = self.export_aliases.get(DEFAULT_EXPORT)
            return self.initializer(local) if local else None
        return self.initializer(self.export_aliases.get(name, name))


def module_scope(root: SyntaxNode) -> ModuleScope:
    """Collect the top-level declarations, imports and exports of a program."""
    scope = ModuleScope()
    for statement in root.named_children:
        match statement.kind:
            case NodeKind.LEXICAL_DECLARATION | NodeKind.VARIABLE_DECLARATION:
                _collect_declarators(statement, scope)
            case NodeKind.IMPORT_STATEMENT:
                _collect_import(statement, scope)
            case NodeKind.EXPORT_STATEMENT:
                _collect_export(statement, scope)
            case NodeKind.EXPRESSION_STATEMENT:
                _collect_commonjs_export(statement, scope)
    return scope


def _collect_declarators(statement: SyntaxNode, scope: ModuleScope) -> None:
    for declarator in statement.named_children:
        if declarator.kind != NodeKind.VARIABLE_DECLARATOR:
            continue
        name = declarator.field("name")
        value = declarator.field("value")
        if name is not None and value is not None and name.kind == NodeKind.IDENTIFIER:
            scope.declarations.append((name.text, value))


def _module_specifier(statement: SyntaxNode) -> str | None:
    source = statement.field("source")
    return string_value(source) if source is not None else None


def _collect_import(statement: SyntaxNode, scope: ModuleScope) -> None:
    specifier = _module_specifier(statement)
    clause = statement.first_child(NodeKind.IMPORT_CLAUSE)
    if specifier is None or clause is None:
        return

    for part in clause.named_children:
        match part.kind:
            case NodeKind.IDENTIFIER:
                scope.imports[part.text] = ImportBinding(specifier, DEFAULT_EXPORT)
            case NodeKind.NAMESPACE_IMPORT:
                local = part.first_child(NodeKind.IDENTIFIER)
                if local is not None:
                    scope.imports[local.text] = ImportBinding(specifier, NAMESPACE)
            case NodeKind.NAMED_IMPORTS:
                for spec in part.named_children:
                    if spec.kind != NodeKind.IMPORT_SPECIFIER:
                        continue
                    name = spec.field("name")
                    if name is None:
                        continue
                    alias = spec.field("alias") or name
                    scope.imports[alias.text] = ImportBinding(specifier, _export_name(name))


def _export_name(node: SyntaxNode) -> str:
    if node.kind == NodeKind.STRING:
        return string_value(node) or node.text
    return node.text


def _collect_export(statement: SyntaxNode, scope: ModuleScope) -> None:
    declaration = statement.field("declaration")
    if declaration is not None:
        if declaration.kind in (NodeKind.LEXICAL_DECLARATION, NodeKind.VARIABLE_DECLARATION):
            _collect_declarators(declaration, scope)
        return

    value = statement.field("value")
    if value is not None and statement.has_token("default"):
        if scope.default_export is None:
            scope.default_export = value
        return

    specifier = _module_specifier(statement)
    clause = statement.first_child(NodeKind.EXPORT_CLAUSE)
    if clause is None:
        if specifier is not None and statement.has_token("*"):
            scope.reexports.append(ReExport(specifier, NAMESPACE, NAMESPACE))
        return

    for spec in clause.named_children:
        if spec.kind != NodeKind.EXPORT_SPECIFIER:
            continue
        name = spec.field("name")
        if name is None:
            continue
        alias = spec.field("alias") or name
        if specifier is not None:
            scope.reexports.append(ReExport(specifier, _export_name(alias), _export_name(name)))
        else:
            scope.export_aliases[_export_name(alias)] = name.text


def _collect_commonjs_export(statement: SyntaxNode, scope: ModuleScope) -> None:
    expression = statement.named_children[0] if statement.named_children else None
    if expression is None or expression.type_name != "assignment_expression":
        return
    left = expression.field("left")
    right = expression.field("right")
    if left is None or right is None:
        return
    if left.text in ("module.exports", "exports.default") and scope.default_export is None:
        scope.default_export = right
    elif left.text.startswith("exports."):
        scope.declarations.append((left.text.removeprefix("exports."), right))


# =============================================================================
# Expression helpers
# =============================================================================


def callee_name(call: SyntaxNode) -> str | None:
    """Name of the called function: ``createTheme`` for ``mui.createTheme(...)`` too."""
    function = call.field("function")
    if function is None:
        return None
    function = function.unwrap()
    if function.kind == NodeKind.IDENTIFIER:
        return function.text
    if function.kind == NodeKind.MEMBER_EXPRESSION:
        prop = function.field("property")
        return prop.text if prop is not None else None
    return None


def first_argument(call: SyntaxNode) -> SyntaxNode | None:
    arguments = call.field("arguments")
    if arguments is None or arguments.kind != NodeKind.ARGUMENTS:
        return None
    for argument in arguments.named_children:
        if argument.type_name == "comment":
            continue
        if argument.kind == NodeKind.SPREAD:
            return None
        return argument
    return None


def constructor_argument(expr: SyntaxNode, options: ThemeOptions) -> SyntaxNode | None:
    """First argument of a theme constructor call, or None for anything else."""
    expr = expr.unwrap()
    if expr.kind != NodeKind.CALL_EXPRESSION:
        return None
    name = callee_name(expr)
    if name is None or not options.is_constructor(name):
        return None
    return first_argument(expr)


def object_through_locals(expr: SyntaxNode, scope: ModuleScope) -> SyntaxNode | None:
    """The object literal ``expr`` is, directly or through local variables."""
    seen: set[str] = set()
    current = expr.unwrap()
    while current.kind == NodeKind.IDENTIFIER and current.text not in seen:
        seen.add(current.text)
        initializer = scope.initializer(current.text)
        if initializer is None:
            return None
        current = initializer.unwrap()
    return current if current.kind == NodeKind.OBJECT else None


def theme_literal(
    expr: SyntaxNode, scope: ModuleScope, options: ThemeOptions
) -> SyntaxNode | None:
    """
    Object literal behind an expression, by rules 1 to 3.

    Accepts an object literal, a constructor call on one, or a local variable
    holding either.
    """
    seen: set[str] = set()
    current = expr.unwrap()
    while current.kind == NodeKind.IDENTIFIER and current.text not in seen:
        seen.add(current.text)
        initializer = scope.initializer(current.text)
        if initializer is None:
            return None
        current = initializer.unwrap()

    if current.kind == NodeKind.OBJECT:
        return current
    argument = constructor_argument(current, options)
    if argument is not None:
        return object_through_locals(argument, scope)
    return None


def import_reference(
    expr: SyntaxNode, scope: ModuleScope, options: ThemeOptions
) -> ImportBinding | None:
    """Import binding an expression refers to, through locals and one constructor call."""
    seen: set[str] = set()
    current = expr.unwrap()
    while True:
        argument = constructor_argument(current, options)
        if argument is not None:
            current = argument.unwrap()
        if current.kind == NodeKind.MEMBER_EXPRESSION:
            return _namespace_member(current, scope)
        if current.kind != NodeKind.IDENTIFIER or current.text in seen:
            return None
        seen.add(current.text)
        if current.text in scope.imports:
            return scope.imports[current.text]
        initializer = scope.initializer(current.text)
        if initializer is None:
            return None
        current = initializer.unwrap()


def _namespace_member(expr: SyntaxNode, scope: ModuleScope) -> ImportBinding | None:
    """``ns.theme`` where ``ns`` is a namespace import."""
    obj = expr.field("object")
    prop = expr.field("property")
    if obj is None or prop is None or obj.kind != NodeKind.IDENTIFIER:
        return None
    binding = scope.imports.get(obj.text)
    if binding is None or binding.imported != NAMESPACE:
        return None
    return ImportBinding(binding.specifier, prop.text)


# =============================================================================
# Locate
# =============================================================================


class _Search:
    """One locate run: options, import capability and the visited-file guard."""

    def __init__(self, resolve_import: ImportResolver | None, options: ThemeOptions):
        self.resolve_import = resolve_import
        self.options = options
        self.visited: list[SourceFile] = []
        self._seen: set[object] = set()

    def enter(self, source: SourceFile) -> bool:
        key = source.path.resolve() if source.path is not None else id(source)
        if key in self._seen:
            logger.debug("Import cycle at %s", source)
            return False
        self._seen.add(key)
        self.visited.append(source)
        return True

    def locate(
        self, source: SourceFile, depth: int
    ) -> tuple[SyntaxNode, SourceFile, LocateRule] | None:
        scope = module_scope(source.root)
        options = self.options

        # Rule 1: the `theme` variable, or whatever is exported as `theme`
        initializer = scope.initializer(options.theme_identifier) or scope.exported(
            options.theme_identifier
        )
        if initializer is not None:
            literal = object_through_locals(initializer, scope)
            if literal is not None:
                return literal, source, LocateRule.THEME_VARIABLE

        # Rule 2: constructor calls, by source position
        candidates = list(scope.declarations)
        if scope.default_export is not None:
            candidates.append((DEFAULT_EXPORT, scope.default_export))
        candidates.sort(key=lambda item: item[1].start)
        for _name, expr in candidates:
            argument = constructor_argument(expr, options)
            if argument is None:
                continue
            literal = object_through_locals(argument, scope)
            if literal is not None:
                return literal, source, LocateRule.CONSTRUCTOR_CALL

        # Rule 3: default export
        default = scope.exported(DEFAULT_EXPORT)
        if default is not None:
            literal = theme_literal(default, scope, options)
            if literal is not None:
                return literal, source, LocateRule.DEFAULT_EXPORT

        # Rule 4: follow imports and re-exports
        if depth >= options.max_import_depth or self.resolve_import is None:
            return None
        for binding in self._references(scope, candidates):
            found = self._follow(source, binding, depth)
            if found is not None:
                return found
        return None

    def _references(
        self, scope: ModuleScope, candidates: list[tuple[str, SyntaxNode]]
    ) -> list[ImportBinding]:
        references: list[ImportBinding] = []
        options = self.options

        exported_names = {DEFAULT_EXPORT, options.theme_identifier}
        exported_names.update(
            local
            for alias, local in scope.export_aliases.items()
            if alias in (DEFAULT_EXPORT, options.theme_identifier)
        )

        theme_import = scope.imports.get(options.theme_identifier)
        if theme_import is not None:
            references.append(theme_import)
        # `import x from "..."; export { x as default }`
        for alias, local in scope.export_aliases.items():
            imported = scope.imports.get(local)
            if (
                alias in (DEFAULT_EXPORT, options.theme_identifier)
                and imported is not None
                and imported is not theme_import
            ):
                references.append(imported)
        for name, expr in candidates:
            if name not in exported_names and (
                constructor_argument(expr, options) is None
            ):
                continue
            binding = import_reference(expr, scope, options)
            if binding is not None:
                references.append(binding)
        for reexport in scope.reexports:
            if reexport.exported in (DEFAULT_EXPORT, options.theme_identifier, NAMESPACE):
                references.append(ImportBinding(reexport.specifier, reexport.imported))
        return references

    def _follow(
        self, source: SourceFile, binding: ImportBinding, depth: int
    ) -> tuple[SyntaxNode, SourceFile, LocateRule] | None:
        assert self.resolve_import is not None
        target = self.resolve_import(source, binding.specifier)
        if target is None:
            logger.debug("Unresolved import %r from %s", binding.specifier, source)
            return None
        if not self.enter(target):
            return None

        if binding.imported != NAMESPACE:
            target_scope = module_scope(target.root)
            expr = target_scope.exported(binding.imported)
            if expr is not None:
                literal = theme_literal(expr, target_scope, self.options)
                if literal is not None:
                    return literal, target, LocateRule.IMPORT

        found = self.locate(target, depth + 1)
        if found is None:
            return None
        return found[0], found[1], LocateRule.IMPORT


def locate_theme(
    source: SourceFile,
    resolve_import: ImportResolver | None = None,
    options: ThemeOptions = DEFAULT_OPTIONS,
) -> ThemeLocation | None:
    """
    Locate the theme literal starting from ``source``.

    Returns None when no rule matches, including when the import hop bound
    is exhausted or an import cycle is met.
    """
    search = _Search(resolve_import, options)
    search.enter(source)
    found = search.locate(source, 0)
    if found is None:
        logger.debug("No theme literal in %s", source)
        return None
    node, owner, rule = found
    return ThemeLocation(node=node, source=owner, rule=rule, visited=tuple(search.visited))


def locate(
    root: SyntaxNode,
    resolve_import: ImportResolver | None = None,
    options: ThemeOptions = DEFAULT_OPTIONS,
) -> SyntaxNode | None:
    """Theme object literal for a program node, or None."""
    location = locate_theme(root.source, resolve_import, options)
    return location.node if location is not None else None
