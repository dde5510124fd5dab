"""
Theme context classification.

Decides whether a member-access chain such as ``theme.palette.primary`` or
``props.theme.spacing`` reads from the theme, and where it sits: inside a
styled tagged template, inside the arguments of a styled call, or elsewhere.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .options import DEFAULT_OPTIONS, ThemeOptions
from .syntax import TRANSPARENT_KINDS, NodeKind, SyntaxNode

CHAIN_KINDS = frozenset({NodeKind.MEMBER_EXPRESSION, NodeKind.SUBSCRIPT_EXPRESSION})


class BindingStyle(StrEnum):
    """How the theme root is reached."""

    DIRECT = "direct"  # theme.x
    DESTRUCTURED_PROP = "destructured_prop"  # props.theme.x


class StructuralContext(StrEnum):
    """Syntactic surroundings of a theme access."""

    STYLED_TAG = "styled_tag"
    STYLED_CALL_ARGUMENT = "styled_call_argument"
    PLAIN = "plain"


class ThemeAccessContext(BaseModel):
    """Classification of one member-access expression."""

    is_theme_access: bool
    binding_style: BindingStyle = BindingStyle.DIRECT
    structural_context: StructuralContext = StructuralContext.PLAIN

    model_config = ConfigDict(frozen=True)

    @property
    def root_segments(self) -> int:
        """Leading chain segments that name the theme itself."""
        return 2 if self.binding_style == BindingStyle.DESTRUCTURED_PROP else 1


NOT_THEME = ThemeAccessContext(is_theme_access=False)


def chain_object(node: SyntaxNode) -> SyntaxNode | None:
    """The qualifier of a member or subscript expression, through casts."""
    obj = node.field("object")
    return obj.unwrap() if obj is not None else None


def chain_root(node: SyntaxNode) -> SyntaxNode:
    """Walk left through ``.``/``[]`` qualifiers to the first non-member node."""
    current = node.unwrap()
    while current.kind in CHAIN_KINDS:
        obj = chain_object(current)
        if obj is None:
            break
        current = obj
    return current


def chain_head(node: SyntaxNode) -> SyntaxNode:
    """Outermost member-access expression that has ``node`` as its qualifier chain."""
    current = node
    parent = current.parent
    while parent is not None:
        if parent.kind in TRANSPARENT_KINDS:
            current = parent
        elif parent.kind in CHAIN_KINDS and _is_qualifier(parent, current):
            current = parent
        else:
            break
        parent = current.parent
    return current


def _is_qualifier(chain: SyntaxNode, child: SyntaxNode) -> bool:
    obj = chain.field("object")
    return obj is not None and obj == child


def _second_segment(root: SyntaxNode) -> str | None:
    """Property name directly after ``root`` in its chain, if any."""
    parent = root.parent
    while parent is not None and parent.kind in TRANSPARENT_KINDS:
        parent = parent.parent
    if parent is None or parent.kind != NodeKind.MEMBER_EXPRESSION:
        return None
    obj = chain_object(parent)
    if obj is None or obj != root:
        return None
    prop = parent.field("property")
    return prop.text if prop is not None else None


def structural_context(
    node: SyntaxNode, options: ThemeOptions = DEFAULT_OPTIONS
) -> StructuralContext:
    """Nearest enclosing styled tagged template or styled call argument list."""
    child = node
    for ancestor in node.ancestors():
        if ancestor.kind == NodeKind.CALL_EXPRESSION:
            function = ancestor.field("function")
            arguments = ancestor.field("arguments")
            if (
                function is not None
                and arguments is not None
                and arguments.contains(child)
                and options.is_styled(function.text)
            ):
                if arguments.kind == NodeKind.TEMPLATE_STRING:
                    return StructuralContext.STYLED_TAG
                return StructuralContext.STYLED_CALL_ARGUMENT
        child = ancestor
    return StructuralContext.PLAIN


def classify(node: SyntaxNode, options: ThemeOptions = DEFAULT_OPTIONS) -> ThemeAccessContext:
    """
    Classify a member-access expression.

    ``theme.x`` is a direct access and ``props.theme.x`` a destructured-prop
    access. Any other root is not a theme access, whatever its surroundings.
    With ``options.require_styled_context`` set, plain contexts do not count.
    """
    root = chain_root(node)
    if root.kind != NodeKind.IDENTIFIER:
        return NOT_THEME

    if root.text == options.theme_identifier:
        style = BindingStyle.DIRECT
    elif (
        root.text == options.props_identifier
        and _second_segment(root) == options.theme_identifier
    ):
        style = BindingStyle.DESTRUCTURED_PROP
    else:
        return NOT_THEME

    context = structural_context(node, options)
    if options.require_styled_context and context == StructuralContext.PLAIN:
        return ThemeAccessContext(
            is_theme_access=False, binding_style=style, structural_context=context
        )
    return ThemeAccessContext(
        is_theme_access=True, binding_style=style, structural_context=context
    )
