"""
Literal-to-Value conversion.

``convert`` turns an object/array literal node into the value model without
evaluating anything. It is total: every node shape it does not understand
becomes ``UnresolvedValue`` carrying that node's source text.
"""

from __future__ import annotations

import logging

from .syntax import NodeKind, SyntaxNode
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

logger = logging.getLogger(__name__)

SPREAD_KEY_PREFIX = "..."

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def unescape(body: str) -> str:
    """Decode JavaScript escape sequences in the body of a string literal."""
    chars: list[str] = []
    i = 0
    n = len(body)
    while i < n:
        c = body[i]
        if c != "\\" or i + 1 >= n:
            chars.append(c)
            i += 1
            continue

        nxt = body[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            chars.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "x" and i + 4 <= n:
            chars.append(_code_point(body[i + 2 : i + 4], body[i : i + 4]))
            i += 4
        elif nxt == "u" and i + 2 < n and body[i + 2] == "{":
            close = body.find("}", i + 3)
            if close == -1:
                chars.append(body[i:])
                break
            chars.append(_code_point(body[i + 3 : close], body[i : close + 1]))
            i = close + 1
        elif nxt == "u" and i + 6 <= n:
            chars.append(_code_point(body[i + 2 : i + 6], body[i : i + 6]))
            i += 6
        elif nxt == "\r":
            # line continuation, CRLF form
            i += 3 if body[i + 2 : i + 3] == "\n" else 2
        elif nxt == "\n":
            i += 2
        else:
            chars.append(nxt)
            i += 2
    return "".join(chars)


def _code_point(digits: str, fallback: str) -> str:
    try:
        return chr(int(digits, 16))
    except ValueError:
        return fallback


def parse_number(text: str) -> int | float | None:
    """Numeric literal text to a Python number, or None when it is not one."""
    cleaned = text.replace("_", "").lower()
    try:
        if cleaned.endswith("n"):
            return int(cleaned[:-1], 0)
        if cleaned.startswith(("0x", "0o", "0b")):
            return int(cleaned, 0)
        if cleaned.isdigit():
            return int(cleaned)
        return float(cleaned)
    except ValueError:
        return None


def string_value(node: SyntaxNode) -> str | None:
    """Content of a string literal or of a template literal without substitutions."""
    if node.kind == NodeKind.STRING:
        return unescape(node.text[1:-1])
    if node.kind == NodeKind.TEMPLATE_STRING:
        if node.first_child(NodeKind.TEMPLATE_SUBSTITUTION) is not None:
            return None
        return unescape(node.text[1:-1])
    return None


def property_key(key: SyntaxNode) -> str:
    """
    Name an object literal key.

    Identifier keys use their name and string keys their content. Numeric keys
    use the number's canonical form, so ``0x10`` names ``"16"`` and ``1.0`` names
    ``"1"``. Computed keys keep their bracketed source text (``[key]``) as a
    placeholder name.
    """
    if key.kind == NodeKind.STRING:
        return unescape(key.text[1:-1])
    if key.kind == NodeKind.NUMBER:
        number = parse_number(key.text)
        if number is not None:
            return number_key(number)
    return key.text


def number_key(number: int | float) -> str:
    """Property name a numeric key stands for."""
    if isinstance(number, float) and number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return str(number)


def convert(node: SyntaxNode) -> Value:
    """Convert an expression node to a Value, never raising."""
    node = node.unwrap()
    match node.kind:
        case NodeKind.OBJECT:
            return convert_object(node)
        case NodeKind.ARRAY:
            return ListValue(items=[_convert_element(item) for item in _members(node)])
        case NodeKind.STRING | NodeKind.TEMPLATE_STRING:
            text = string_value(node)
            if text is None:
                return UnresolvedValue(source=node.text)
            return StringValue(value=text)
        case NodeKind.NUMBER:
            number = parse_number(node.text)
            if number is None:
                return UnresolvedValue(source=node.text)
            return NumberValue(value=number)
        case NodeKind.UNARY_EXPRESSION:
            return _convert_unary(node)
        case NodeKind.TRUE:
            return BoolValue(value=True)
        case NodeKind.FALSE:
            return BoolValue(value=False)
        case NodeKind.NULL | NodeKind.UNDEFINED:
            return NullValue()
        case _:
            return UnresolvedValue(source=node.text)


def convert_object(node: SyntaxNode) -> ObjectValue:
    """Convert an object literal, keeping declaration order."""
    entries: dict[str, Value] = {}
    for member in _members(node):
        match member.kind:
            case NodeKind.PAIR:
                key = member.field("key")
                value = member.field("value")
                if key is None or value is None:
                    continue
                name = property_key(key)
                if key.kind == NodeKind.COMPUTED_PROPERTY_NAME:
                    entries[name] = UnresolvedValue(source=value.text)
                else:
                    entries[name] = convert(value)
            case NodeKind.SHORTHAND_PROPERTY:
                entries[member.text] = UnresolvedValue(source=member.text)
            case NodeKind.SPREAD:
                entries[SPREAD_KEY_PREFIX + _spread_target(member)] = UnresolvedValue(
                    source=member.text
                )
            case NodeKind.METHOD:
                name_node = member.field("name")
                if name_node is not None:
                    entries[property_key(name_node)] = UnresolvedValue(source=member.text)
            case _:
                logger.debug("Skipping object member %s", member.type_name)
    return ObjectValue(entries=entries)


def _members(node: SyntaxNode) -> list[SyntaxNode]:
    return [child for child in node.named_children if child.type_name != "comment"]


def _convert_element(node: SyntaxNode) -> Value:
    if node.kind == NodeKind.SPREAD:
        return UnresolvedValue(source=node.text)
    return convert(node)


def _spread_target(node: SyntaxNode) -> str:
    inner = node.named_children
    return inner[0].text if inner else node.text.removeprefix("...")


def _convert_unary(node: SyntaxNode) -> Value:
    operator = node.field("operator")
    argument = node.field("argument")
    if operator is None or argument is None or operator.text not in ("-", "+"):
        return UnresolvedValue(source=node.text)

    inner = convert(argument)
    if not isinstance(inner, NumberValue):
        return UnresolvedValue(source=node.text)
    if operator.text == "-":
        return NumberValue(value=-inner.value)
    return inner
