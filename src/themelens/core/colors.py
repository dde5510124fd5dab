"""
CSS color strings found in theme values.

Supports ``#rgb``, ``#rgba``, ``#rrggbb``, ``#rrggbbaa``, ``rgb()``/``rgba()``,
``hsl()``/``hsla()`` (comma or space separated, optional ``/ alpha``) and the
basic CSS color keywords.
"""

from __future__ import annotations

import colorsys
import re
from typing import NamedTuple


class RGBA(NamedTuple):
    """A color with 0-255 channels and a 0-1 alpha."""

    red: int
    green: int
    blue: int
    alpha: float = 1.0

    def as_floats(self) -> tuple[float, float, float, float]:
        return (self.red / 255, self.green / 255, self.blue / 255, self.alpha)


_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_RE = re.compile(r"^(rgba?|hsla?)\(\s*(.*?)\s*\)$", re.IGNORECASE)
_ARG_SPLIT_RE = re.compile(r"\s*,\s*|\s*/\s*|\s+")

NAMED_COLORS: dict[str, RGBA] = {
    "transparent": RGBA(0, 0, 0, 0.0),
    "black": RGBA(0, 0, 0),
    "silver": RGBA(192, 192, 192),
    "gray": RGBA(128, 128, 128),
    "grey": RGBA(128, 128, 128),
    "white": RGBA(255, 255, 255),
    "maroon": RGBA(128, 0, 0),
    "red": RGBA(255, 0, 0),
    "purple": RGBA(128, 0, 128),
    "fuchsia": RGBA(255, 0, 255),
    "green": RGBA(0, 128, 0),
    "lime": RGBA(0, 255, 0),
    "olive": RGBA(128, 128, 0),
    "yellow": RGBA(255, 255, 0),
    "navy": RGBA(0, 0, 128),
    "blue": RGBA(0, 0, 255),
    "teal": RGBA(0, 128, 128),
    "aqua": RGBA(0, 255, 255),
    "orange": RGBA(255, 165, 0),
}


def is_color_string(text: str) -> bool:
    """Cheap check before a full ``parse_color``."""
    lowered = text.strip().lower()
    return lowered.startswith(("#", "rgb(", "rgba(", "hsl(", "hsla(")) or lowered in NAMED_COLORS


def parse_color(text: str) -> RGBA | None:
    """Parse a CSS color, or None when ``text`` is not one."""
    trimmed = text.strip()
    if not trimmed:
        return None
    if trimmed.startswith("#"):
        return _parse_hex(trimmed)
    named = NAMED_COLORS.get(trimmed.lower())
    if named is not None:
        return named

    match = _FUNC_RE.match(trimmed)
    if match is None:
        return None
    func = match.group(1).lower()
    args = [arg for arg in _ARG_SPLIT_RE.split(match.group(2)) if arg]
    if len(args) not in (3, 4):
        return None
    try:
        if func.startswith("rgb"):
            return _parse_rgb(args)
        return _parse_hsl(args)
    except (ValueError, OverflowError):
        # non-numeric or infinite arguments
        return None


def _parse_hex(text: str) -> RGBA | None:
    if _HEX_RE.match(text) is None:
        return None
    digits = text[1:]
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    red, green, blue = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    alpha = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return RGBA(red, green, blue, round(alpha, 3))


def _channel(arg: str) -> int:
    if arg.endswith("%"):
        value = float(arg[:-1]) * 255 / 100
    else:
        value = float(arg)
    return max(0, min(255, round(value)))


def _alpha(arg: str) -> float:
    value = float(arg[:-1]) / 100 if arg.endswith("%") else float(arg)
    return max(0.0, min(1.0, value))


def _percent(arg: str) -> float:
    return max(0.0, min(1.0, float(arg.removesuffix("%")) / 100))


def _hue(arg: str) -> float:
    lowered = arg.lower()
    if lowered.endswith("deg"):
        degrees = float(lowered[:-3])
    elif lowered.endswith("turn"):
        degrees = float(lowered[:-4]) * 360
    else:
        degrees = float(lowered)
    return (degrees % 360) / 360


def _parse_rgb(args: list[str]) -> RGBA:
    red, green, blue = (_channel(arg) for arg in args[:3])
    alpha = _alpha(args[3]) if len(args) == 4 else 1.0
    return RGBA(red, green, blue, alpha)


def _parse_hsl(args: list[str]) -> RGBA:
    hue = _hue(args[0])
    saturation = _percent(args[1])
    lightness = _percent(args[2])
    alpha = _alpha(args[3]) if len(args) == 4 else 1.0
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    return RGBA(round(r * 255), round(g * 255), round(b * 255), alpha)


def to_hex(color: RGBA) -> str:
    """``#rrggbb``, or ``#rrggbbaa`` when the color is not opaque."""
    text = f"#{color.red:02x}{color.green:02x}{color.blue:02x}"
    if color.alpha < 1.0:
        text += f"{round(color.alpha * 255):02x}"
    return text


def to_css(color: RGBA) -> str:
    """``rgb(...)`` or ``rgba(...)`` notation."""
    if color.alpha < 1.0:
        return f"rgba({color.red}, {color.green}, {color.blue}, {color.alpha:g})"
    return f"rgb({color.red}, {color.green}, {color.blue})"
