"""Color parsing and WCAG contrast math. No engine imports."""

from __future__ import annotations

import re

# Paint values that pass through every mapping untouched.
PASSTHROUGH_PAINTS = frozenset({"none", "transparent"})
CURRENT_COLOR = "currentColor"

WHITE = "#ffffff"
BLACK = "#000000"

# sRGB linearization knee (WCAG 2.x relative luminance definition).
_SRGB_KNEE = 0.03928
# BT.709 channel weights used by WCAG.
_LUMA_R = 0.2126
_LUMA_G = 0.7152
_LUMA_B = 0.0722
# Flare term added to both luminances in the contrast ratio.
_FLARE = 0.05

_RGB_FUNC_RE = re.compile(r"^rgba?\(")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_ALPHA_ARG_RE = re.compile(r"\d*\.?\d+%?")

_NAMED_COLORS = {
    "black": "#000000", "white": "#ffffff", "red": "#ff0000",
    "green": "#008000", "blue": "#0000ff", "yellow": "#ffff00",
    "gray": "#808080", "grey": "#808080", "orange": "#ffa500",
    "purple": "#800080", "navy": "#000080", "silver": "#c0c0c0",
}


def parse_color(color: str | None) -> tuple[int, int, int] | None:
    """Parse a hex (3/4/6/8 digit), rgb()/rgba() or basic named color into (r, g, b).

    Alpha is read separately by ``color_alpha``.
    """
    if not color:
        return None
    color = color.strip().lower()
    color = _NAMED_COLORS.get(color, color)
    if color.startswith("#"):
        hex_part = color[1:]
        if len(hex_part) in (3, 4):
            hex_part = hex_part[0] * 2 + hex_part[1] * 2 + hex_part[2] * 2
        elif len(hex_part) == 8:
            hex_part = hex_part[:6]
        if len(hex_part) != 6:
            return None
        try:
            return (int(hex_part[0:2], 16), int(hex_part[2:4], 16), int(hex_part[4:6], 16))
        except ValueError:
            return None
    if _RGB_FUNC_RE.match(color):
        nums = _NUMBER_RE.findall(color)
        if len(nums) >= 3:
            return tuple(_clamp(float(n)) for n in nums[:3])  # type: ignore[return-value]
    return None


def color_alpha(color: str | None) -> float | None:
    """Alpha in [0, 1] of a parsable color; None when unparsable."""
    if parse_color(color) is None:
        return None
    color = color.strip().lower()
    if color.startswith("#"):
        hex_part = color[1:]
        if len(hex_part) == 4:
            return int(hex_part[3] * 2, 16) / 255
        if len(hex_part) == 8:
            return int(hex_part[6:8], 16) / 255
        return 1.0
    if _RGB_FUNC_RE.match(color):
        args = _ALPHA_ARG_RE.findall(color)
        if len(args) >= 4:
            alpha = args[3]
            value = float(alpha.rstrip("%")) / (100 if alpha.endswith("%") else 1)
            return max(0.0, min(1.0, value))
    return 1.0


def _clamp(v: float) -> int:
    return max(0, min(255, round(v)))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert channel values (clamped and rounded) to ``#rrggbb``."""
    return "#" + "".join(f"{_clamp(v):02x}" for v in (r, g, b))


def normalize_hex(color: str) -> str:
    """Return ``#rrggbb`` for any parsable color, else the input unchanged."""
    rgb = parse_color(color)
    if rgb is None:
        return color
    return rgb_to_hex(*rgb)


def is_passthrough(value: str | None) -> bool:
    """``none``, ``transparent``, or any color with zero alpha."""
    if value is None:
        return False
    return value in PASSTHROUGH_PAINTS or color_alpha(value) == 0


def relative_luminance(color: str) -> float:
    """WCAG relative luminance in [0, 1]. Unparsable colors count as black."""
    rgb = parse_color(color)
    if rgb is None:
        return 0.0

    def channel(v: int) -> float:
        s = v / 255
        return s / 12.92 if s <= _SRGB_KNEE else ((s + 0.055) / 1.055) ** 2.4

    r, g, b = (channel(v) for v in rgb)
    return _LUMA_R * r + _LUMA_G * g + _LUMA_B * b


def contrast_ratio(c1: str, c2: str) -> float:
    """WCAG contrast ratio between two colors, 1.0 to 21.0."""
    l1 = relative_luminance(c1)
    l2 = relative_luminance(c2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + _FLARE) / (darker + _FLARE)


def squared_distance(c1: str, c2: str) -> float:
    """Squared Euclidean RGB distance; infinite when either side is unparsable."""
    a = parse_color(c1)
    b = parse_color(c2)
    if a is None or b is None:
        return float("inf")
    return float(sum((x - y) ** 2 for x, y in zip(a, b)))
