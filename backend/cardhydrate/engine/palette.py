"""Two-Color Palette Mapper — every template paint lands on the brand palette.

Rules, in order:
  1. ``none`` / ``transparent`` pass through; zero-alpha colors become ``transparent``
  2. ``currentColor`` -> primary text
  3. text fields always take the dedicated text color
  4. complex or unparsable paint -> primary text for background roles, else background
  5. solid colors -> nearest palette color by squared RGB distance (ties -> primary text)
"""

from __future__ import annotations

from dataclasses import dataclass

from cardhydrate.engine import classify
from cardhydrate.models.brand import BrandProfile
from cardhydrate.utils.color import (
    CURRENT_COLOR,
    PASSTHROUGH_PAINTS,
    is_passthrough,
    normalize_hex,
    parse_color,
    squared_distance,
)

DEFAULT_PRIMARY_TEXT = "#1e293b"
DEFAULT_BACKGROUND = "#ffffff"


@dataclass(frozen=True)
class Palette:
    primary_text: str
    background: str
    text: str

    @classmethod
    def from_profile(cls, profile: BrandProfile) -> "Palette":
        colors = profile.colors
        primary = normalize_hex(colors.primary_text or DEFAULT_PRIMARY_TEXT)
        return cls(
            primary_text=primary,
            background=normalize_hex(colors.background or DEFAULT_BACKGROUND),
            text=normalize_hex(colors.text or colors.primary_text or DEFAULT_PRIMARY_TEXT),
        )

    @property
    def colors(self) -> tuple[str, str]:
        return (self.primary_text, self.background)


def nearest(source: str, palette: Palette) -> str:
    normalized = normalize_hex(source)
    if normalized in palette.colors:
        return normalized
    to_primary = squared_distance(normalized, palette.primary_text)
    to_background = squared_distance(normalized, palette.background)
    return palette.primary_text if to_primary <= to_background else palette.background


def map_color(source: str | None, palette: Palette, node_id: str = "") -> str | None:
    """Map one paint value. ``None`` means the node has no paint at all."""
    if source is None:
        return None
    if is_passthrough(source):
        return source if source in PASSTHROUGH_PAINTS else "transparent"
    if source == CURRENT_COLOR:
        return palette.primary_text
    if node_id and classify.is_text_field(node_id):
        return palette.text
    if parse_color(source) is None:
        return palette.primary_text if classify.is_background_role(node_id) else palette.background
    return nearest(source, palette)


def color_mapping(
    fill: str | None,
    stroke: str | None,
    node_id: str,
    palette: Palette,
) -> tuple[str | None, str | None]:
    """Role remap for ``#color_*`` ids, applied before the generic pass.

    primary -> background; secondary and accent -> primary text.
    """
    key = classify.color_key(node_id)
    if key == "primary":
        target = palette.background
    elif key in ("secondary", "accent"):
        target = palette.primary_text
    else:
        return fill, stroke

    if fill is not None and not is_passthrough(fill):
        fill = target
    if stroke is not None and not is_passthrough(stroke):
        stroke = target
    return fill, stroke


def map_paints(
    fill: str | None,
    stroke: str | None,
    node_id: str,
    palette: Palette,
) -> tuple[str | None, str | None]:
    """Full paint resolution for a placed node (color-prefix remap, then palette)."""
    fill, stroke = color_mapping(fill, stroke, node_id, palette)
    return map_color(fill, palette, node_id), map_color(stroke, palette, node_id)
