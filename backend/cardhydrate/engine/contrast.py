"""Contrast Auto-Fix Sweep — WCAG post-pass over the final object list.

Minimum ratios (WCAG AA):
  normal text 4.5:1, large text (>= 24px, or >= 18.66px bold) 3:1,
  structural elements (divider, bullet dots) 3:1.

The sweep only recolors targets, and targets are never background candidates,
so running it twice is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from cardhydrate.engine import classify
from cardhydrate.engine.flatten import iter_group_leaves
from cardhydrate.engine.scene import RenderableObject
from cardhydrate.utils.color import (
    BLACK,
    WHITE,
    contrast_ratio,
    is_passthrough,
    parse_color,
    relative_luminance,
)

logger = logging.getLogger(__name__)

NORMAL_TEXT_MIN = 4.5
LARGE_TEXT_MIN = 3.0
STRUCTURAL_MIN = 3.0

LARGE_TEXT_SIZE = 24
LARGE_BOLD_TEXT_SIZE = 18.66
BOLD_WEIGHT = 700

DEFAULT_BACKGROUND = WHITE
# Shapes smaller than this in both dimensions are decorative noise.
SWEEP_MIN_SHAPE_SIZE = 20.0
# Luminance split for the last-resort black/white choice.
_LUMINANCE_SPLIT = 0.5

_WEIGHT_NAMES = {"normal": 400, "bold": 700, "bolder": 700, "lighter": 300}


def font_weight_value(weight: str | int | None) -> int:
    if weight is None:
        return 400
    if isinstance(weight, int):
        return weight
    weight = weight.strip().lower()
    if weight in _WEIGHT_NAMES:
        return _WEIGHT_NAMES[weight]
    try:
        return int(float(weight))
    except ValueError:
        return 400


def is_large_text(font_size: float, font_weight: str | int | None) -> bool:
    return font_size >= LARGE_TEXT_SIZE or (
        font_size >= LARGE_BOLD_TEXT_SIZE and font_weight_value(font_weight) >= BOLD_WEIGHT
    )


def required_ratio(obj: RenderableObject) -> float:
    if obj.is_text:
        size = obj.font_size or 16
        return LARGE_TEXT_MIN if is_large_text(size, obj.font_weight) else NORMAL_TEXT_MIN
    return STRUCTURAL_MIN


def ensure_readable_color(
    current: str,
    background: str,
    min_ratio: float,
    brand_primary: str | None = None,
    logo_dominant: str | None = None,
) -> str:
    """First of current, white, black, brand primary, logo dominant that passes.

    Falls back to black on light backgrounds and white on dark ones.
    """
    candidates = [current, WHITE, BLACK]
    if brand_primary:
        candidates.append(brand_primary)
    if logo_dominant:
        candidates.append(logo_dominant)
    for color in candidates:
        if contrast_ratio(color, background) >= min_ratio:
            return color
    return BLACK if relative_luminance(background) >= _LUMINANCE_SPLIT else WHITE


def is_background_candidate(obj: RenderableObject) -> bool:
    if obj.is_text:
        return False
    if obj.id and (
        classify.is_text_field(obj.id)
        or obj.id.startswith(classify.LOGO_PREFIX)
        or obj.id.startswith(classify.LAYOUT_PREFIX)
    ):
        return False
    return obj.opacity > 0


def _solid_fill(obj: RenderableObject) -> str | None:
    fill = obj.fill
    if not fill or is_passthrough(fill) or parse_color(fill) is None:
        return None
    return fill


def _candidates(objects: Iterable[RenderableObject]) -> Iterable[RenderableObject]:
    for obj in objects:
        if not is_background_candidate(obj):
            continue
        if obj.source is not None and obj.source.children:
            # Opaque locked group: its drawn leaves are the real backgrounds.
            yield from (leaf for leaf in iter_group_leaves(obj) if is_background_candidate(leaf))
        else:
            yield obj


def detect_background(
    objects: Sequence[RenderableObject],
    x: float,
    y: float,
    width: float = 1.0,
    height: float = 1.0,
    min_width: float = SWEEP_MIN_SHAPE_SIZE,
    min_height: float = SWEEP_MIN_SHAPE_SIZE,
    default: str = DEFAULT_BACKGROUND,
) -> str:
    """Fill of the topmost solid shape covering the region's center."""
    cx = x + width / 2
    cy = y + height / 2
    background = default

    for obj in _candidates(objects):
        fill = _solid_fill(obj)
        if fill is None:
            continue
        ox, oy, ow, oh = obj.bounds
        if not (ox <= cx <= ox + ow and oy <= cy <= oy + oh):
            continue
        if ow < min_width and oh < min_height:
            continue
        background = fill
    return background


def is_sweep_target(obj: RenderableObject) -> bool:
    return obj.is_text or classify.is_layout_structural(obj.id)


def sweep(
    objects: Sequence[RenderableObject],
    brand_primary: str | None = None,
    logo_dominant: str | None = None,
) -> list[RenderableObject]:
    """Return a new list where every text/structural fill meets its minimum ratio."""
    result: list[RenderableObject] = []
    fixed = 0

    for obj in objects:
        if not is_sweep_target(obj):
            result.append(obj)
            continue

        x, y, w, h = obj.bounds
        background = detect_background(objects, x, y, w or 1.0, h or 1.0)
        current = _solid_fill(obj) or BLACK
        readable = ensure_readable_color(
            current,
            background,
            required_ratio(obj),
            brand_primary=brand_primary,
            logo_dominant=logo_dominant,
        )
        if readable != obj.fill:
            logger.debug("Contrast fix %s: %s -> %s on %s", obj.id, obj.fill, readable, background)
            obj = replace(obj, fill=readable)
            fixed += 1
        result.append(obj)

    if fixed:
        logger.info("Contrast sweep recolored %d element(s)", fixed)
    return result
