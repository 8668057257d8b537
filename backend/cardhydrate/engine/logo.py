"""Logo Placement Resolver — turns ``#logo`` placeholders into images.

A logo whose average tone is too close to the background behind it gets a
rounded container in whichever palette color separates it best. Load or
decode failures degrade to a solid palette fill; nothing raises out of here.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, replace

from cardhydrate.engine import tokens
from cardhydrate.engine.config import HydrationConfig
from cardhydrate.engine.contrast import detect_background
from cardhydrate.engine.flatten import place_node
from cardhydrate.engine.layout import LogoBox
from cardhydrate.engine.palette import Palette
from cardhydrate.engine.scene import LogoPlaceholder, RenderableObject
from cardhydrate.engine.transform import decompose
from cardhydrate.utils.color import contrast_ratio
from cardhydrate.utils.image import LoadedLogo, load_logo

logger = logging.getLogger(__name__)

LogoLoader = Callable[[str, HydrationConfig], Awaitable[LoadedLogo]]


@dataclass(frozen=True)
class LogoResolution:
    objects: list[RenderableObject]
    # Average logo color when an image was analyzed
    tone: str | None = None
    has_container: bool = False


async def default_loader(url: str, config: HydrationConfig) -> LoadedLogo:
    return await load_logo(
        url,
        timeout=config.logo_fetch_timeout,
        max_bytes=config.logo_max_bytes,
        sample_edge=config.logo_sample_edge,
        alpha_threshold=config.logo_alpha_threshold,
    )


def pick_fill_color(palette: Palette, area_bg: str) -> str:
    """Palette color with the most contrast against the area (ties -> background)."""
    bg_contrast = contrast_ratio(palette.background, area_bg)
    text_contrast = contrast_ratio(palette.primary_text, area_bg)
    return palette.background if bg_contrast >= text_contrast else palette.primary_text


def pick_container_color(palette: Palette, area_bg: str, logo_tone: str) -> str:
    """Maximize min(contrast vs area, contrast vs logo) over the two palette colors."""
    best = palette.primary_text
    best_score = float("-inf")
    for color in (palette.primary_text, palette.background):
        score = min(contrast_ratio(color, area_bg), contrast_ratio(color, logo_tone))
        if score > best_score:
            best, best_score = color, score
    return best


def placeholder_box(placeholder: LogoPlaceholder, layout_logo: LogoBox | None) -> tuple[float, float, float, float]:
    """(left, top, width, height) — the layout box always wins over template geometry."""
    if layout_logo is not None:
        return (layout_logo.x, layout_logo.y, layout_logo.max_w, layout_logo.max_h)
    dec = decompose(placeholder.transform)
    return (
        dec.translate_x,
        dec.translate_y,
        placeholder.node.width * abs(dec.scale_x),
        placeholder.node.height * abs(dec.scale_y),
    )


def contain_fit(
    image_w: float,
    image_h: float,
    box: tuple[float, float, float, float],
    padding_ratio: float,
) -> tuple[float, float, float]:
    """Scale and centered (left, top) for an aspect-preserving fit inside the padded box."""
    left, top, width, height = box
    padding = min(width, height) * padding_ratio
    available_w = width - padding * 2
    available_h = height - padding * 2
    scale = min(available_w / max(image_w, 1), available_h / max(image_h, 1))
    rendered_w = image_w * scale
    rendered_h = image_h * scale
    return scale, left + (width - rendered_w) / 2, top + (height - rendered_h) / 2


def _boxed(obj: RenderableObject, box: tuple[float, float, float, float], **changes) -> RenderableObject:
    left, top, width, height = box
    return replace(
        obj,
        left=left,
        top=top,
        width=width,
        height=height,
        scale_x=1.0,
        scale_y=1.0,
        skew_x=0.0,
        skew_y=0.0,
        angle=0.0,
        radius=min(width, height) / 2 if obj.type == "circle" else obj.radius,
        **changes,
    )


async def resolve_logo(
    placeholder: LogoPlaceholder,
    logo_url: str,
    palette: Palette,
    objects: Sequence[RenderableObject],
    config: HydrationConfig,
    layout_logo: LogoBox | None = None,
    loader: LogoLoader = default_loader,
) -> LogoResolution:
    box = placeholder_box(placeholder, layout_logo)
    left, top, width, height = box
    area_bg = detect_background(
        objects,
        left,
        top,
        width,
        height,
        min_width=tokens.CARD_WIDTH * config.logo_bg_min_fraction,
        min_height=tokens.CARD_HEIGHT * config.logo_bg_min_fraction,
    )
    base = place_node(placeholder.node, placeholder.transform)

    def filled() -> LogoResolution:
        return LogoResolution([_boxed(base, box, fill=pick_fill_color(palette, area_bg), stroke=None, opacity=1.0)])

    if not logo_url:
        return filled()

    try:
        logo = await loader(logo_url, config)
    except Exception as e:
        logger.warning("Logo %s unavailable, using placeholder fill: %s", placeholder.id, e)
        return filled()

    tone = logo.stats.average_color if logo.stats else palette.primary_text
    needs_container = contrast_ratio(tone, area_bg) < config.logo_container_threshold

    objects_out: list[RenderableObject] = []
    if needs_container:
        color = pick_container_color(palette, area_bg, tone)
        if contrast_ratio(color, tone) < config.logo_container_min_contrast:
            color = (
                palette.background
                if contrast_ratio(palette.background, tone) >= contrast_ratio(palette.primary_text, tone)
                else palette.primary_text
            )
        radius = max(config.logo_min_corner_radius, min(width, height) * config.logo_corner_radius_fraction)
        objects_out.append(_boxed(
            base, box,
            type="rect",
            fill=color,
            stroke=None,
            opacity=config.logo_container_opacity,
            rx=radius,
        ))

    padding_ratio = config.logo_padding_with_container if needs_container else config.logo_padding_bare
    scale, img_left, img_top = contain_fit(logo.width, logo.height, box, padding_ratio)
    objects_out.append(RenderableObject(
        id=placeholder.id,
        type="image",
        left=img_left,
        top=img_top,
        width=logo.width,
        height=logo.height,
        scale_x=scale,
        scale_y=scale,
        src=logo_url,
    ))

    logger.debug(
        "Logo %s: tone %s on %s, container=%s",
        placeholder.id, tone, area_bg, needs_container,
    )
    return LogoResolution(objects_out, tone=tone, has_container=needs_container)
