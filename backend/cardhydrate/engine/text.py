"""Text Field Hydrator — profile content into positioned text objects.

Width is a heuristic (average glyph ~0.55 em), not real glyph metrics. The
contract is: truncated output ends in an ellipsis and its estimated width
fits the box.
"""

from __future__ import annotations

import math

from cardhydrate.engine import classify, tokens
from cardhydrate.engine.layout import ContactPosition, ElementPosition, LayoutPositions
from cardhydrate.engine.palette import Palette
from cardhydrate.engine.scene import RenderableObject, TextFieldMetadata
from cardhydrate.engine.transform import apply_to_point, decompose
from cardhydrate.models.brand import BrandProfile

ELLIPSIS = "…"
AVG_CHAR_WIDTH_RATIO = 0.55
# Rendered line box height relative to font size.
TEXT_LINE_HEIGHT = 1.16
# Font size estimate from a text node's box when no size was authored.
HEIGHT_TO_FONT_SIZE = 0.7
DEFAULT_FONT_SIZE = 14
# Native placement may grow a text box up to this multiple of its template width.
NATIVE_WIDTH_GROWTH = 2.5

_DEFAULTS = {
    "#name": "Your Name",
    "#title": "Your Title",
    "#phone": "+1 234 567 8900",
    "#email": "hello@example.com",
    "#website": "www.example.com",
    "#address": "123 Innovation Dr, Tech City",
}


def resolve_content(field_id: str, profile: BrandProfile) -> str:
    """Profile string for a semantic text id; literal defaults when empty."""
    contact = profile.contact_info
    values = {
        "#name": profile.business_name,
        "#title": profile.tagline,
        "#phone": contact.phone,
        "#email": contact.email,
        "#website": contact.website,
        "#address": contact.address,
    }
    for prefix in classify.TEXT_PREFIXES:
        if field_id.startswith(prefix):
            return values[prefix] or _DEFAULTS[prefix]
    return "Placeholder"


def estimate_width(text: str, font_size: float) -> float:
    return len(text) * font_size * AVG_CHAR_WIDTH_RATIO


def truncate(text: str, font_size: float, max_width: float) -> str:
    if estimate_width(text, font_size) <= max_width:
        return text

    available = max_width - estimate_width(ELLIPSIS, font_size)
    if available <= 0:
        return ELLIPSIS

    max_chars = math.floor(available / (font_size * AVG_CHAR_WIDTH_RATIO))
    # Float rounding can leave the estimate a hair over the box
    while max_chars > 0 and estimate_width(text[:max_chars] + ELLIPSIS, font_size) > max_width:
        max_chars -= 1
    return text[:max_chars] + ELLIPSIS


def _slot_for(field_id: str, layout: LayoutPositions) -> tuple[ElementPosition, tokens.TypographyToken, float]:
    if field_id.startswith("#name"):
        return layout.name, tokens.NAME_TYPE, layout.name_font_size
    if field_id.startswith("#title"):
        return layout.title, tokens.TITLE_TYPE, tokens.TITLE_TYPE.font_size
    for prefix in classify.CONTACT_PREFIXES:
        if field_id.startswith(prefix):
            slot: ContactPosition = getattr(layout, prefix[1:])
            return slot, tokens.CONTACT_TYPE, tokens.CONTACT_TYPE.font_size
    return layout.name, tokens.CONTACT_TYPE, tokens.CONTACT_TYPE.font_size


def build_text_object(
    meta: TextFieldMetadata,
    profile: BrandProfile,
    layout: LayoutPositions,
    palette: Palette,
) -> RenderableObject:
    """Text object at the layout slot matching its semantic id."""
    slot, token, font_size = _slot_for(meta.id, layout)
    content = truncate(resolve_content(meta.id, profile), font_size, slot.width)
    return RenderableObject(
        id=meta.id,
        type="textbox",
        left=slot.x,
        top=slot.y,
        width=slot.width,
        height=font_size * TEXT_LINE_HEIGHT,
        fill=palette.text,
        text=content,
        font_size=font_size,
        font_weight=token.font_weight,
        font_family=token.font_family,
        char_spacing=token.char_spacing,
        text_align="left",
    )


def build_native_text_object(
    meta: TextFieldMetadata,
    palette: Palette,
    content: str | None = None,
) -> RenderableObject:
    """Text object at the template's own geometry, scale baked into font size."""
    node = meta.node
    dec = decompose(meta.transform)
    scale_y = abs(dec.scale_y)

    if node.font_size:
        font_size = node.font_size * scale_y
    elif node.height:
        font_size = node.height * scale_y * HEIGHT_TO_FONT_SIZE
    else:
        font_size = DEFAULT_FONT_SIZE

    orig_width = node.width * abs(dec.scale_x)
    left, top = apply_to_point(meta.transform, 0.0, 0.0)
    text = meta.original_text if content is None else content

    if node.text_anchor == "middle":
        center_x, _ = apply_to_point(meta.transform, node.width / 2, 0.0)
        half_space = min(center_x, tokens.CARD_WIDTH - center_x) - tokens.RIGHT_MARGIN
        width = max(orig_width, min(half_space * 2, orig_width * NATIVE_WIDTH_GROWTH))
        left, origin_x, align = center_x, "center", "center"
    else:
        max_space = tokens.CARD_WIDTH - left - tokens.RIGHT_MARGIN
        width = max(orig_width, min(max_space, orig_width * NATIVE_WIDTH_GROWTH))
        origin_x, align = "left", "left"

    return RenderableObject(
        id=meta.id,
        type="textbox",
        left=left,
        top=top,
        width=width,
        height=font_size * TEXT_LINE_HEIGHT,
        origin_x=origin_x,
        fill=palette.text,
        text=truncate(text, font_size, width),
        font_size=font_size,
        font_weight=node.font_weight,
        font_family=node.font_family or tokens.FONT_FAMILY,
        text_align=align,
        angle=dec.angle,
    )


def build_structural_elements(layout: LayoutPositions, palette: Palette) -> list[RenderableObject]:
    """Divider under the title plus one bullet dot per contact row, all locked."""
    accent = palette.primary_text
    elements = [RenderableObject(
        id=classify.LAYOUT_DIVIDER_ID,
        type="rect",
        left=layout.divider.x,
        top=layout.divider.y,
        width=layout.divider.width,
        height=tokens.DIVIDER_HEIGHT,
        fill=accent,
        rx=1,
        locked=True,
    )]

    diameter = tokens.CONTACT_DOT_RADIUS * 2
    for name, slot in zip(("phone", "email", "website", "address"), layout.contacts):
        elements.append(RenderableObject(
            id=f"{classify.LAYOUT_DOT_PREFIX}{name}",
            type="circle",
            left=slot.dot_x,
            top=slot.dot_y,
            width=diameter,
            height=diameter,
            radius=tokens.CONTACT_DOT_RADIUS,
            origin_x="center",
            origin_y="center",
            fill=accent,
            locked=True,
        ))
    return elements
