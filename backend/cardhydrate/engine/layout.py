"""Layout Engine — one standardized left-aligned column per card.

Vertical stack (top to bottom):
    Logo -> gap -> Name -> gap -> Title -> gap -> Divider -> gap -> Phone -> Email -> Website -> Address
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from cardhydrate.engine import tokens


@dataclass(frozen=True)
class ContentArea:
    left: float
    top: float
    width: float


@dataclass(frozen=True)
class ElementPosition:
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class ContactPosition(ElementPosition):
    dot_x: float = 0.0
    dot_y: float = 0.0


@dataclass(frozen=True)
class LogoBox:
    x: float
    y: float
    max_w: float
    max_h: float


@dataclass(frozen=True)
class LayoutPositions:
    content_area: ContentArea
    name_font_size: float
    logo: LogoBox
    name: ElementPosition
    title: ElementPosition
    divider: ElementPosition
    phone: ContactPosition
    email: ContactPosition
    website: ContactPosition
    address: ContactPosition

    @property
    def contacts(self) -> tuple[ContactPosition, ...]:
        return (self.phone, self.email, self.website, self.address)


DEFAULT_CONTENT_AREA = ContentArea(left=tokens.PADDING, top=50, width=500)

# Template filename stem -> where its content column lives.
TEMPLATE_CONTENT_AREAS: dict[str, ContentArea] = {
    "clean_professional": ContentArea(430, 60, 560),
    "corporate_wave": ContentArea(60, 50, 480),
    "executive_split": ContentArea(480, 60, 510),
    "modern_diagonal": ContentArea(60, 50, 370),
    "bold_accent": ContentArea(60, 50, 500),
    "geometric_blocks": ContentArea(60, 40, 580),
    "skyline_pro": ContentArea(60, 40, 450),
    "angular_pro": ContentArea(60, 40, 500),
    "arrow_edge": ContentArea(60, 50, 320),
    "crimson_corp": ContentArea(60, 50, 550),
    "dual_tone": ContentArea(60, 60, 420),
    "marble_red": ContentArea(60, 60, 340),
    "sharp_contrast": ContentArea(60, 50, 550),
    "horizon_stripe": ContentArea(60, 50, 520),
    "midnight_orbit": ContentArea(60, 50, 500),
    "minimal_corner": ContentArea(60, 50, 540),
    "split_curve": ContentArea(480, 60, 510),
    "tech_circuit": ContentArea(60, 50, 500),
}


def template_stem(template_id: str | None) -> str:
    """``/templates/bold_accent.svg`` -> ``bold_accent``."""
    if not template_id:
        return ""
    name = PurePosixPath(template_id.split("?")[0]).name
    return name[:-4] if name.endswith(".svg") else name


def content_area_for(template_id: str | None) -> ContentArea:
    return TEMPLATE_CONTENT_AREAS.get(template_stem(template_id), DEFAULT_CONTENT_AREA)


def heading_scale(width: float) -> float:
    if width < tokens.HEADING_SCALE_BELOW_WIDTH:
        return max(tokens.HEADING_MIN_SCALE, width / tokens.HEADING_REFERENCE_WIDTH)
    return 1.0


def name_font_size(width: float) -> float:
    return round(tokens.NAME_TYPE.font_size * heading_scale(width))


def compute_layout(area: ContentArea, logo_token: tokens.LogoToken | None = None) -> LayoutPositions:
    """Exact positions for every element of the column. Pure; no rounding of y.

    The logo tier follows the column width unless ``logo_token`` is given.
    """
    left, top, width = area.left, area.top, area.width
    name_size = name_font_size(width)
    logo_token = logo_token or tokens.pick_logo_scale(width)

    y = top

    logo = LogoBox(x=left, y=y, max_w=logo_token.width, max_h=logo_token.height)
    y += logo_token.height + tokens.LOGO_TO_NAME

    name = ElementPosition(x=left, y=y, width=width)
    y += name_size * tokens.NAME_LINE_HEIGHT + tokens.NAME_TO_TITLE

    title = ElementPosition(x=left, y=y, width=width)
    y += tokens.TITLE_TYPE.font_size * tokens.TITLE_LINE_HEIGHT + tokens.TITLE_TO_DIVIDER

    divider_width = min(width * tokens.DIVIDER_WIDTH_FRACTION, tokens.DIVIDER_MAX_WIDTH)
    divider = ElementPosition(x=left, y=y, width=divider_width)
    y += tokens.DIVIDER_HEIGHT + tokens.DIVIDER_TO_CONTACT

    contact_size = tokens.CONTACT_TYPE.font_size
    rows: list[ContactPosition] = []
    for _ in range(4):
        rows.append(ContactPosition(
            x=left + tokens.CONTACT_TEXT_OFFSET,
            y=y,
            width=width - tokens.CONTACT_TEXT_OFFSET,
            dot_x=left + tokens.CONTACT_DOT_OFFSET,
            dot_y=y + contact_size * tokens.CONTACT_DOT_ROW_FRACTION,
        ))
        y += contact_size + tokens.CONTACT_GAP

    phone, email, website, address = rows
    return LayoutPositions(
        content_area=area,
        name_font_size=name_size,
        logo=logo,
        name=name,
        title=title,
        divider=divider,
        phone=phone,
        email=email,
        website=website,
        address=address,
    )
