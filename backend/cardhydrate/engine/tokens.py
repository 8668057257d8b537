"""Global layout tokens — identical across every template.

All values are in the 1050x600 card coordinate system.
"""

from __future__ import annotations

from dataclasses import dataclass

CARD_WIDTH = 1050
CARD_HEIGHT = 600

FONT_FAMILY = "Inter"


@dataclass(frozen=True)
class TypographyToken:
    font_size: float
    font_weight: str
    font_family: str = FONT_FAMILY
    letter_spacing: float = 0.0

    @property
    def char_spacing(self) -> float:
        # Canvas char spacing is expressed in 1/1000 em; templates author in px x 10.
        return self.letter_spacing * 10


NAME_TYPE = TypographyToken(font_size=44, font_weight="700")
TITLE_TYPE = TypographyToken(font_size=18, font_weight="400", letter_spacing=2)
CONTACT_TYPE = TypographyToken(font_size=16, font_weight="400")

# Narrow columns shrink the heading, never below this factor.
HEADING_MIN_SCALE = 0.7
HEADING_SCALE_BELOW_WIDTH = 400
HEADING_REFERENCE_WIDTH = 500

# Line-height multipliers used to advance the vertical cursor.
NAME_LINE_HEIGHT = 1.15
TITLE_LINE_HEIGHT = 1.3
# Bullet dot sits at 45% of the contact row height.
CONTACT_DOT_ROW_FRACTION = 0.45


@dataclass(frozen=True)
class LogoToken:
    width: float
    height: float


LOGO_SMALL = LogoToken(60, 60)     # width < 350
LOGO_MEDIUM = LogoToken(80, 80)
LOGO_LARGE = LogoToken(100, 100)   # width >= 500

LOGO_SMALL_BELOW_WIDTH = 350
LOGO_LARGE_FROM_WIDTH = 500

# ── Spacing scale ──
PADDING = 60              # print-safe inner padding
RIGHT_MARGIN = 40
LOGO_TO_NAME = 20
NAME_TO_TITLE = 8
TITLE_TO_DIVIDER = 18
DIVIDER_HEIGHT = 3
DIVIDER_TO_CONTACT = 18
CONTACT_GAP = 14
CONTACT_DOT_RADIUS = 4
CONTACT_DOT_OFFSET = 12   # dot x from content left
CONTACT_TEXT_OFFSET = 30  # text x from content left

# Divider spans a quarter of the column, capped.
DIVIDER_WIDTH_FRACTION = 0.25
DIVIDER_MAX_WIDTH = 100


def pick_logo_scale(content_width: float) -> LogoToken:
    if content_width < LOGO_SMALL_BELOW_WIDTH:
        return LOGO_SMALL
    if content_width >= LOGO_LARGE_FROM_WIDTH:
        return LOGO_LARGE
    return LOGO_MEDIUM
