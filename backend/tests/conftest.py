"""Shared test fixtures."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from cardhydrate.models.brand import BrandColors, BrandProfile, ContactInfo


# Standardized template: locked background, color-mapped band, legacy accents,
# a logo placeholder and all six text fields.

CARD_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="1050" height="600" viewBox="0 0 1050 600">
  <defs>
    <linearGradient id="fade"><stop offset="0" stop-color="#000"/></linearGradient>
  </defs>
  <g id="#bg_layer">
    <rect x="0" y="0" width="1050" height="600" fill="#f8f8f8"/>
  </g>
  <rect id="#color_primary_band" x="0" y="540" width="1050" height="60" fill="#123456"/>
  <rect id="#color_accent_phone_dot" x="70" y="300" width="8" height="8" fill="#ff0000"/>
  <rect id="#color_accent_divider" x="60" y="250" width="100" height="3" fill="#ff0000"/>
  <rect id="#logo" x="60" y="40" width="90" height="90" fill="#cccccc"/>
  <text id="#name" x="60" y="200" font-size="40" font-weight="700">Jane Doe</text>
  <text id="#title" x="60" y="235" font-size="18">Designer</text>
  <text id="#phone" x="90" y="300" font-size="16">000</text>
  <text id="#email" x="90" y="330" font-size="16">a@b.c</text>
  <text id="#website" x="90" y="360" font-size="16">b.c</text>
  <text id="#address" x="90" y="390" font-size="16">Street</text>
</svg>'''

# Dark locked background; palette text on it fails contrast until the sweep runs.
DARK_CARD_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="1050" height="600" viewBox="0 0 1050 600">
  <g id="#bg_dark">
    <rect width="1050" height="600" fill="#111111"/>
  </g>
  <text id="#name" x="60" y="200" font-size="40">Jane Doe</text>
  <text id="#phone" x="90" y="300" font-size="16">000</text>
</svg>'''

PROFILE = BrandProfile(
    business_name="Acme Studio",
    tagline="Design & Build",
    contact_info=ContactInfo(
        phone="+1 555 0100",
        email="hello@acme.test",
        website="acme.test",
        address="1 Main St",
    ),
    colors=BrandColors(primary_text="#1e293b", background="#ffffff"),
)


def png_data_uri(color: tuple[int, int, int, int], size: tuple[int, int] = (4, 4)) -> str:
    img = Image.new("RGBA", size, color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def card_svg() -> str:
    return CARD_SVG


@pytest.fixture
def profile() -> BrandProfile:
    return PROFILE
