"""Tests for the two-color palette mapper."""

from __future__ import annotations

import numpy as np
import pytest

from cardhydrate.engine.classify import is_text_field
from cardhydrate.engine.palette import Palette, color_mapping, map_color, map_paints, nearest
from cardhydrate.engine.scene import COMPLEX_PAINT
from cardhydrate.models.brand import BrandColors, BrandProfile
from cardhydrate.utils.color import color_alpha

PALETTE = Palette(primary_text="#1e293b", background="#ffffff", text="#334155")

IDS = ["", "#name", "#phone_main", "#bg", "#bg_shape", "#lock_pattern", "#color_primary_x", "#deco", "#logo"]


def test_passthrough_paints_untouched():
    assert map_color("none", PALETTE) == "none"
    assert map_color("transparent", PALETTE, "#bg") == "transparent"
    assert map_color(None, PALETTE) is None


def test_current_color_maps_to_primary():
    assert map_color("currentColor", PALETTE, "#deco") == "#1e293b"


def test_text_fields_take_text_color():
    assert map_color("#ff0000", PALETTE, "#name") == "#334155"
    assert map_color(COMPLEX_PAINT, PALETTE, "#email_work") == "#334155"


def test_complex_paint_depends_on_role():
    assert map_color(COMPLEX_PAINT, PALETTE, "#bg_gradient") == "#1e293b"
    assert map_color(COMPLEX_PAINT, PALETTE, "#deco") == "#ffffff"
    assert map_color("hsl(10, 20%, 30%)", PALETTE, "") == "#ffffff"


def test_nearest_color():
    assert nearest("#202020", PALETTE) == "#1e293b"
    assert nearest("#f0f0f0", PALETTE) == "#ffffff"
    assert nearest("#FFF", PALETTE) == "#ffffff"


def test_nearest_tie_goes_to_primary():
    palette = Palette(primary_text="#000000", background="#020202", text="#000000")
    assert nearest("#010101", palette) == "#000000"


def test_palette_closure_random_colors():
    rng = np.random.default_rng(3)
    allowed = {PALETTE.primary_text, PALETTE.background, PALETTE.text, "none", "transparent"}
    for _ in range(500):
        r, g, b = rng.integers(0, 256, size=3)
        source = f"#{r:02x}{g:02x}{b:02x}"
        for node_id in IDS:
            fill, stroke = map_paints(source, source, node_id, PALETTE)
            assert fill in allowed
            assert stroke in allowed
            if not is_text_field(node_id):
                assert fill in PALETTE.colors


@pytest.mark.parametrize("paint", ["none", "transparent", "currentColor", COMPLEX_PAINT, "rgb(10, 20, 30)", "red", "garbage"])
def test_palette_closure_special_paints(paint):
    allowed = {PALETTE.primary_text, PALETTE.background, PALETTE.text, "none", "transparent"}
    for node_id in IDS:
        assert map_color(paint, PALETTE, node_id) in allowed


def test_color_prefix_remap():
    assert color_mapping("#123456", "none", "#color_primary_band", PALETTE) == ("#ffffff", "none")
    assert color_mapping("#123456", "#abcdef", "#color_accent_ring", PALETTE) == ("#1e293b", "#1e293b")
    assert color_mapping("#123456", None, "#color_secondary", PALETTE) == ("#1e293b", None)
    assert color_mapping("#123456", None, "#deco", PALETTE) == ("#123456", None)


def test_palette_from_profile_defaults():
    palette = Palette.from_profile(BrandProfile())
    assert palette == Palette(primary_text="#1e293b", background="#ffffff", text="#1e293b")


def test_palette_from_profile_alias_and_text():
    profile = BrandProfile(colors=BrandColors(primaryText="#ABC", background="#000", text="#eeeeee"))
    palette = Palette.from_profile(profile)
    assert palette.primary_text == "#aabbcc"
    assert palette.background == "#000000"
    assert palette.text == "#eeeeee"


@pytest.mark.parametrize("paint", ["rgba(0, 0, 0, 0)", "rgba(12,34,56,0%)", "#00000000", "#fff0"])
def test_zero_alpha_paint_is_transparent(paint):
    assert map_color(paint, PALETTE, "#deco") == "transparent"
    assert map_paints(paint, None, "#color_accent_band", PALETTE) == ("transparent", None)


def test_translucent_paint_maps_by_rgb():
    assert map_color("rgba(0, 0, 0, 0.5)", PALETTE, "#deco") == "#1e293b"
    assert map_color("#ffffff80", PALETTE, "#deco") == "#ffffff"


@pytest.mark.parametrize(
    "paint, alpha",
    [("#123456", 1.0), ("#12345600", 0.0), ("#123456ff", 1.0), ("rgba(1,2,3,0.25)", 0.25),
     ("rgb(1 2 3 / 50%)", 0.5), ("red", 1.0), ("garbage", None)],
)
def test_color_alpha(paint, alpha):
    assert color_alpha(paint) == alpha
