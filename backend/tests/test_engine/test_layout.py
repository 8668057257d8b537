"""Tests for the layout engine."""

from __future__ import annotations

import numpy as np
import pytest

from cardhydrate.engine import tokens
from cardhydrate.engine.layout import (
    DEFAULT_CONTENT_AREA,
    ContentArea,
    compute_layout,
    content_area_for,
    name_font_size,
    template_stem,
)


def test_worked_example_medium_logo():
    layout = compute_layout(ContentArea(60, 50, 550), logo_token=tokens.LOGO_MEDIUM)
    assert layout.logo.y == 50
    assert layout.name.y == 150
    assert layout.name_font_size == 44
    # Advances are unrounded: 150 + 44 * 1.15 + 8 and + 18 * 1.3 + 18
    assert layout.title.y == pytest.approx(208.6)
    assert layout.divider.y == pytest.approx(250.0)
    assert layout.title.y == pytest.approx(209, abs=1)
    assert layout.divider.y == pytest.approx(251, abs=1)


def test_logo_tier_follows_width():
    assert compute_layout(ContentArea(60, 50, 300)).logo.max_w == 60
    assert compute_layout(ContentArea(60, 50, 420)).logo.max_w == 80
    assert compute_layout(ContentArea(60, 50, 550)).logo.max_w == 100


def test_contact_rows():
    layout = compute_layout(ContentArea(60, 50, 500))
    first = layout.phone
    assert first.y == pytest.approx(layout.divider.y + tokens.DIVIDER_HEIGHT + tokens.DIVIDER_TO_CONTACT)
    assert first.x == 90
    assert first.width == 470
    assert first.dot_x == 72
    assert first.dot_y == pytest.approx(first.y + 16 * 0.45)
    ys = [row.y for row in layout.contacts]
    steps = [b - a for a, b in zip(ys, ys[1:])]
    assert steps == pytest.approx([30, 30, 30])


def test_divider_width_capped():
    assert compute_layout(ContentArea(60, 50, 300)).divider.width == 75
    assert compute_layout(ContentArea(60, 50, 560)).divider.width == 100


def test_heading_scale():
    assert name_font_size(500) == 44
    assert name_font_size(370) == round(44 * 370 / 500)
    assert name_font_size(200) == round(44 * 0.7)


def test_monotonic_rows_random_areas():
    rng = np.random.default_rng(5)
    for _ in range(300):
        area = ContentArea(
            left=float(rng.uniform(40, 500)),
            top=float(rng.uniform(30, 70)),
            width=float(rng.uniform(200, 1000)),
        )
        layout = compute_layout(area)
        ys = [layout.logo.y, layout.name.y, layout.title.y, layout.divider.y] + [r.y for r in layout.contacts]
        assert all(a < b for a, b in zip(ys, ys[1:]))
        assert layout.address.y < tokens.CARD_HEIGHT


@pytest.mark.parametrize(
    "template_id,expected",
    [
        ("bold_accent", "bold_accent"),
        ("bold_accent.svg", "bold_accent"),
        ("/templates/cards/split_curve.svg?v=2", "split_curve"),
        ("", ""),
        (None, ""),
    ],
)
def test_template_stem(template_id, expected):
    assert template_stem(template_id) == expected


def test_content_area_lookup():
    assert content_area_for("/templates/clean_professional.svg") == ContentArea(430, 60, 560)
    assert content_area_for("unknown_template") == DEFAULT_CONTENT_AREA
    assert content_area_for(None) == DEFAULT_CONTENT_AREA
