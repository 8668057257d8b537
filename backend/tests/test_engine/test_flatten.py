"""Tests for the flatten pass."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from cardhydrate.engine.contrast import detect_background
from cardhydrate.engine.flatten import flatten, iter_group_leaves
from cardhydrate.engine.palette import Palette
from cardhydrate.engine.scene import NodeKind, SceneNode
from cardhydrate.engine.transform import Decomposition, apply_to_point, compose, object_matrix, translate

PALETTE = Palette(primary_text="#1e293b", background="#ffffff", text="#334155")


def _random_affine(rng: np.random.Generator):
    return compose(Decomposition(
        translate_x=float(rng.uniform(-100, 100)),
        translate_y=float(rng.uniform(-100, 100)),
        scale_x=float(rng.uniform(0.3, 2.5)),
        scale_y=float(rng.choice([-1, 1]) * rng.uniform(0.3, 2.5)),
        skew_x=float(rng.uniform(-40, 40)),
        skew_y=0.0,
        angle=float(rng.uniform(-180, 180)),
    ))


def _rect(id_: str = "", transform=translate(0, 0), w=40.0, h=20.0, fill="#ff0000") -> SceneNode:
    return SceneNode(kind=NodeKind.SHAPE, shape="rect", id=id_, transform=transform, width=w, height=h, fill=fill)


def _group(id_: str, *children: SceneNode, transform=translate(0, 0)) -> SceneNode:
    return SceneNode(kind=NodeKind.GROUP, id=id_, transform=transform, children=children)


def test_nested_transform_fidelity_random():
    rng = np.random.default_rng(42)
    corners = [(0, 0), (40, 0), (0, 20), (40, 20)]
    for _ in range(150):
        mats = [_random_affine(rng) for _ in range(4)]
        leaf = _rect(transform=mats[3])
        tree = _group("", _group("", _group("", leaf, transform=mats[2]), transform=mats[1]), transform=mats[0])

        obj = flatten([tree], PALETTE).objects[0]
        placed = object_matrix(obj)
        for x, y in corners:
            expected = (x, y)
            for m in reversed(mats):
                expected = apply_to_point(m, *expected)
            assert apply_to_point(placed, x, y) == pytest.approx(expected, abs=1e-6)


def test_plain_shapes_are_palette_mapped():
    objects = flatten([_rect("deco", fill="#fafafa"), _rect("", fill="#222222")], PALETTE).objects
    assert [o.fill for o in objects] == ["#ffffff", "#1e293b"]


def test_locked_group_stays_one_unit():
    group = _group(
        "#lock_pattern",
        _rect(fill="#000000"),
        _group("", _rect(transform=translate(10, 10), fill="#fefefe")),
        transform=translate(100, 50),
    )
    objects = flatten([group], PALETTE).objects
    assert len(objects) == 1
    obj = objects[0]
    assert obj.locked
    assert (obj.left, obj.top) == (100, 50)
    leaves = list(iter_group_leaves(obj))
    assert [leaf.fill for leaf in leaves] == ["#1e293b", "#ffffff"]
    assert leaves[1].bounds == pytest.approx((110, 60, 40, 20))
    assert all(leaf.locked for leaf in leaves)


def test_text_fields_and_logo_deferred():
    text = SceneNode(kind=NodeKind.TEXT, id="#name", text="Jane", transform=translate(5, 6))
    result = flatten([_group("wrap", text, _rect("#logo_main"))], PALETTE)
    assert result.objects == []
    assert [t.id for t in result.text_fields] == ["#name"]
    assert result.text_fields[0].transform == translate(5, 6)
    assert [p.id for p in result.logo_placeholders] == ["#logo_main"]


def test_legacy_elements_dropped_in_standardized_mode():
    nodes = [
        _rect("#color_accent_phone_icon"),
        _rect("#color_accent_divider"),
        _rect("#deco_section_line"),
        _rect("#color_accent_badge"),
    ]
    ids = [o.id for o in flatten(nodes, PALETTE).objects]
    assert ids == ["#color_accent_badge"]

    preview_ids = [o.id for o in flatten(nodes, PALETTE, standardized=False).objects]
    assert preview_ids == [n.id for n in nodes]


def test_preview_mode_places_native_text():
    text = SceneNode(
        kind=NodeKind.TEXT, id="#title", text="Designer", font_size=18, width=80, height=21,
        transform=translate(60, 220),
    )
    result = flatten([text], PALETTE, standardized=False)
    assert result.text_fields == []
    obj = result.objects[0]
    assert obj.text == "Designer"
    assert (obj.left, obj.top) == (60, 220)
    assert obj.fill == "#334155"


def test_color_prefixed_shapes_remapped():
    objects = flatten([_rect("#color_primary_band", fill="#000000")], PALETTE).objects
    assert objects[0].fill == "#ffffff"


def test_group_opacity_multiplies_into_children():
    inner = replace(_group("", replace(_rect("#deco"), opacity=0.8)), opacity=0.5)
    outer = replace(_group("", inner), opacity=0.5)
    (obj,) = flatten([outer], PALETTE).objects
    assert obj.opacity == pytest.approx(0.2)


def test_hidden_group_is_not_a_background():
    card = _rect("#card", w=1050, h=600, fill="#ffffff")
    hidden = replace(_group("", _rect("#panel", w=1050, h=600, fill="#000000")), opacity=0.0)
    objects = flatten([card, hidden], PALETTE).objects
    assert [o.opacity for o in objects] == [1.0, 0.0]
    assert detect_background(objects, 100, 100, 20, 20) == "#ffffff"


def test_locked_group_leaves_carry_nested_opacity():
    hidden = replace(_group("", _rect(w=1050, h=600, fill="#000000")), opacity=0.0)
    locked = replace(_group("#bg_main", _rect(w=1050, h=600, fill="#ffffff"), hidden), opacity=0.5)
    (obj,) = flatten([locked], PALETTE).objects
    leaves = list(iter_group_leaves(obj))
    assert [leaf.opacity for leaf in leaves] == [0.5, 0.0]
    assert detect_background([obj], 100, 100, 20, 20) == "#ffffff"
