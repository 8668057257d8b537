"""Tests for the canvas-state JSON loader."""

from __future__ import annotations

import pytest

from cardhydrate.engine.scene import COMPLEX_PAINT, NodeKind
from cardhydrate.engine.transform import apply_to_point, multiply
from cardhydrate.errors import SceneParseError
from cardhydrate.svg.canvas_json import load_canvas_json


def test_rect_top_left_origin():
    (rect,) = load_canvas_json({"objects": [
        {"type": "rect", "id": "#bg", "left": 10, "top": 20, "width": 100, "height": 50, "fill": "#fff"},
    ]})
    assert rect.kind is NodeKind.SHAPE
    assert rect.id == "#bg"
    assert apply_to_point(rect.transform, 0, 0) == pytest.approx((10, 20))
    assert apply_to_point(rect.transform, 100, 50) == pytest.approx((110, 70))


def test_center_origin_and_scale():
    (rect,) = load_canvas_json({"objects": [
        {"type": "rect", "left": 60, "top": 40, "width": 20, "height": 10,
         "originX": "center", "originY": "center", "scaleX": 2, "scaleY": 2},
    ]})
    assert apply_to_point(rect.transform, 0, 0) == pytest.approx((40, 30))
    assert apply_to_point(rect.transform, 20, 10) == pytest.approx((80, 50))


def test_rotation_about_origin_point():
    (rect,) = load_canvas_json({"objects": [
        {"type": "rect", "left": 100, "top": 100, "width": 40, "height": 20, "angle": 90},
    ]})
    # Rotating about the top-left origin keeps that corner in place
    assert apply_to_point(rect.transform, 0, 0) == pytest.approx((100, 100))
    assert apply_to_point(rect.transform, 40, 0) == pytest.approx((100, 140))


def test_group_children_relative_to_center():
    (group,) = load_canvas_json({"objects": [
        {"type": "group", "id": "#lock_art", "left": 100, "top": 100, "width": 200, "height": 100, "objects": [
            {"type": "rect", "left": -100, "top": -50, "width": 10, "height": 10, "fill": "#000"},
        ]},
    ]})
    assert group.is_group
    child = group.children[0]
    absolute = multiply(group.transform, child.transform)
    assert apply_to_point(absolute, 0, 0) == pytest.approx((100, 100))


def test_text_and_image():
    text, image = load_canvas_json({"objects": [
        {"type": "textbox", "id": "#name", "text": "Jane", "fontSize": 32, "fontWeight": "bold",
         "textAlign": "center", "width": 200, "height": 40},
        {"type": "image", "id": "#logo", "src": "logo.png", "width": 64, "height": 64},
    ]})
    assert text.kind is NodeKind.TEXT
    assert (text.text, text.font_size, text.font_weight, text.text_anchor) == ("Jane", 32, "bold", "middle")
    assert image.kind is NodeKind.IMAGE
    assert image.href == "logo.png"


def test_gradient_fill_is_complex():
    (rect,) = load_canvas_json('{"objects": [{"type": "rect", "fill": {"type": "linear", "colorStops": []}}]}')
    assert rect.fill == COMPLEX_PAINT


def test_path_geometry_in_local_box():
    (path,) = load_canvas_json({"objects": [
        {"type": "path", "width": 100, "height": 50, "pathOffset": {"x": 60, "y": 45},
         "path": [["M", 10, 20], ["L", 110, 20], ["L", 110, 70], ["z"]]},
    ]})
    assert path.geometry["d"] == "M 10 20 L 110 20 L 110 70 z"
    assert path.geometry["offset"] == [10, 20]


@pytest.mark.parametrize(
    "doc",
    ["{not json", "[]", '{"objects": 3}', {"objects": [1]}, {"objects": [{"type": "rect", "left": "x"}]}],
)
def test_malformed_documents_raise(doc):
    with pytest.raises(SceneParseError):
        load_canvas_json(doc)
