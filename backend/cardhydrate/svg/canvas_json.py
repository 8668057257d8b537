"""Canvas-state JSON loader — a saved ``{"objects": [...]}`` document to SceneNodes.

Object fields follow the canvas serialization (left/top/originX/originY,
scaleX/scaleY, angle, skewX/skewY, flipX/flipY). Children of a group are
positioned relative to the group center. Gradient / pattern fills (dicts)
become the complex-paint marker.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from cardhydrate.engine.scene import COMPLEX_PAINT, TEXT_TYPES, Matrix, NodeKind, SceneNode
from cardhydrate.engine.transform import multiply, translate, validate_matrix
from cardhydrate.errors import SceneParseError

logger = logging.getLogger(__name__)

_SHAPE_TYPES = {"rect", "circle", "ellipse", "line", "polyline", "polygon", "path"}
_GROUP_TYPES = {"group", "activeselection"}
_ORIGIN_OFFSET = {"left": 0.0, "top": 0.0, "center": 0.5, "right": 1.0, "bottom": 1.0}


def load_canvas_json(data: str | dict[str, Any]) -> tuple[SceneNode, ...]:
    """Parse a canvas-state document (JSON text or already-decoded dict)."""
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise SceneParseError(f"Malformed canvas JSON: {e}") from e

    if not isinstance(data, dict):
        raise SceneParseError("Canvas JSON must be an object")
    objects = data.get("objects")
    if not isinstance(objects, list):
        raise SceneParseError("Canvas JSON has no 'objects' list")

    nodes = tuple(_node(obj, i) for i, obj in enumerate(objects))
    logger.info("Loaded canvas JSON: %d top-level objects", len(nodes))
    return nodes


def _num(obj: dict[str, Any], key: str, default: float = 0.0) -> float:
    value = obj.get(key, default)
    if value is None:
        return default
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Non-numeric {key!r}: {value!r}") from e
    if not math.isfinite(result):
        raise SceneParseError(f"Non-finite {key!r}: {value!r}")
    return result


def _paint(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        return COMPLEX_PAINT
    return str(value)


def _center_matrix(obj: dict[str, Any], width: float, height: float) -> Matrix:
    """Matrix mapping the object's center-origin space into its parent."""
    if "transformMatrix" in obj and obj["transformMatrix"] is not None:
        return validate_matrix(obj["transformMatrix"])

    sx = _num(obj, "scaleX", 1.0) * (-1 if obj.get("flipX") else 1)
    sy = _num(obj, "scaleY", 1.0) * (-1 if obj.get("flipY") else 1)
    theta = math.radians(_num(obj, "angle"))
    cos, sin = math.cos(theta), math.sin(theta)

    # left/top name the origin point; walk from it to the center along the rotated axes
    ox = (0.5 - _ORIGIN_OFFSET.get(obj.get("originX", "left"), 0.0)) * width * abs(sx)
    oy = (0.5 - _ORIGIN_OFFSET.get(obj.get("originY", "top"), 0.0)) * height * abs(sy)
    cx = _num(obj, "left") + cos * ox - sin * oy
    cy = _num(obj, "top") + sin * ox + cos * oy

    m: Matrix = (cos, sin, -sin, cos, cx, cy)
    m = multiply(m, (sx, 0.0, 0.0, sy, 0.0, 0.0))
    m = multiply(m, (1.0, 0.0, math.tan(math.radians(_num(obj, "skewX"))), 1.0, 0.0, 0.0))
    m = multiply(m, (1.0, math.tan(math.radians(_num(obj, "skewY"))), 0.0, 1.0, 0.0, 0.0))
    return m


def _node(obj: Any, index: int) -> SceneNode:
    if not isinstance(obj, dict):
        raise SceneParseError(f"Object #{index} is not a JSON object")

    kind_name = str(obj.get("type", "")).lower()
    node_id = str(obj.get("id") or obj.get("name") or "")
    width = _num(obj, "width")
    height = _num(obj, "height")
    if kind_name == "circle" and not width:
        width = height = 2 * _num(obj, "radius")
    center = _center_matrix(obj, width, height)
    opacity = _num(obj, "opacity", 1.0)

    if kind_name in _GROUP_TYPES:
        children = obj.get("objects") or []
        if not isinstance(children, list):
            raise SceneParseError(f"Group #{index} 'objects' is not a list")
        return SceneNode(
            kind=NodeKind.GROUP,
            id=node_id,
            transform=center,
            width=width,
            height=height,
            opacity=opacity,
            children=tuple(_node(child, i) for i, child in enumerate(children)),
        )

    # Leaf boxes are drawn around their center
    transform = multiply(center, translate(-width / 2, -height / 2))
    common = dict(
        id=node_id,
        transform=transform,
        width=width,
        height=height,
        fill=_paint(obj.get("fill")),
        stroke=_paint(obj.get("stroke")),
        stroke_width=_num(obj, "strokeWidth"),
        opacity=opacity,
    )

    if kind_name in TEXT_TYPES:
        font_size = obj.get("fontSize")
        return SceneNode(
            kind=NodeKind.TEXT,
            text=str(obj.get("text", "")),
            font_size=_num(obj, "fontSize") if font_size is not None else None,
            font_weight=str(obj.get("fontWeight", "400")),
            font_family=str(obj.get("fontFamily", "")),
            text_anchor="middle" if obj.get("textAlign") == "center" else "start",
            **common,
        )
    if kind_name == "image":
        return SceneNode(kind=NodeKind.IMAGE, href=str(obj.get("src", "")), **common)

    if kind_name not in _SHAPE_TYPES:
        logger.debug("Treating unknown canvas type %r as a path", kind_name)

    geometry = _geometry(obj, kind_name, width, height)

    return SceneNode(
        kind=NodeKind.SHAPE,
        shape=kind_name if kind_name in _SHAPE_TYPES else "path",
        rx=_num(obj, "rx"),
        geometry=geometry,
        **common,
    )


def _geometry(obj: dict[str, Any], kind_name: str, width: float, height: float) -> dict[str, Any]:
    """Path data / points re-expressed in the node's top-left local box.

    Canvas paths and polygons are drawn at ``-pathOffset`` around the center.
    """
    offset_x = _num(obj, "pathOffsetX", width / 2) - width / 2
    offset_y = _num(obj, "pathOffsetY", height / 2) - height / 2
    if isinstance(obj.get("pathOffset"), dict):
        offset_x = _num(obj["pathOffset"], "x", width / 2) - width / 2
        offset_y = _num(obj["pathOffset"], "y", height / 2) - height / 2

    if kind_name == "path" and obj.get("path") is not None:
        path = obj["path"]
        if isinstance(path, list):
            path = " ".join(" ".join(str(part) for part in cmd) for cmd in path if isinstance(cmd, list))
        return {"d": str(path), "offset": [offset_x, offset_y]}

    if kind_name in ("polygon", "polyline") and isinstance(obj.get("points"), list):
        points = [[_num(p, "x"), _num(p, "y")] for p in obj["points"] if isinstance(p, dict)]
        return {"points": [[x - offset_x, y - offset_y] for x, y in points]}

    return {}
