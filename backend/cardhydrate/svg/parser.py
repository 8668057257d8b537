"""SVG parser — template markup to a SceneNode tree.

Facade over xml.etree + svgpathtools. Each shape's authored position is folded
into its local transform so every node's box starts at its own (0, 0).
Presentation attributes (fill, stroke, font-*) are inherited down to leaves.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

import numpy as np
from svgpathtools import parse_path

from cardhydrate.engine.scene import COMPLEX_PAINT, IDENTITY, Matrix, NodeKind, SceneNode
from cardhydrate.engine.text import TEXT_LINE_HEIGHT, estimate_width
from cardhydrate.engine.transform import multiply, parse_transform, translate
from cardhydrate.errors import SceneParseError

logger = logging.getLogger(__name__)

_SVG_NS = "{http://www.w3.org/2000/svg}"
_XLINK_HREF = "{http://www.w3.org/1999/xlink}href"

# Non-rendering containers, skipped with their content.
_SKIP_TAGS = {
    "defs", "title", "desc", "metadata", "style", "clipPath", "mask",
    "linearGradient", "radialGradient", "pattern", "symbol", "marker", "filter",
}
_GROUP_TAGS = {"g", "a", "svg", "switch"}
_SHAPE_TAGS = {"rect", "circle", "ellipse", "line", "polyline", "polygon", "path"}

_INHERITED = ("fill", "stroke", "stroke-width", "font-size", "font-weight", "font-family", "text-anchor")

_STYLE_DECL_RE = re.compile(r"\s*([\w-]+)\s*:\s*([^;]+)")
_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px|pt)?\s*$")
_POINTS_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Text box top sits one em above the baseline.
_DEFAULT_FONT_SIZE = 16.0
_DEFAULT_FILL = "#000000"


@dataclass(frozen=True)
class ParsedScene:
    nodes: tuple[SceneNode, ...]
    width: float
    height: float
    view_box: tuple[float, float, float, float] | None = None


def parse_svg(svg_text: str) -> ParsedScene:
    """Parse template markup. Raises SceneParseError for malformed input."""
    try:
        root = ET.fromstring(svg_text.strip())
    except ET.ParseError as e:
        raise SceneParseError(f"Malformed SVG markup: {e}") from e

    if _local(root.tag) != "svg":
        raise SceneParseError(f"Root element is <{_local(root.tag)}>, expected <svg>")

    view_box = _parse_view_box(root.get("viewBox"))
    width = _length(root.get("width"), view_box[2] if view_box else 0.0)
    height = _length(root.get("height"), view_box[3] if view_box else 0.0)

    inherited = _presentation(root, {"fill": _DEFAULT_FILL})
    nodes = tuple(_children(root, inherited))

    if view_box and (view_box[0] or view_box[1]):
        nodes = (SceneNode(
            kind=NodeKind.GROUP,
            transform=translate(-view_box[0], -view_box[1]),
            children=nodes,
        ),)

    logger.info("Parsed SVG: %d top-level nodes, canvas %.0f×%.0f", len(nodes), width, height)
    return ParsedScene(nodes=nodes, width=width, height=height, view_box=view_box)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _parse_view_box(value: str | None) -> tuple[float, float, float, float] | None:
    if not value:
        return None
    parts = _POINTS_RE.findall(value)
    if len(parts) != 4:
        raise SceneParseError(f"Malformed viewBox {value!r}")
    return tuple(float(p) for p in parts)  # type: ignore[return-value]


def _length(value: str | None, default: float = 0.0) -> float:
    if value is None or not value.strip():
        return default
    m = _NUMBER_RE.match(value)
    if not m:
        if value.strip().endswith("%"):
            return default
        raise SceneParseError(f"Malformed length {value!r}")
    return float(m.group(1))


def _presentation(el: ET.Element, parent: dict[str, str]) -> dict[str, str]:
    """Inherited presentation attributes; inline style beats attributes."""
    attrs = dict(parent)
    for name in _INHERITED:
        if el.get(name) is not None:
            attrs[name] = el.get(name, "").strip()
    for m in _STYLE_DECL_RE.finditer(el.get("style", "")):
        if m.group(1) in _INHERITED or m.group(1) == "opacity":
            attrs[m.group(1)] = m.group(2).strip()
    return attrs


def _paint(value: str | None) -> str | None:
    if value is None:
        return None
    if value.startswith("url("):
        return COMPLEX_PAINT
    return value


def _opacity(el: ET.Element) -> float:
    style = dict((m.group(1), m.group(2).strip()) for m in _STYLE_DECL_RE.finditer(el.get("style", "")))
    raw = style.get("opacity", el.get("opacity"))
    return _length(raw, 1.0) if raw is not None else 1.0


def _children(el: ET.Element, inherited: dict[str, str]) -> list[SceneNode]:
    nodes: list[SceneNode] = []
    for child in el:
        if not isinstance(child.tag, str):
            continue  # comments, processing instructions
        node = _node(child, inherited)
        if node is not None:
            nodes.append(node)
    return nodes


def _node(el: ET.Element, parent_attrs: dict[str, str]) -> SceneNode | None:
    tag = _local(el.tag)
    if tag in _SKIP_TAGS:
        return None

    attrs = _presentation(el, parent_attrs)
    transform = parse_transform(el.get("transform"))
    node_id = el.get("id", "")

    if tag in _GROUP_TAGS:
        if tag == "svg":
            transform = multiply(transform, translate(_length(el.get("x")), _length(el.get("y"))))
        return SceneNode(
            kind=NodeKind.GROUP,
            id=node_id,
            transform=transform,
            fill=_paint(el.get("fill")),
            opacity=_opacity(el),
            children=tuple(_children(el, attrs)),
        )
    if tag in _SHAPE_TAGS:
        return _shape(el, tag, node_id, transform, attrs)
    if tag == "text":
        return _text(el, node_id, transform, attrs)
    if tag == "image":
        return _image(el, node_id, transform)

    logger.debug("Skipping unsupported <%s>", tag)
    return None


def _shape(el: ET.Element, tag: str, node_id: str, transform: Matrix, attrs: dict[str, str]) -> SceneNode:
    geometry: dict[str, object] = {}
    rx = 0.0

    if tag == "rect":
        x, y = _length(el.get("x")), _length(el.get("y"))
        width, height = _length(el.get("width")), _length(el.get("height"))
        rx = _length(el.get("rx"), _length(el.get("ry")))
    elif tag == "circle":
        r = _length(el.get("r"))
        x, y = _length(el.get("cx")) - r, _length(el.get("cy")) - r
        width = height = 2 * r
    elif tag == "ellipse":
        rx_, ry_ = _length(el.get("rx")), _length(el.get("ry"))
        x, y = _length(el.get("cx")) - rx_, _length(el.get("cy")) - ry_
        width, height = 2 * rx_, 2 * ry_
    elif tag == "line":
        pts = np.array([
            [_length(el.get("x1")), _length(el.get("y1"))],
            [_length(el.get("x2")), _length(el.get("y2"))],
        ])
        x, y, width, height, local = _points_box(pts)
        geometry["points"] = local
    elif tag in ("polygon", "polyline"):
        coords = [float(v) for v in _POINTS_RE.findall(el.get("points", ""))]
        if len(coords) % 2:
            raise SceneParseError(f"Odd coordinate count in <{tag}> points")
        pts = np.array(coords, dtype=np.float64).reshape(-1, 2) if coords else np.zeros((0, 2))
        x, y, width, height, local = _points_box(pts)
        geometry["points"] = local
    else:
        d = el.get("d", "")
        x, y, width, height = _path_box(d)
        geometry["d"] = d
        geometry["offset"] = [x, y]

    return SceneNode(
        kind=NodeKind.SHAPE,
        id=node_id,
        shape=tag,
        transform=multiply(transform, translate(x, y)),
        width=width,
        height=height,
        fill=_paint(attrs.get("fill")),
        stroke=_paint(attrs.get("stroke")),
        stroke_width=_length(attrs.get("stroke-width"), 1.0 if attrs.get("stroke") else 0.0),
        opacity=_opacity(el),
        rx=rx,
        geometry=geometry,
    )


def _points_box(pts: np.ndarray) -> tuple[float, float, float, float, list[list[float]]]:
    if len(pts) == 0:
        return 0.0, 0.0, 0.0, 0.0, []
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    local = (pts - mins).round(4).tolist()
    return float(mins[0]), float(mins[1]), float(maxs[0] - mins[0]), float(maxs[1] - mins[1]), local


def _path_box(d: str) -> tuple[float, float, float, float]:
    if not d.strip():
        return 0.0, 0.0, 0.0, 0.0
    try:
        path = parse_path(d)
    except Exception as e:
        raise SceneParseError(f"Malformed path data: {e}") from e
    if len(path) == 0:
        return 0.0, 0.0, 0.0, 0.0
    xmin, xmax, ymin, ymax = path.bbox()
    return float(xmin), float(ymin), float(xmax - xmin), float(ymax - ymin)


def _text(el: ET.Element, node_id: str, transform: Matrix, attrs: dict[str, str]) -> SceneNode:
    content = " ".join("".join(el.itertext()).split())
    authored_size = attrs.get("font-size")
    font_size = _length(authored_size) if authored_size else None
    size = font_size or _DEFAULT_FONT_SIZE

    tspan = el.find(f"{_SVG_NS}tspan")
    if tspan is None:
        tspan = el.find("tspan")
    x = _length(el.get("x") or (tspan.get("x") if tspan is not None else None))
    y = _length(el.get("y") or (tspan.get("y") if tspan is not None else None))

    anchor = attrs.get("text-anchor", "start")
    width = estimate_width(content, size)
    if anchor == "middle":
        x -= width / 2
    elif anchor == "end":
        x -= width

    return SceneNode(
        kind=NodeKind.TEXT,
        id=node_id,
        transform=multiply(transform, translate(x, y - size)),
        width=width,
        height=size * TEXT_LINE_HEIGHT,
        fill=_paint(attrs.get("fill")),
        stroke=_paint(attrs.get("stroke")),
        opacity=_opacity(el),
        text=content,
        font_size=font_size,
        font_weight=attrs.get("font-weight", "400"),
        font_family=attrs.get("font-family", "").strip("'\""),
        text_anchor=anchor,
    )


def _image(el: ET.Element, node_id: str, transform: Matrix) -> SceneNode:
    x, y = _length(el.get("x")), _length(el.get("y"))
    return SceneNode(
        kind=NodeKind.IMAGE,
        id=node_id,
        transform=multiply(transform, translate(x, y)),
        width=_length(el.get("width")),
        height=_length(el.get("height")),
        opacity=_opacity(el),
        href=el.get("href") or el.get(_XLINK_HREF, ""),
    )


def iter_nodes(nodes: tuple[SceneNode, ...], parent: Matrix = IDENTITY):
    """Depth-first (node, absolute matrix) pairs; handy for inspection and tests."""
    for node in nodes:
        matrix = multiply(parent, node.transform)
        yield node, matrix
        if node.children:
            yield from iter_nodes(node.children, matrix)
