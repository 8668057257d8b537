"""Write SVG markup from a hydrated object list."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape

from cardhydrate.engine import tokens
from cardhydrate.engine.flatten import place_node
from cardhydrate.engine.scene import COMPLEX_PAINT, Matrix, RenderableObject, SceneNode
from cardhydrate.engine.transform import multiply, object_matrix, translate


def serialize_svg(
    objects: Sequence[RenderableObject],
    canvas_w: float = tokens.CARD_WIDTH,
    canvas_h: float = tokens.CARD_HEIGHT,
    title: str = "",
) -> str:
    """Generate SVG markup for objects in drawing order."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="0 0 {_fmt(canvas_w)} {_fmt(canvas_h)}" width="{_fmt(canvas_w)}"'
        f' height="{_fmt(canvas_h)}" xmlns="http://www.w3.org/2000/svg">',
    ]
    if title:
        lines.append(f"  <title>{escape(title)}</title>")

    for obj in objects:
        lines.extend(_object_lines(obj, indent="  "))

    lines.append("</svg>")
    return "\n".join(lines)


def _fmt(value: float) -> str:
    # + 0.0 folds -0.0 into 0.0
    return format(round(float(value), 3) + 0.0, "g")


def _matrix_attr(m: Matrix) -> str:
    return "matrix(" + " ".join(_fmt(v) for v in m) + ")"


def _paint(value: str | None) -> str:
    if value is None or value == COMPLEX_PAINT:
        return "none"
    return escape(value)


def _object_matrix(obj: RenderableObject) -> Matrix:
    m = object_matrix(obj)
    dx = -obj.width / 2 if obj.origin_x == "center" else 0.0
    dy = -obj.height / 2 if obj.origin_y == "center" else 0.0
    if dx or dy:
        m = multiply(m, translate(dx, dy))
    return m


def _object_lines(obj: RenderableObject, indent: str) -> list[str]:
    matrix = _object_matrix(obj)
    id_attr = f' id="{escape(obj.id)}"' if obj.id else ""
    opacity = f' opacity="{_fmt(obj.opacity)}"' if obj.opacity != 1 else ""

    if obj.source is not None:
        lines = [f'{indent}<g{id_attr} transform="{_matrix_attr(matrix)}"{opacity}>']
        lines.extend(_node_lines(obj.source.children, indent + "  "))
        lines.append(f"{indent}</g>")
        return lines

    return [f"{indent}{_element(obj, matrix, id_attr + opacity)}"]


def _node_lines(nodes: Sequence[SceneNode], indent: str) -> list[str]:
    lines: list[str] = []
    for node in nodes:
        if node.is_group:
            id_attr = f' id="{escape(node.id)}"' if node.id else ""
            opacity = f' opacity="{_fmt(node.opacity)}"' if node.opacity != 1 else ""
            lines.append(f'{indent}<g{id_attr} transform="{_matrix_attr(node.transform)}"{opacity}>')
            lines.extend(_node_lines(node.children, indent + "  "))
            lines.append(f"{indent}</g>")
        else:
            lines.extend(_object_lines(place_node(node, node.transform), indent))
    return lines


def _element(obj: RenderableObject, matrix: Matrix, extra: str) -> str:
    paint = f' fill="{_paint(obj.fill)}"'
    if obj.stroke and obj.stroke_width:
        paint += f' stroke="{_paint(obj.stroke)}" stroke-width="{_fmt(obj.stroke_width)}"'
    transform = f' transform="{_matrix_attr(matrix)}"'
    w, h = obj.width, obj.height

    if obj.is_text:
        anchor = ' text-anchor="middle"' if obj.text_align == "center" else ""
        x = w / 2 if obj.text_align == "center" else 0.0
        size = obj.font_size or tokens.CONTACT_TYPE.font_size
        spacing = f' letter-spacing="{_fmt(obj.char_spacing / 1000 * size)}"' if obj.char_spacing else ""
        family = escape(obj.font_family or tokens.FONT_FAMILY)
        return (
            f'<text{extra}{transform} x="{_fmt(x)}" y="{_fmt(size)}" font-family="{family}"'
            f' font-size="{_fmt(size)}" font-weight="{escape(obj.font_weight)}"{anchor}{spacing}{paint}>'
            f"{escape(obj.text)}</text>"
        )
    if obj.type == "image":
        return (
            f'<image{extra}{transform} width="{_fmt(w)}" height="{_fmt(h)}"'
            f' href="{escape(obj.src)}" preserveAspectRatio="xMidYMid meet" />'
        )
    if obj.type == "circle":
        r = obj.radius or min(w, h) / 2
        return f'<circle{extra}{transform} cx="{_fmt(r)}" cy="{_fmt(r)}" r="{_fmt(r)}"{paint} />'
    if obj.type == "ellipse":
        return (
            f'<ellipse{extra}{transform} cx="{_fmt(w / 2)}" cy="{_fmt(h / 2)}"'
            f' rx="{_fmt(w / 2)}" ry="{_fmt(h / 2)}"{paint} />'
        )
    if obj.type in ("line", "polyline", "polygon") and obj.geometry.get("points"):
        points = obj.geometry["points"]
        if obj.type == "line" and len(points) >= 2:
            (x1, y1), (x2, y2) = points[0], points[1]
            return (
                f'<line{extra}{transform} x1="{_fmt(x1)}" y1="{_fmt(y1)}"'
                f' x2="{_fmt(x2)}" y2="{_fmt(y2)}"{paint} />'
            )
        pts = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in points)
        return f'<{obj.type}{extra}{transform} points="{pts}"{paint} />'
    if obj.geometry.get("d"):
        ox, oy = obj.geometry.get("offset", [0.0, 0.0])
        shifted = multiply(matrix, translate(-ox, -oy))
        return f'<path{extra} transform="{_matrix_attr(shifted)}" d="{escape(obj.geometry["d"])}"{paint} />'

    rx = f' rx="{_fmt(obj.rx)}"' if obj.rx else ""
    return f'<rect{extra}{transform} width="{_fmt(w)}" height="{_fmt(h)}"{rx}{paint} />'
