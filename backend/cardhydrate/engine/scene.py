"""Scene data model — source nodes in, renderable records out.

SceneNode trees come from a loader (svg/parser.py, svg/canvas_json.py) and are
never mutated. Every hydration pass returns fresh RenderableObject values;
updates go through ``dataclasses.replace``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

# 2D affine matrix (a, b, c, d, e, f):  x' = a*x + c*y + e,  y' = b*x + d*y + f
Matrix = tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# Marker for gradient / pattern / otherwise non-solid paint.
COMPLEX_PAINT = "complex"

TEXT_TYPES = frozenset({"text", "textbox", "i-text"})


class NodeKind(str, enum.Enum):
    GROUP = "group"
    TEXT = "text"
    SHAPE = "shape"
    IMAGE = "image"


@dataclass(frozen=True)
class SceneNode:
    """One node of the parsed template tree.

    ``transform`` maps the node's local box (origin at its top-left corner,
    extent ``width`` x ``height``) into the parent's coordinate space.
    """

    kind: NodeKind
    id: str = ""
    transform: Matrix = IDENTITY
    # rect, circle, ellipse, path, polygon, polyline, line (shapes only)
    shape: str = ""
    width: float = 0.0
    height: float = 0.0
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 0.0
    opacity: float = 1.0
    # Text
    text: str = ""
    font_size: float | None = None
    font_weight: str = "400"
    font_family: str = ""
    text_anchor: str = "start"
    # Image
    href: str = ""
    rx: float = 0.0
    # Shape-specific geometry in local box coordinates (d, points, x1, ...)
    geometry: dict[str, Any] = field(default_factory=dict, hash=False)
    children: tuple["SceneNode", ...] = ()

    @property
    def is_group(self) -> bool:
        return self.kind is NodeKind.GROUP


@dataclass(frozen=True)
class RenderableObject:
    """Final positioned unit handed to a canvas-like renderer."""

    id: str
    type: str
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    skew_x: float = 0.0
    skew_y: float = 0.0
    angle: float = 0.0
    origin_x: str = "left"
    origin_y: str = "top"
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 0.0
    opacity: float = 1.0
    # Text
    text: str = ""
    font_size: float | None = None
    font_weight: str = "400"
    font_family: str = ""
    char_spacing: float = 0.0
    text_align: str = "left"
    # Rect corner radius / circle radius
    rx: float = 0.0
    radius: float = 0.0
    # Image source
    src: str = ""
    locked: bool = False
    geometry: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    # Recolored subtree for opaque locked groups, rendered as one unit
    source: SceneNode | None = field(default=None, compare=False)

    @property
    def is_text(self) -> bool:
        return self.type in TEXT_TYPES

    @property
    def scaled_width(self) -> float:
        return self.width * self.scale_x

    @property
    def scaled_height(self) -> float:
        return self.height * self.scale_y

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Axis-aligned (x, y, w, h) honoring the object's origin."""
        w, h = self.scaled_width, self.scaled_height
        x = self.left - w / 2 if self.origin_x == "center" else self.left
        y = self.top - h / 2 if self.origin_y == "center" else self.top
        return (x, y, w, h)

    def to_dict(self) -> dict[str, Any]:
        data = {
            k: v for k, v in self.__dict__.items()
            if k not in ("source", "geometry")
        }
        data["geometry"] = dict(self.geometry)
        return data


@dataclass(frozen=True)
class TextFieldMetadata:
    """A text field deferred during flatten, consumed by the text hydrator."""

    id: str
    transform: Matrix
    original_text: str
    node: SceneNode


@dataclass(frozen=True)
class LogoPlaceholder:
    """A ``#logo`` node deferred during flatten, resolved asynchronously."""

    node: SceneNode
    id: str
    transform: Matrix
