"""Transform Compositor — affine composition and QR-style decomposition.

Matrices use the SVG/canvas 6-tuple convention (a, b, c, d, e, f). Composition
is always parent-then-local: ``absolute = parent @ local``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace

import numpy as np
from numpy.typing import NDArray

from cardhydrate.engine.scene import IDENTITY, Matrix, RenderableObject, SceneNode
from cardhydrate.errors import SceneParseError

# Degenerate-scale guard: below this the x-axis collapsed and rotation is undefined.
_EPSILON = 1e-12

_TRANSFORM_FN_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")
_ARGS_SPLIT_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class Decomposition:
    translate_x: float
    translate_y: float
    scale_x: float
    scale_y: float
    skew_x: float
    skew_y: float
    angle: float


def to_array(m: Matrix) -> NDArray[np.float64]:
    a, b, c, d, e, f = m
    return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def from_array(arr: NDArray[np.float64]) -> Matrix:
    return (
        float(arr[0, 0]), float(arr[1, 0]),
        float(arr[0, 1]), float(arr[1, 1]),
        float(arr[0, 2]), float(arr[1, 2]),
    )


def multiply(parent: Matrix, local: Matrix) -> Matrix:
    """Return ``parent x local`` (apply local first, then parent)."""
    return from_array(to_array(parent) @ to_array(local))


def compose_absolute(node: SceneNode, parent: Matrix = IDENTITY) -> Matrix:
    """Absolute matrix of ``node`` given its parent's absolute matrix."""
    return multiply(parent, node.transform)


def apply_to_point(m: Matrix, x: float, y: float) -> tuple[float, float]:
    a, b, c, d, e, f = m
    return (a * x + c * y + e, b * x + d * y + f)


def decompose(m: Matrix) -> Decomposition:
    """QR-decompose into translate / rotate / scale / skewX (skewY is always 0).

    Inverse of ``compose`` below: ``compose(decompose(m)) == m`` for any
    non-degenerate matrix, including reflections (negative scale_y).
    """
    a, b, c, d, e, f = m
    denom = a * a + b * b
    if denom < _EPSILON:
        # x-axis collapsed; report the y-axis as the only surviving scale
        scale_y = math.hypot(c, d)
        return Decomposition(e, f, 0.0, scale_y, 0.0, 0.0, 0.0)
    angle = math.atan2(b, a)
    scale_x = math.sqrt(denom)
    scale_y = (a * d - c * b) / scale_x
    skew_x = math.atan2(a * c + b * d, denom)
    return Decomposition(
        translate_x=e,
        translate_y=f,
        scale_x=scale_x,
        scale_y=scale_y,
        skew_x=math.degrees(skew_x),
        skew_y=0.0,
        angle=math.degrees(angle),
    )


def compose(dec: Decomposition) -> Matrix:
    """Rebuild a matrix: translate * rotate * scale * skewX * skewY."""
    theta = math.radians(dec.angle)
    cos, sin = math.cos(theta), math.sin(theta)
    translate = np.array([[1, 0, dec.translate_x], [0, 1, dec.translate_y], [0, 0, 1]], dtype=np.float64)
    rotate = np.array([[cos, -sin, 0], [sin, cos, 0], [0, 0, 1]], dtype=np.float64)
    scale = np.diag([dec.scale_x, dec.scale_y, 1.0])
    skew_x = np.array([[1, math.tan(math.radians(dec.skew_x)), 0], [0, 1, 0], [0, 0, 1]], dtype=np.float64)
    skew_y = np.array([[1, 0, 0], [math.tan(math.radians(dec.skew_y)), 1, 0], [0, 0, 1]], dtype=np.float64)
    return from_array(translate @ rotate @ scale @ skew_x @ skew_y)


def apply_absolute(obj: RenderableObject, m: Matrix) -> RenderableObject:
    """Return ``obj`` placed by the decomposed absolute matrix."""
    dec = decompose(m)
    return replace(
        obj,
        left=dec.translate_x,
        top=dec.translate_y,
        scale_x=dec.scale_x,
        scale_y=dec.scale_y,
        skew_x=dec.skew_x,
        skew_y=dec.skew_y,
        angle=dec.angle,
    )


def object_matrix(obj: RenderableObject) -> Matrix:
    """The absolute matrix implied by a placed object's decomposed fields."""
    return compose(Decomposition(
        obj.left, obj.top, obj.scale_x, obj.scale_y, obj.skew_x, obj.skew_y, obj.angle,
    ))


def translate(tx: float, ty: float = 0.0) -> Matrix:
    return (1.0, 0.0, 0.0, 1.0, tx, ty)


def parse_transform(value: str | None) -> Matrix:
    """Parse an SVG ``transform`` attribute into a single matrix.

    Raises SceneParseError for malformed input.
    """
    if not value or not value.strip():
        return IDENTITY

    result = IDENTITY
    consumed = 0
    for match in _TRANSFORM_FN_RE.finditer(value):
        gap = value[consumed:match.start()]
        if gap.strip(" \t\n,"):
            raise SceneParseError(f"Malformed transform: {value!r}")
        consumed = match.end()
        name = match.group(1)
        raw = match.group(2).strip()
        try:
            args = [float(x) for x in _ARGS_SPLIT_RE.split(raw) if x]
        except ValueError as e:
            raise SceneParseError(f"Malformed transform arguments in {value!r}") from e
        result = multiply(result, _transform_fn(name, args, value))

    if value[consumed:].strip(" \t\n,"):
        raise SceneParseError(f"Malformed transform: {value!r}")
    return result


def _transform_fn(name: str, args: list[float], source: str) -> Matrix:
    n = len(args)
    if name == "matrix" and n == 6:
        return (args[0], args[1], args[2], args[3], args[4], args[5])
    if name == "translate" and n in (1, 2):
        return translate(args[0], args[1] if n == 2 else 0.0)
    if name == "scale" and n in (1, 2):
        sx = args[0]
        sy = args[1] if n == 2 else sx
        return (sx, 0.0, 0.0, sy, 0.0, 0.0)
    if name == "rotate" and n in (1, 3):
        theta = math.radians(args[0])
        cos, sin = math.cos(theta), math.sin(theta)
        rot: Matrix = (cos, sin, -sin, cos, 0.0, 0.0)
        if n == 3:
            cx, cy = args[1], args[2]
            return multiply(multiply(translate(cx, cy), rot), translate(-cx, -cy))
        return rot
    if name == "skewX" and n == 1:
        return (1.0, 0.0, math.tan(math.radians(args[0])), 1.0, 0.0, 0.0)
    if name == "skewY" and n == 1:
        return (1.0, math.tan(math.radians(args[0])), 0.0, 1.0, 0.0, 0.0)
    raise SceneParseError(f"Invalid {name}() with {n} arguments in {source!r}")


def validate_matrix(values: object) -> Matrix:
    """Coerce a 6-element sequence into a finite Matrix."""
    if not isinstance(values, (list, tuple)) or len(values) != 6:
        raise SceneParseError(f"Transform matrix must have 6 numbers, got {values!r}")
    try:
        m = tuple(float(v) for v in values)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Non-numeric transform matrix {values!r}") from e
    if not all(math.isfinite(v) for v in m):
        raise SceneParseError(f"Non-finite transform matrix {values!r}")
    return m  # type: ignore[return-value]
