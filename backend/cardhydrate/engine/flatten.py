"""Flatten pass — one traversal from nested tree to placed objects.

Ordinary groups are recursed with their composed matrix. ``#bg`` / ``#lock*``
groups are opaque: placed as one unit, recolored, internal layout untouched.
Text fields (standardized mode) and logo placeholders are deferred as
metadata for the later passes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace

from cardhydrate.engine import classify
from cardhydrate.engine.classify import Role
from cardhydrate.engine.palette import Palette, map_paints
from cardhydrate.engine.scene import (
    IDENTITY,
    LogoPlaceholder,
    Matrix,
    NodeKind,
    RenderableObject,
    SceneNode,
    TextFieldMetadata,
)
from cardhydrate.engine.text import build_native_text_object
from cardhydrate.engine.transform import apply_absolute, compose_absolute, multiply, object_matrix

logger = logging.getLogger(__name__)


@dataclass
class FlattenResult:
    objects: list[RenderableObject] = field(default_factory=list)
    logo_placeholders: list[LogoPlaceholder] = field(default_factory=list)
    text_fields: list[TextFieldMetadata] = field(default_factory=list)


def object_type(node: SceneNode) -> str:
    if node.kind is NodeKind.SHAPE:
        return node.shape or "path"
    return node.kind.value


def place_node(node: SceneNode, matrix: Matrix, node_id: str | None = None) -> RenderableObject:
    """RenderableObject for ``node`` at absolute ``matrix``; paints untouched."""
    obj = RenderableObject(
        id=node.id if node_id is None else node_id,
        type=object_type(node),
        width=node.width,
        height=node.height,
        fill=node.fill,
        stroke=node.stroke,
        stroke_width=node.stroke_width,
        opacity=node.opacity,
        text=node.text,
        font_size=node.font_size,
        font_weight=node.font_weight,
        font_family=node.font_family,
        text_align="center" if node.text_anchor == "middle" else "left",
        rx=node.rx,
        radius=node.width / 2 if node.shape == "circle" else 0.0,
        src=node.href,
        geometry=dict(node.geometry),
    )
    return apply_absolute(obj, matrix)


def recolor_tree(node: SceneNode, palette: Palette, role_id: str = "") -> SceneNode:
    """Palette-map every paint in a subtree. Children without ids inherit the role id."""
    node_id = node.id or role_id
    fill, stroke = map_paints(node.fill, node.stroke, node_id, palette)
    children = tuple(recolor_tree(child, palette, node_id) for child in node.children)
    return replace(node, fill=fill, stroke=stroke, children=children)


def iter_group_leaves(obj: RenderableObject) -> Iterator[RenderableObject]:
    """Placed leaves of an opaque group object, in drawing order."""
    if obj.source is None:
        return

    def walk(nodes: Sequence[SceneNode], parent: Matrix, opacity: float) -> Iterator[RenderableObject]:
        for child in nodes:
            matrix = multiply(parent, child.transform)
            alpha = opacity * child.opacity
            if child.is_group:
                yield from walk(child.children, matrix, alpha)
            else:
                leaf = place_node(child, matrix, child.id or obj.id)
                yield replace(leaf, opacity=alpha, locked=True)

    yield from walk(obj.source.children, object_matrix(obj), obj.opacity)


def flatten(
    nodes: Sequence[SceneNode],
    palette: Palette,
    parent: Matrix = IDENTITY,
    standardized: bool = True,
) -> FlattenResult:
    result = FlattenResult()
    _flatten_into(result, nodes, palette, parent, standardized)
    logger.debug(
        "Flattened: %d placed, %d text fields, %d logo placeholders",
        len(result.objects),
        len(result.text_fields),
        len(result.logo_placeholders),
    )
    return result


def _flatten_into(
    result: FlattenResult,
    nodes: Sequence[SceneNode],
    palette: Palette,
    parent: Matrix,
    standardized: bool,
    opacity: float = 1.0,
) -> None:
    """``opacity`` is the product of the enclosing recursed groups' opacities."""
    for node in nodes:
        matrix = compose_absolute(node, parent)
        node_id = node.id

        if node.is_group and not classify.is_locked(node_id):
            _flatten_into(result, node.children, palette, matrix, standardized, opacity * node.opacity)
            continue

        role = classify.classify(node_id, standardized=standardized)

        if role is Role.TEXT_FIELD:
            meta = TextFieldMetadata(id=node_id, transform=matrix, original_text=node.text, node=node)
            if standardized:
                result.text_fields.append(meta)
            else:
                text_obj = build_native_text_object(meta, palette)
                result.objects.append(replace(text_obj, opacity=node.opacity * opacity))
            continue

        if role is Role.LOGO:
            result.logo_placeholders.append(LogoPlaceholder(node=node, id=node_id, transform=matrix))
            continue

        if role in (Role.LEGACY_DOT, Role.LEGACY_DIVIDER):
            # Regenerated at standardized positions by the layout pass
            continue

        obj = place_node(node, matrix)
        fill, stroke = map_paints(node.fill, node.stroke, node_id, palette)
        obj = replace(obj, fill=fill, stroke=stroke, opacity=obj.opacity * opacity)

        if role is Role.LOCKED:
            source = recolor_tree(node, palette) if node.is_group else None
            obj = replace(obj, locked=True, source=source)

        result.objects.append(obj)
