"""Card template hydration engine."""

from cardhydrate.engine.config import HydrationConfig
from cardhydrate.engine.hydrator import Hydrator, hydrate_scene
from cardhydrate.engine.scene import NodeKind, RenderableObject, SceneNode

__all__ = [
    "HydrationConfig",
    "Hydrator",
    "hydrate_scene",
    "NodeKind",
    "RenderableObject",
    "SceneNode",
]
