"""Canvas session — owns the object list a renderer draws from.

Each ``render`` bumps a generation counter before it suspends on logo loads.
A result is assigned only if no newer render started and the canvas was not
disposed in the meantime; otherwise it is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from cardhydrate.engine import tokens
from cardhydrate.engine.config import HydrationConfig
from cardhydrate.engine.hydrator import hydrate_scene
from cardhydrate.engine.logo import LogoLoader, default_loader
from cardhydrate.engine.scene import RenderableObject, SceneNode
from cardhydrate.errors import SceneParseError
from cardhydrate.models.brand import BrandProfile
from cardhydrate.svg.canvas_json import load_canvas_json
from cardhydrate.svg.parser import parse_svg
from cardhydrate.svg.serializer import serialize_svg

logger = logging.getLogger(__name__)

SceneSource = str | Path | dict[str, Any]


async def load_source(source: SceneSource) -> tuple[tuple[SceneNode, ...], str | None]:
    """Parse any supported source. Returns (nodes, template id inferred from a file name).

    Strings are always markup or JSON text; only ``Path`` objects are read from disk.
    """
    if isinstance(source, dict):
        return load_canvas_json(source), None

    if isinstance(source, str):
        text = source.lstrip()
        if text.startswith("<"):
            return parse_svg(text).nodes, None
        if text.startswith("{"):
            return load_canvas_json(text), None
        raise SceneParseError(f"Scene text is neither SVG markup nor canvas JSON: {source[:80]!r}")

    path = Path(source)
    if path.suffix.lower() != ".svg":
        raise SceneParseError(f"Template file must be .svg: {path.name!r}")
    try:
        markup = await asyncio.get_running_loop().run_in_executor(None, path.read_text, "utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SceneParseError(f"Could not read template {path.name!r}: {e}") from e
    return parse_svg(markup).nodes, path.stem


class CardCanvas:
    """A single card surface. Not safe for concurrent renders; the newest wins."""

    def __init__(
        self,
        width: float = tokens.CARD_WIDTH,
        height: float = tokens.CARD_HEIGHT,
        loader: LogoLoader = default_loader,
    ) -> None:
        self.width = width
        self.height = height
        self.loader = loader
        self.objects: list[RenderableObject] = []
        self._generation = 0
        self._disposed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    def is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    async def render(
        self,
        source: SceneSource,
        profile: BrandProfile,
        template_id: str | None = None,
        preserve_template_text: bool = False,
        read_only: bool = False,
        config: HydrationConfig | None = None,
    ) -> list[RenderableObject] | None:
        """Hydrate ``source`` onto this canvas.

        Returns the assigned objects, or None if the result went stale.
        """
        if self._disposed:
            logger.warning("Render requested on a disposed canvas")
            return None

        self._generation += 1
        generation = self._generation

        nodes, inferred_id = await load_source(source)
        base = config or HydrationConfig()
        config = replace(
            base,
            template_id=template_id or base.template_id or inferred_id,
            preserve_template_text=preserve_template_text or base.preserve_template_text,
        )

        objects = await hydrate_scene(nodes, profile, config, self.loader)

        if not self.is_current(generation):
            logger.warning(
                "Discarding stale render (generation %d, current %d, disposed=%s)",
                generation, self._generation, self._disposed,
            )
            return None

        if read_only:
            objects = [replace(obj, locked=True) for obj in objects]
        self.objects = objects
        return objects

    def dispose(self) -> None:
        self._disposed = True
        self.objects = []

    def to_svg(self) -> str:
        return serialize_svg(self.objects, self.width, self.height)
