"""Scene Assembler — runs the hydration passes end to end.

    flatten -> layout + text + structural -> logos (concurrent) -> join -> contrast sweep

Only the logo pass suspends. The sweep starts after every logo has settled,
because background detection needs the final geometry.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from cardhydrate.engine.config import HydrationConfig
from cardhydrate.engine.contrast import sweep
from cardhydrate.engine.flatten import flatten
from cardhydrate.engine.layout import LogoBox, compute_layout, content_area_for
from cardhydrate.engine.logo import LogoLoader, LogoResolution, default_loader, resolve_logo
from cardhydrate.engine.palette import Palette
from cardhydrate.engine.scene import RenderableObject, SceneNode
from cardhydrate.engine.text import build_structural_elements, build_text_object
from cardhydrate.models.brand import BrandProfile

logger = logging.getLogger(__name__)


class Hydrator:
    """Hydrates a parsed template tree into a flat, render-ready object list."""

    def __init__(
        self,
        config: HydrationConfig | None = None,
        loader: LogoLoader = default_loader,
    ) -> None:
        self.config = config or HydrationConfig()
        self.loader = loader

    async def hydrate(self, nodes: Sequence[SceneNode], profile: BrandProfile) -> list[RenderableObject]:
        start = time.perf_counter()
        config = self.config
        standardized = not config.preserve_template_text
        palette = Palette.from_profile(profile)

        t0 = time.perf_counter()
        flat = flatten(nodes, palette, standardized=standardized)
        _log_pass("flatten", t0)

        processed = list(flat.objects)
        layout_logo: LogoBox | None = None

        if standardized and flat.text_fields:
            t0 = time.perf_counter()
            layout = compute_layout(content_area_for(config.template_id))
            layout_logo = layout.logo
            texts = [build_text_object(meta, profile, layout, palette) for meta in flat.text_fields]
            processed += texts
            processed += build_structural_elements(layout, palette)
            _log_pass("layout", t0)

        t0 = time.perf_counter()
        resolutions: list[LogoResolution] = await asyncio.gather(*(
            resolve_logo(
                placeholder,
                profile.logo_url,
                palette,
                processed,
                config,
                layout_logo=layout_logo,
                loader=self.loader,
            )
            for placeholder in flat.logo_placeholders
        ))
        _log_pass("logos", t0)

        all_objects = processed + [obj for res in resolutions for obj in res.objects]

        if standardized:
            t0 = time.perf_counter()
            logo_dominant = config.logo_dominant or next((r.tone for r in resolutions if r.tone), None)
            all_objects = sweep(all_objects, brand_primary=palette.primary_text, logo_dominant=logo_dominant)
            _log_pass("contrast", t0)

        logger.info(
            "Hydrated %s: %d objects (%d text, %d logo placeholders) in %.0fms",
            config.template_id or "template",
            len(all_objects),
            len(flat.text_fields),
            len(flat.logo_placeholders),
            (time.perf_counter() - start) * 1000,
        )
        return all_objects


def _log_pass(name: str, t0: float) -> None:
    logger.debug("  %s completed in %.1fms", name, (time.perf_counter() - t0) * 1000)


async def hydrate_scene(
    nodes: Sequence[SceneNode],
    profile: BrandProfile,
    config: HydrationConfig | None = None,
    loader: LogoLoader = default_loader,
) -> list[RenderableObject]:
    return await Hydrator(config, loader).hydrate(nodes, profile)
