"""POST /api/hydrate — brand profile + template in, hydrated objects and SVG out."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from cardhydrate.config import Settings
from cardhydrate.dependencies import get_settings
from cardhydrate.engine.canvas import load_source
from cardhydrate.engine.config import HydrationConfig
from cardhydrate.engine.hydrator import hydrate_scene
from cardhydrate.engine.layout import template_stem
from cardhydrate.errors import SceneParseError
from cardhydrate.models.requests import HydrateRequest
from cardhydrate.models.responses import HydrateResponse
from cardhydrate.svg.canvas_json import load_canvas_json
from cardhydrate.svg.parser import parse_svg
from cardhydrate.svg.serializer import serialize_svg

router = APIRouter()
logger = logging.getLogger(__name__)


def _template_path(template_id: str, settings: Settings) -> Path:
    """Resolve a template id to ``<templates_dir>/<stem>.svg`` or 404."""
    stem = template_stem(template_id)
    if not settings.templates_dir or not stem:
        raise HTTPException(status_code=404, detail=f"Unknown template {template_id!r}")
    root = Path(settings.templates_dir).resolve()
    path = (root / f"{stem}.svg").resolve()
    if path.parent != root or not path.is_file():
        raise HTTPException(status_code=404, detail=f"Unknown template {template_id!r}")
    return path


@router.post("/hydrate", response_model=HydrateResponse)
async def hydrate(
    req: HydrateRequest,
    settings: Settings = Depends(get_settings),
) -> HydrateResponse:
    start = time.perf_counter()

    if not (req.svg or req.canvas_json or req.template_id):
        raise HTTPException(status_code=422, detail="One of svg, canvas_json or template_id is required")

    inferred_id = None
    try:
        if req.svg:
            nodes = parse_svg(req.svg).nodes
        elif req.canvas_json:
            nodes = load_canvas_json(req.canvas_json)
        else:
            nodes, inferred_id = await load_source(_template_path(req.template_id, settings))
        config = HydrationConfig(
            template_id=req.template_id or inferred_id,
            preserve_template_text=req.preserve_template_text,
            logo_dominant=req.logo_dominant,
            logo_fetch_timeout=settings.logo_fetch_timeout,
            logo_max_bytes=settings.logo_max_bytes,
        )
        objects = await hydrate_scene(nodes, req.profile, config)
    except SceneParseError as e:
        logger.info("Rejected template: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000
    return HydrateResponse(
        objects=[obj.to_dict() for obj in objects],
        svg=serialize_svg(objects),
        processing_time_ms=round(elapsed, 1),
        object_count=len(objects),
    )
