"""GET /api/layout/{template_id} — standardized column positions for a template."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from cardhydrate.engine.layout import TEMPLATE_CONTENT_AREAS, compute_layout, content_area_for, template_stem
from cardhydrate.models.responses import LayoutResponse

router = APIRouter()


@router.get("/layout/{template_id}", response_model=LayoutResponse)
async def layout(template_id: str) -> LayoutResponse:
    area = content_area_for(template_id)
    positions = asdict(compute_layout(area))
    positions.pop("content_area")
    return LayoutResponse(
        template_id=template_id,
        known_template=template_stem(template_id) in TEMPLATE_CONTENT_AREAS,
        content_area=asdict(area),
        positions=positions,
    )
