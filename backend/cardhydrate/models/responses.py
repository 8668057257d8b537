"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    templates_known: int = 0


class LayoutResponse(BaseModel):
    template_id: str
    known_template: bool = False
    content_area: dict[str, float]
    positions: dict[str, Any] = Field(default_factory=dict)


class HydrateResponse(BaseModel):
    objects: list[dict[str, Any]] = Field(default_factory=list)
    svg: str = ""
    processing_time_ms: float = 0.0
    object_count: int = 0
