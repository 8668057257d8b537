"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cardhydrate.models.brand import BrandProfile


class HydrateRequest(BaseModel):
    svg: str | None = Field(default=None, description="Raw template SVG markup")
    canvas_json: dict[str, Any] | str | None = Field(
        default=None,
        description="Saved canvas state ({'objects': [...]}) as JSON text or object",
    )
    template_id: str | None = Field(
        default=None,
        description="Template stem; selects the content area and, without svg/canvas_json, the template file",
    )
    profile: BrandProfile = Field(default_factory=BrandProfile)
    preserve_template_text: bool = Field(
        default=False,
        description="Preview mode: keep template text at its native geometry",
    )
    logo_dominant: str | None = Field(default=None, description="Optional logo color for the contrast sweep")
