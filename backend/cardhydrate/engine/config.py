"""Hydration configuration — per-call options and tunables."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class HydrationConfig:
    """Controls one hydrate call."""

    # Template identifier (stem, filename, or path) for the content-area lookup
    template_id: str | None = None
    # Preview mode: keep template text where it is, skip layout and sweep
    preserve_template_text: bool = False
    # Optional logo-dominant color, 5th choice of the contrast sweep
    logo_dominant: str | None = None

    # Logo analysis
    logo_sample_edge: int = 128
    logo_alpha_threshold: float = 0.06  # ~6% alpha = invisible
    # Below this logo-vs-background contrast a container is drawn behind the logo
    logo_container_threshold: float = 2.6
    # Container must contrast at least this much with the logo tone
    logo_container_min_contrast: float = 3.0
    logo_padding_with_container: float = 0.10
    logo_padding_bare: float = 0.03
    logo_container_opacity: float = 0.96
    logo_corner_radius_fraction: float = 0.14
    logo_min_corner_radius: float = 8.0

    # Logo fetch
    logo_fetch_timeout: float = 10.0
    logo_max_bytes: int = 5 * 1024 * 1024

    # Background detection behind the logo ignores shapes under 5% of the card
    logo_bg_min_fraction: float = 0.05
