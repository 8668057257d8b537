"""Hydration error types."""

from __future__ import annotations


class SceneParseError(ValueError):
    """Malformed scene document or transform. The only fatal hydration error."""


class LogoLoadError(RuntimeError):
    """Logo image could not be fetched or decoded. Always handled locally."""
