"""Logo image IO — fetch, decode, and tone analysis.

Sources: ``http(s)://`` URLs (httpx), ``data:`` URIs, and local file paths.
Every failure surfaces as LogoLoadError.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from dataclasses import dataclass
from pathlib import Path

import httpx
import numpy as np
from PIL import Image

from cardhydrate.errors import LogoLoadError
from cardhydrate.utils.color import rgb_to_hex

logger = logging.getLogger(__name__)

# Visible pixel count below this share of the sample means the logo has a
# transparent surround.
_TRANSPARENCY_VISIBLE_SHARE = 0.9


@dataclass(frozen=True)
class LogoStats:
    average_color: str
    has_transparency: bool


@dataclass(frozen=True)
class LoadedLogo:
    width: int
    height: int
    stats: LogoStats | None


async def fetch_image_bytes(
    url: str,
    timeout: float = 10.0,
    max_bytes: int = 5 * 1024 * 1024,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    """Raw logo bytes from any supported source, capped at ``max_bytes``."""
    if url.startswith("data:"):
        data = _decode_data_uri(url)
    elif url.startswith(("http://", "https://")):
        data = await _download(url, timeout, max_bytes, transport)
    else:
        path = Path(url.removeprefix("file://"))
        try:
            data = await asyncio.get_running_loop().run_in_executor(None, path.read_bytes)
        except OSError as e:
            raise LogoLoadError(f"Failed to read logo {path}: {e}") from e

    _check_size(url, len(data), max_bytes)
    return data


def _check_size(url: str, size: int, max_bytes: int) -> None:
    if size > max_bytes:
        raise LogoLoadError(f"Logo {url[:64]} exceeds {max_bytes} bytes ({size})")


async def _download(
    url: str,
    timeout: float,
    max_bytes: int,
    transport: httpx.AsyncBaseTransport | None,
) -> bytes:
    """Stream the body, stopping as soon as it passes ``max_bytes``."""
    chunks: list[bytes] = []
    received = 0
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            async with client.stream("GET", url, follow_redirects=True) as response:
                if response.status_code != 200:
                    raise LogoLoadError(f"Logo fetch {url} returned HTTP {response.status_code}")
                declared = response.headers.get("content-length")
                if declared and declared.isdigit():
                    _check_size(url, int(declared), max_bytes)
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    _check_size(url, received, max_bytes)
                    chunks.append(chunk)
    except httpx.HTTPError as e:
        raise LogoLoadError(f"Failed to fetch logo {url}: {e}") from e
    return b"".join(chunks)


def _decode_data_uri(uri: str) -> bytes:
    header, _, payload = uri.partition(",")
    if not payload:
        raise LogoLoadError("Empty data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise LogoLoadError(f"Invalid base64 data URI: {e}") from e
    return payload.encode("utf-8")


def decode_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise LogoLoadError(f"Could not decode logo image: {e}") from e
    return img.convert("RGBA")


def logo_stats(img: Image.Image, sample_edge: int = 128, alpha_threshold: float = 0.06) -> LogoStats | None:
    """Alpha-weighted average color over visible pixels of a downscaled sample.

    Returns None when no pixel is visible.
    """
    width, height = img.size
    if not width or not height:
        return None

    sample = img.convert("RGBA").resize(
        (min(sample_edge, width), min(sample_edge, height)),
        Image.BILINEAR,
    )
    arr = np.asarray(sample, dtype=np.float64)
    alpha = arr[:, :, 3] / 255.0
    visible = alpha > alpha_threshold

    weights = np.where(visible, alpha, 0.0)
    total = float(np.sum(weights))
    if total <= 0:
        return None

    avg = [float(np.sum(arr[:, :, ch] * weights) / total) for ch in range(3)]
    visible_count = int(np.count_nonzero(visible))
    return LogoStats(
        average_color=rgb_to_hex(*avg),
        has_transparency=visible_count < alpha.size * _TRANSPARENCY_VISIBLE_SHARE,
    )


def _decode_and_analyze(data: bytes, sample_edge: int, alpha_threshold: float) -> LoadedLogo:
    img = decode_image(data)
    return LoadedLogo(
        width=img.width,
        height=img.height,
        stats=logo_stats(img, sample_edge, alpha_threshold),
    )


async def load_logo(
    url: str,
    timeout: float = 10.0,
    max_bytes: int = 5 * 1024 * 1024,
    sample_edge: int = 128,
    alpha_threshold: float = 0.06,
) -> LoadedLogo:
    """Fetch and analyze a logo. Decoding runs off the event loop."""
    data = await fetch_image_bytes(url, timeout=timeout, max_bytes=max_bytes)
    loop = asyncio.get_running_loop()
    logo = await loop.run_in_executor(None, _decode_and_analyze, data, sample_edge, alpha_threshold)
    logger.debug("Loaded logo %dx%d from %s", logo.width, logo.height, url[:64])
    return logo
