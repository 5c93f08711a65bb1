# pipeline/capture_and_sample.py
from __future__ import annotations
import logging
from typing import Awaitable, Dict, List

from models.color import Color
from models.pixel_buffer import PixelBuffer
from services.color_sampler_service import ColorSamplerService
from services.layout_service import LayoutPolicy

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
async def capture_and_sample(
    frame: Awaitable[PixelBuffer],
    layout_policy: LayoutPolicy,
    *,
    sampler: ColorSamplerService | None = None,
) -> List[Color]:
    """
    One capture:
        • wait for the frame to finish decoding (the only suspension point)
        • lay out sample points from the frame's width and height
        • average each window
    Returns one Color per sample point, in layout order.
    """
    buffer = await frame

    sampler = sampler or ColorSamplerService(anchor=layout_policy.anchor)
    points = layout_policy.points(buffer.width, buffer.height)
    colors = sampler.sample_all(buffer, points)

    logger.info(
        f"Sampled {len(colors)} colors from {buffer.width}x{buffer.height} frame "
        f"with {layout_policy.name}: {', '.join(c.hex for c in colors)}"
    )
    return colors


def to_records(colors: List[Color]) -> List[Dict]:
    """Wire form: [{hex, rgb: {r, g, b}}, ...]."""
    return [color.to_dict() for color in colors]
