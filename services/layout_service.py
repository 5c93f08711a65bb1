from __future__ import annotations
import os
import logging
from typing import Dict, List, Type
from dotenv import load_dotenv
from models.errors import OutOfBoundsSample
from models.sample_point import SamplePoint, ANCHORS, CENTER, TOP_LEFT

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class LayoutPolicy:
    """
    Maps buffer dimensions to an ordered list of SamplePoints.

    Subclasses implement _raw_points(); the base class clamps every point so
    its window lies inside the buffer for the configured anchor.
    """

    name: str = ""
    default_window_size: int = 10

    def __init__(self, window_size: int = None, anchor: str = CENTER):
        self.window_size = self.default_window_size if window_size is None else int(window_size)
        if self.window_size < 1:
            raise ValueError(f"Window size must be >= 1, got {self.window_size}")
        if anchor not in ANCHORS:
            raise ValueError(f"Window anchor must be one of {ANCHORS}, got {anchor!r}")
        self.anchor = anchor

    def _raw_points(self, width: int, height: int) -> List[tuple]:
        raise NotImplementedError

    def _clamp(self, value: int, limit: int) -> int:
        size = self.window_size
        if self.anchor == TOP_LEFT:
            lo, hi = 0, limit - size
        else:
            lo, hi = size // 2, limit - size + size // 2
        return min(max(value, lo), hi)

    def points(self, width: int, height: int) -> List[SamplePoint]:
        if width < self.window_size or height < self.window_size:
            raise OutOfBoundsSample(
                f"{width}x{height} buffer is smaller than a {self.window_size}px window"
            )
        return [
            SamplePoint(self._clamp(x, width), self._clamp(y, height), self.window_size)
            for x, y in self._raw_points(width, height)
        ]

    def __repr__(self):
        return f"{type(self).__name__}(window_size={self.window_size}, anchor={self.anchor!r})"


class SinglePointLayout(LayoutPolicy):
    """The center pixel, read directly."""
    name = "single-point"
    default_window_size = 1

    def _raw_points(self, width, height):
        return [(width // 2, height // 2)]


class SingleAveragedLayout(SinglePointLayout):
    name = "single-averaged"
    default_window_size = 10


class MultiPointFixedLayout(LayoutPolicy):
    """Center, then the four diagonal neighbours half a window away."""
    name = "multi-point-fixed"

    def _raw_points(self, width, height):
        cx, cy = width // 2, height // 2
        half = self.window_size // 2
        return [
            (cx, cy),
            (cx - half, cy - half),
            (cx + half, cy - half),
            (cx - half, cy + half),
            (cx + half, cy + half),
        ]


class MultiPointResponsiveLayout(LayoutPolicy):
    """Five points on a sixths grid, so they follow the frame size."""
    name = "multi-point-responsive"

    def _raw_points(self, width, height):
        step_x, step_y = width // 6, height // 6
        return [
            (step_x, step_y),
            (2 * step_x, 4 * step_y),
            (4 * step_x, 4 * step_y),
            (5 * step_x, step_y),
            (3 * step_x, 2 * step_y),
        ]


_LAYOUTS: Dict[str, Type[LayoutPolicy]] = {
    cls.name: cls
    for cls in (SinglePointLayout, SingleAveragedLayout, MultiPointFixedLayout, MultiPointResponsiveLayout)
}


def available_layouts() -> List[str]:
    return list(_LAYOUTS)


def get_layout_policy(name: str = None, window_size: int = None, anchor: str = None) -> LayoutPolicy:
    """
    Build the layout policy named *name*. Missing arguments fall back to
    LAYOUT_POLICY, SAMPLE_WINDOW_SIZE and SAMPLE_WINDOW_ANCHOR.
    """
    name = name or os.getenv("LAYOUT_POLICY", "multi-point-responsive")
    if window_size is None and os.getenv("SAMPLE_WINDOW_SIZE"):
        window_size = int(os.getenv("SAMPLE_WINDOW_SIZE"))
    anchor = anchor or os.getenv("SAMPLE_WINDOW_ANCHOR", CENTER)

    try:
        cls = _LAYOUTS[name]
    except KeyError:
        raise ValueError(f"Unknown layout {name!r}. Choose from {available_layouts()}") from None

    policy = cls(window_size=window_size, anchor=anchor)
    logger.debug(f"Using layout {policy}")
    return policy
