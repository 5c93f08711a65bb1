from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

CENTER = "center"
TOP_LEFT = "top-left"
ANCHORS = (CENTER, TOP_LEFT)


@dataclass(frozen=True)
class SamplePoint:
    x: int
    y: int
    size: int = 1  # side length of the square window to average

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"Window size must be >= 1, got {self.size}")

    def window(self, anchor: str = CENTER) -> Tuple[int, int, int, int]:
        """
        Half-open (left, top, right, bottom) bounds of the window.

        anchor="center"   -> [x - size//2, x - size//2 + size)
        anchor="top-left" -> [x, x + size)
        """
        if anchor == CENTER:
            left = self.x - self.size // 2
            top = self.y - self.size // 2
        elif anchor == TOP_LEFT:
            left, top = self.x, self.y
        else:
            raise ValueError(f"Unknown window anchor: {anchor!r}")
        return left, top, left + self.size, top + self.size
