import os
from typing import List, Sequence
import numpy as np
from dotenv import load_dotenv
from models.color import Color
from models.errors import OutOfBoundsSample
from models.pixel_buffer import PixelBuffer
from models.sample_point import SamplePoint, ANCHORS

# Load environment variables
load_dotenv()


class ColorSamplerService:
    """
    Averages square pixel windows into Colors. Pure computation over an
    already decoded buffer; nothing here touches the camera.
    """

    def __init__(self, anchor: str = None):
        self.anchor = anchor or os.getenv("SAMPLE_WINDOW_ANCHOR", "center")
        if self.anchor not in ANCHORS:
            raise ValueError(f"SAMPLE_WINDOW_ANCHOR must be one of {ANCHORS}, got {self.anchor!r}")

    def _window_pixels(self, buffer: PixelBuffer, point: SamplePoint) -> np.ndarray:
        left, top, right, bottom = point.window(self.anchor)
        if left < 0 or top < 0 or right > buffer.width or bottom > buffer.height:
            raise OutOfBoundsSample(
                f"Window ({left},{top})-({right},{bottom}) of {point} "
                f"exceeds {buffer.width}x{buffer.height} buffer"
            )
        return buffer.pixels[top:bottom, left:right, :3]

    def sample_average_color(self, buffer: PixelBuffer, point: SamplePoint) -> Color:
        """
        Sum R, G, B independently over the window and floor-divide by the
        pixel count. Alpha is ignored.

        Args:
            buffer (PixelBuffer): decoded frame.
            point (SamplePoint): coordinate plus window size.

        Returns:
            Color: the averaged channels.

        Raises:
            OutOfBoundsSample: the window does not fit in the buffer.
        """
        window = self._window_pixels(buffer, point)
        count = window.shape[0] * window.shape[1]
        sums = window.reshape(-1, 3).sum(axis=0, dtype=np.uint64)
        r, g, b = (int(s) // count for s in sums)
        return Color(r, g, b)

    def sample_all(self, buffer: PixelBuffer, points: Sequence[SamplePoint]) -> List[Color]:
        """One Color per point, same order as *points*."""
        return [self.sample_average_color(buffer, point) for point in points]
