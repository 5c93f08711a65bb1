from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Still frame captured from a camera or a snapshot.
    RGBA pixels, read-only once built. No decoding logic in this file.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from an (H, W, 3) RGB or (H, W, 4) RGBA array.
        The data is copied and frozen so later writes to *arr* don't leak in.
        """
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) array, got shape {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError("Pixel buffer must not be empty")

        pixels = arr.astype(np.uint8, copy=True)
        if pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
            pixels = np.concatenate([pixels, alpha], axis=2)

        pixels.flags.writeable = False
        return cls(pixels=pixels)

    @classmethod
    def filled(cls, width: int, height: int, rgb) -> "PixelBuffer":
        """Uniform buffer, handy for tests and calibration frames."""
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[:, :] = rgb
        return cls.from_array(arr)
