from __future__ import annotations
import string
from dataclasses import dataclass
from typing import Dict, Tuple


def rgb_to_hex(r: int, g: int, b: int) -> str:
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"Channel value out of range: {channel}")
    return "#{:02x}{:02x}{:02x}".format(r, g, b)


def hex_to_rgb(hexstr: str) -> Tuple[int, int, int]:
    hexstr = hexstr.strip().lstrip("#")
    if len(hexstr) != 6 or not all(c in string.hexdigits for c in hexstr):
        raise ValueError(f"Expected 6 hex digits, got {hexstr!r}")
    return tuple(int(hexstr[i:i + 2], 16) for i in (0, 2, 4))


@dataclass(frozen=True)
class Color:
    """
    Averaged RGB value. Value object: two Colors with equal channels are equal.
    """
    r: int
    g: int
    b: int

    def __post_init__(self):
        # validates the channel range
        rgb_to_hex(self.r, self.g, self.b)

    @classmethod
    def from_hex(cls, hexstr: str) -> "Color":
        return cls(*hex_to_rgb(hexstr))

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    @property
    def rgb_text(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    def to_dict(self) -> Dict:
        return {"hex": self.hex, "rgb": {"r": self.r, "g": self.g, "b": self.b}}
