"""
Mask: per-pixel manual retouch overrides for background removal
"""

from dataclasses import dataclass
from enum import IntEnum

import numpy as np


class MaskValue(IntEnum):
    PROTECT = 0  # Restore original pixel, opaque
    UNSET = 128  # Keep the threshold result
    DELETE = 255  # Force transparent


@dataclass
class Mask:
    """
    Brush mask with the same dimensions as the bitmap it refines

    `values` has shape (height, width) and holds MaskValue codes.
    """

    values: np.ndarray

    def __post_init__(self):
        if self.values.ndim != 2:
            raise ValueError(f"Mask must be 2-dimensional, got shape {self.values.shape}")
        self.values = self.values.astype(np.uint8, copy=False)

    @classmethod
    def create(cls, width: int, height: int) -> "Mask":
        """Empty mask: every pixel defers to the threshold result"""
        return cls(np.full((height, width), MaskValue.UNSET, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    def paint_circle(self, x: int, y: int, radius: int, value: MaskValue) -> int:
        """
        Mark every pixel within `radius` of (x, y), clipped to the mask

        Returns:
            Number of pixels painted
        """
        y0, y1 = max(0, y - radius), min(self.height - 1, y + radius)
        x0, x1 = max(0, x - radius), min(self.width - 1, x + radius)
        if y0 > y1 or x0 > x1:
            return 0

        yy, xx = np.ogrid[y0 : y1 + 1, x0 : x1 + 1]
        inside = (xx - x) ** 2 + (yy - y) ** 2 <= radius * radius
        self.values[y0 : y1 + 1, x0 : x1 + 1][inside] = int(value)
        return int(np.count_nonzero(inside))

    def protect(self, x: int, y: int, radius: int) -> int:
        return self.paint_circle(x, y, radius, MaskValue.PROTECT)

    def delete(self, x: int, y: int, radius: int) -> int:
        return self.paint_circle(x, y, radius, MaskValue.DELETE)

    def erase(self, x: int, y: int, radius: int) -> int:
        """Reset a brushed area back to UNSET"""
        return self.paint_circle(x, y, radius, MaskValue.UNSET)

    def protected(self) -> np.ndarray:
        return self.values == MaskValue.PROTECT

    def deleted(self) -> np.ndarray:
        return self.values == MaskValue.DELETE
