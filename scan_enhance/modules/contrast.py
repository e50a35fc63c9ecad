"""
Contrast stretch with a gamma curve, applied through a 256-entry lookup table.
"""

import numpy as np
from pydantic import BaseModel

from .luminance import PixelBuffer, check_dimensions


class ContrastParams(BaseModel):
    """Tuning for the contrast stretch."""

    gamma: float = 0.7
    headroom: float = 0.02


def build_stretch_lut(
    min_value: int, max_value: int, gamma: float, headroom: float = 0.02
) -> np.ndarray:
    """
    Maps [lo, hi] onto [0, 255] through n ** gamma, where lo and hi trim
    `headroom` of the observed range from each end.
    """
    spread = np.float32(max_value - min_value) * np.float32(headroom)
    lo = min_value + int(spread)
    hi = max_value - int(spread)
    value_range = np.float32(max(hi - lo, 1))

    levels = np.arange(256, dtype=np.float32)
    normalized = np.clip((levels - np.float32(lo)) / value_range, 0.0, 1.0)
    curved = np.power(normalized.astype(np.float64), gamma).astype(np.float32)
    lut = (curved * np.float32(255.0) + np.float32(0.5)).astype(np.int32)
    lut = np.clip(lut, 0, 255).astype(np.uint8)
    lut.setflags(write=False)
    return lut


def apply_lut(gray: PixelBuffer, lut: np.ndarray) -> PixelBuffer:
    return lut[gray]


def stretch_contrast(gray: PixelBuffer, params: ContrastParams) -> PixelBuffer:
    """Builds a LUT from this buffer's own min/max and applies it."""
    height, width = gray.shape
    check_dimensions(width, height)
    lut = build_stretch_lut(
        int(gray.min()), int(gray.max()), params.gamma, params.headroom
    )
    return apply_lut(gray, lut)
