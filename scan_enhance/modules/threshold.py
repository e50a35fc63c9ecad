"""
Adaptive (local-mean) binarization followed by isolated-pixel cleanup.
"""

from typing import Optional

import numpy as np
from pydantic import BaseModel

from .filters import box_blur, box_blur_radius
from .luminance import PixelBuffer, check_dimensions

BLACK = 0
WHITE = 255

# Offsets of the 8-connected neighbourhood
_NEIGHBOURS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)]


class ThresholdParams(BaseModel):
    """
    Tuning for adaptive thresholding. `radius` of None selects
    box_blur_radius() for the image size.
    """

    sensitivity: float = 0.08
    cleanup_min_opposite: int = 6
    radius: Optional[int] = None


def binarize_against(gray: PixelBuffer, local_mean: PixelBuffer, sensitivity: float) -> PixelBuffer:
    """Black where the pixel is below local_mean * (1 - sensitivity)."""
    factor = np.float32(1.0) - np.float32(sensitivity)
    cutoff = (local_mean.astype(np.float32) * factor).astype(np.int32)
    return np.where(gray.astype(np.int32) < cutoff, BLACK, WHITE).astype(np.uint8)


def remove_isolated_pixels(binary: PixelBuffer, min_opposite: int) -> PixelBuffer:
    """
    Flips every interior pixel with at least `min_opposite` of its 8
    neighbours set to a different value. Counts are read from the input
    only, so one flip never influences another. Border pixels are kept.
    """
    height, width = binary.shape
    cleaned = binary.copy()
    if height < 3 or width < 3:
        return cleaned

    centre = binary[1:-1, 1:-1]
    opposite = np.zeros(centre.shape, dtype=np.int32)
    for dy, dx in _NEIGHBOURS:
        neighbour = binary[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]
        opposite += neighbour != centre

    flip = opposite >= min_opposite
    cleaned[1:-1, 1:-1] = np.where(flip, WHITE - centre, centre)
    return cleaned


def adaptive_threshold(gray: PixelBuffer, params: ThresholdParams) -> PixelBuffer:
    """
    Binarizes against the box-blurred local mean, then runs one cleanup sweep.
    """
    height, width = gray.shape
    check_dimensions(width, height)
    radius = params.radius if params.radius is not None else box_blur_radius(width, height)
    local_mean = box_blur(gray, radius)
    binary = binarize_against(gray, local_mean, params.sensitivity)
    return remove_isolated_pixels(binary, params.cleanup_min_opposite)
