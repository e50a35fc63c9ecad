"""
Unsharp-mask sharpening.
"""

import numpy as np
from pydantic import BaseModel

from .filters import gaussian_blur
from .luminance import PixelBuffer, check_dimensions
from .threshold import BLACK, WHITE


class SharpenParams(BaseModel):
    """
    Tuning for the unsharp mask. With `rebinarize`, sharpened pixels are
    snapped back to pure black or white at `midpoint`.
    """

    amount: float = 1.8
    threshold: int = 4
    rebinarize: bool = False
    midpoint: int = 128


def unsharp_mask(enhanced: PixelBuffer, params: SharpenParams) -> PixelBuffer:
    """
    Adds amount * (enhanced - blurred) wherever the difference exceeds
    the threshold; other pixels pass through.
    """
    height, width = enhanced.shape
    check_dimensions(width, height)
    source = enhanced.astype(np.int32)
    blurred = gaussian_blur(enhanced).astype(np.int32)
    diff = source - blurred

    # astype truncates toward zero, as integer conversion does for negatives too
    boost = (np.float32(params.amount) * diff.astype(np.float32)).astype(np.int32)
    sharpened = np.clip(source + boost, 0, 255)
    if params.rebinarize:
        sharpened = np.where(sharpened < params.midpoint, BLACK, WHITE)

    edges = np.abs(diff) > params.threshold
    return np.where(edges, sharpened, source).astype(np.uint8)
