"""
Blur primitives: a separable 5-tap Gaussian and an integral-image box blur.
Both clamp sample coordinates to the image edge.
"""

import numpy as np

from .luminance import PixelBuffer, check_dimensions

GAUSSIAN_TAPS = (1, 4, 6, 4, 1)
GAUSSIAN_SUM = 16

MIN_BOX_RADIUS = 15
MAX_BOX_RADIUS = 80


def _blur_axis(values: np.ndarray, axis: int) -> np.ndarray:
    # Edge padding reproduces coordinate clamping into [0, dim - 1]
    pad = [(0, 0), (0, 0)]
    pad[axis] = (2, 2)
    padded = np.pad(values, pad, mode="edge")
    length = values.shape[axis]

    total = np.zeros(values.shape, dtype=np.int32)
    for offset, weight in enumerate(GAUSSIAN_TAPS):
        window = padded.take(np.arange(offset, offset + length), axis=axis)
        total += weight * window
    return total // GAUSSIAN_SUM


def gaussian_blur(gray: PixelBuffer) -> PixelBuffer:
    """
    Applies the [1, 4, 6, 4, 1] / 16 kernel horizontally, then vertically.
    Each pass truncates its integer division.
    """
    height, width = gray.shape
    check_dimensions(width, height)
    values = gray.astype(np.int32)
    horizontal = _blur_axis(values, axis=1)
    vertical = _blur_axis(horizontal, axis=0)
    return vertical.astype(np.uint8)


def integral_image(gray: PixelBuffer) -> np.ndarray:
    """
    Builds a (h + 1, w + 1) int64 prefix-sum table with a zero first row
    and column.
    """
    height, width = gray.shape
    table = np.zeros((height + 1, width + 1), dtype=np.int64)
    table[1:, 1:] = gray.astype(np.int64).cumsum(axis=0).cumsum(axis=1)
    return table


def box_blur_radius(width: int, height: int) -> int:
    """Window radius used by the adaptive threshold: 1/8 of the short side."""
    return int(np.clip(min(width, height) // 8, MIN_BOX_RADIUS, MAX_BOX_RADIUS))


def box_blur(gray: PixelBuffer, radius: int) -> PixelBuffer:
    """
    Local mean over a (2r + 1)^2 window. Near the borders the window is
    clipped and the mean is taken over the pixels actually covered.
    """
    height, width = gray.shape
    check_dimensions(width, height)
    radius = max(int(radius), 0)
    table = integral_image(gray)

    xs = np.arange(width)
    ys = np.arange(height)
    x1 = np.maximum(xs - radius, 0)
    x2 = np.minimum(xs + radius, width - 1)
    y1 = np.maximum(ys - radius, 0)
    y2 = np.minimum(ys + radius, height - 1)

    top, bottom = y1[:, None], (y2 + 1)[:, None]
    left, right = x1[None, :], (x2 + 1)[None, :]
    window_sum = (
        table[bottom, right] - table[top, right] - table[bottom, left] + table[top, left]
    )
    count = (y2 - y1 + 1)[:, None].astype(np.int64) * (x2 - x1 + 1)[None, :]
    return (window_sum // count).astype(np.uint8)
