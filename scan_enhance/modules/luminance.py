"""
Conversions between colour images and single-channel intensity buffers.

A PixelBuffer is a 2-D uint8 array of shape (height, width). Colour sources
are (h, w, 3) RGB or (h, w, 4) RGBA; alpha is ignored.
"""

from typing import Sequence, Union

import numpy as np

from .errors import EmptyImageError, InvalidDimensionsError

# ITU-R BT.601 luma weights
LUMA_R = np.float32(0.299)
LUMA_G = np.float32(0.587)
LUMA_B = np.float32(0.114)

PixelBuffer = np.ndarray


def check_dimensions(width: int, height: int) -> None:
    """Rejects images with no pixels."""
    if width <= 0 or height <= 0:
        raise EmptyImageError(
            f"Image has no pixels ({width}x{height})",
            details={"width": width, "height": height},
        )


def check_source(image: np.ndarray) -> None:
    """
    Validates a source image: (h, w) grey, (h, w, 3) RGB or (h, w, 4) RGBA,
    with no zero dimension.
    """
    if image.ndim not in (2, 3):
        raise InvalidDimensionsError(
            f"Expected a 2-D or 3-D image array, got shape {image.shape}",
            details={"shape": tuple(image.shape)},
        )
    if image.ndim == 3 and image.shape[2] not in (3, 4):
        raise InvalidDimensionsError(
            f"Expected 3 or 4 channels, got {image.shape[2]}",
            details={"shape": tuple(image.shape)},
        )
    height, width = image.shape[:2]
    check_dimensions(width, height)


def as_pixel_buffer(
    data: Union[Sequence[int], np.ndarray], width: int, height: int
) -> PixelBuffer:
    """
    Wraps a flat row-major intensity sequence as a (height, width) buffer.
    """
    check_dimensions(width, height)
    flat = np.asarray(data).reshape(-1)
    if flat.size != width * height:
        raise InvalidDimensionsError(
            f"Buffer holds {flat.size} values, expected {width}x{height}",
            details={"length": int(flat.size), "width": width, "height": height},
        )
    return np.clip(flat, 0, 255).astype(np.uint8).reshape(height, width)


def to_luminance(image: np.ndarray) -> PixelBuffer:
    """
    Extracts the luma channel of an RGB(A) image.
    A 2-D image is treated as already grey and copied.
    """
    check_source(image)
    if image.ndim == 2:
        return np.clip(image, 0, 255).astype(np.uint8)

    rgb = image[..., :3].astype(np.float32)
    luma = LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]
    luma = (luma + np.float32(0.5)).astype(np.int32)
    return np.clip(luma, 0, 255).astype(np.uint8)


def to_rgba(gray: PixelBuffer) -> np.ndarray:
    """Expands a grey buffer to an opaque RGBA image."""
    values = np.clip(gray, 0, 255).astype(np.uint8)
    alpha = np.full_like(values, 255)
    return np.dstack((values, values, values, alpha))


def pack_argb(gray: PixelBuffer) -> np.ndarray:
    """Packs a grey buffer into ARGB8888 integers."""
    values = np.clip(gray, 0, 255).astype(np.uint32)
    return np.uint32(0xFF000000) | (values << 16) | (values << 8) | values


def opaque_copy(image: np.ndarray) -> np.ndarray:
    """
    Returns an RGBA copy of the source with alpha forced to 255.
    """
    check_source(image)
    height, width = image.shape[:2]
    if image.ndim == 2:
        return to_rgba(image)
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = image[..., :3]
    rgba[..., 3] = 255
    return rgba
