"""
Enhancement modes and the pipelines that implement them.

Every mode starts from the luma of the source image and ends with an opaque
RGBA image of the same size. Stages return new arrays, so a call holds no
state beyond its own intermediates and calls can run concurrently.
"""

import asyncio
import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

import numpy as np

from .contrast import ContrastParams, stretch_contrast
from .errors import EnhancementCancelledError
from .filters import gaussian_blur
from .luminance import PixelBuffer, check_source, opaque_copy, to_luminance, to_rgba
from .sharpen import SharpenParams, unsharp_mask
from .threshold import ThresholdParams, adaptive_threshold

logger = logging.getLogger("scan-enhance.pipeline")


class EnhanceMode(str, Enum):
    """Selects which pipeline runs for one call."""

    ORIGINAL = "original"
    GRAYSCALE = "grayscale"
    BW_DOCUMENT = "bw_document"
    SHARPEN = "sharpen"
    SUPER_CLEAR = "super_clear"

    @property
    def label(self) -> str:
        return _LABELS[self][0]

    @property
    def description(self) -> str:
        return _LABELS[self][1]

    @property
    def is_binary(self) -> bool:
        """True for modes whose output is strictly black and white."""
        return self in (EnhanceMode.BW_DOCUMENT, EnhanceMode.SUPER_CLEAR)


_LABELS = {
    EnhanceMode.ORIGINAL: ("Original", "No enhancement"),
    EnhanceMode.GRAYSCALE: ("Grayscale", "Grayscale + denoise + high contrast"),
    EnhanceMode.BW_DOCUMENT: ("B/W Document", "Adaptive threshold, closest to a scan"),
    EnhanceMode.SHARPEN: ("Sharpen", "Denoise + contrast + unsharp mask"),
    EnhanceMode.SUPER_CLEAR: (
        "Super Clear",
        "Denoise + adaptive threshold + unsharp mask",
    ),
}

GRAYSCALE_CONTRAST = ContrastParams(gamma=0.7)
SHARPEN_CONTRAST = ContrastParams(gamma=0.75)
BW_THRESHOLD = ThresholdParams(sensitivity=0.08, cleanup_min_opposite=6)
SUPER_CLEAR_THRESHOLD = ThresholdParams(sensitivity=0.06, cleanup_min_opposite=7)
SHARPEN_USM = SharpenParams(amount=1.8, threshold=4)
SUPER_CLEAR_USM = SharpenParams(amount=1.5, threshold=2, rebinarize=True)


class ScanEnhancer:
    """
    Runs the enhancement pipelines. Instances only hold stage parameters,
    so one enhancer can be shared between threads.
    """

    def __init__(
        self,
        grayscale_contrast: ContrastParams = GRAYSCALE_CONTRAST,
        sharpen_contrast: ContrastParams = SHARPEN_CONTRAST,
        bw_threshold: ThresholdParams = BW_THRESHOLD,
        super_clear_threshold: ThresholdParams = SUPER_CLEAR_THRESHOLD,
        sharpen_usm: SharpenParams = SHARPEN_USM,
        super_clear_usm: SharpenParams = SUPER_CLEAR_USM,
    ):
        self.grayscale_contrast = grayscale_contrast
        self.sharpen_contrast = sharpen_contrast
        self.bw_threshold = bw_threshold
        self.super_clear_threshold = super_clear_threshold
        self.sharpen_usm = sharpen_usm
        self.super_clear_usm = super_clear_usm

    def grayscale(self, gray: PixelBuffer, checkpoint: Callable[[str], None]) -> PixelBuffer:
        denoised = gaussian_blur(gray)
        checkpoint("denoise")
        return stretch_contrast(denoised, self.grayscale_contrast)

    def bw_document(self, gray: PixelBuffer, checkpoint: Callable[[str], None]) -> PixelBuffer:
        denoised = gaussian_blur(gray)
        checkpoint("denoise")
        return adaptive_threshold(denoised, self.bw_threshold)

    def sharpen(self, gray: PixelBuffer, checkpoint: Callable[[str], None]) -> PixelBuffer:
        denoised = gaussian_blur(gray)
        checkpoint("denoise")
        enhanced = stretch_contrast(denoised, self.sharpen_contrast)
        checkpoint("contrast")
        return unsharp_mask(enhanced, self.sharpen_usm)

    def super_clear(self, gray: PixelBuffer, checkpoint: Callable[[str], None]) -> PixelBuffer:
        # Two denoise passes before thresholding
        denoised = gaussian_blur(gaussian_blur(gray))
        checkpoint("denoise")
        cleaned = adaptive_threshold(denoised, self.super_clear_threshold)
        checkpoint("threshold")
        return unsharp_mask(cleaned, self.super_clear_usm)

    def enhance_gray(
        self,
        image: np.ndarray,
        mode: EnhanceMode,
        cancel_event: Optional[threading.Event] = None,
    ) -> PixelBuffer:
        """
        Runs the pipeline for `mode` and returns its final grey buffer.
        ORIGINAL returns the plain luma.
        """
        mode = EnhanceMode(mode)

        def checkpoint(stage: str) -> None:
            if cancel_event is not None and cancel_event.is_set():
                raise EnhancementCancelledError(
                    f"Enhancement cancelled after {stage}",
                    details={"mode": mode.value, "stage": stage},
                )

        gray = to_luminance(image)
        checkpoint("luminance")
        if mode is EnhanceMode.ORIGINAL:
            return gray

        stages = {
            EnhanceMode.GRAYSCALE: self.grayscale,
            EnhanceMode.BW_DOCUMENT: self.bw_document,
            EnhanceMode.SHARPEN: self.sharpen,
            EnhanceMode.SUPER_CLEAR: self.super_clear,
        }
        return stages[mode](gray, checkpoint)

    def enhance(
        self,
        image: np.ndarray,
        mode: EnhanceMode,
        cancel_event: Optional[threading.Event] = None,
    ) -> np.ndarray:
        """
        Enhances an RGB(A) or grey image and returns an opaque RGBA image
        of the same size.
        """
        mode = EnhanceMode(mode)
        check_source(image)
        height, width = image.shape[:2]
        start_time = time.time()

        if mode is EnhanceMode.ORIGINAL:
            result = opaque_copy(image)
        else:
            result = to_rgba(self.enhance_gray(image, mode, cancel_event))

        elapsed_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(
            "Enhanced %dx%d image with %s in %sms",
            width,
            height,
            mode.value,
            elapsed_ms,
            extra={
                "mode": mode.value,
                "width": width,
                "height": height,
                "elapsed_ms": elapsed_ms,
            },
        )
        return result

    async def enhance_async(
        self,
        image: np.ndarray,
        mode: EnhanceMode,
        cancel_event: Optional[threading.Event] = None,
    ) -> np.ndarray:
        """Runs enhance() in a worker thread."""
        return await asyncio.to_thread(self.enhance, image, mode, cancel_event)


_default_enhancer = ScanEnhancer()


def enhance(
    image: np.ndarray,
    mode: EnhanceMode,
    cancel_event: Optional[threading.Event] = None,
) -> np.ndarray:
    """Wrapper for ScanEnhancer.enhance with default parameters."""
    return _default_enhancer.enhance(image, mode, cancel_event)


def enhance_gray(image: np.ndarray, mode: EnhanceMode) -> PixelBuffer:
    """Wrapper for ScanEnhancer.enhance_gray with default parameters."""
    return _default_enhancer.enhance_gray(image, mode)


async def enhance_async(image: np.ndarray, mode: EnhanceMode) -> np.ndarray:
    """Wrapper for ScanEnhancer.enhance_async with default parameters."""
    return await _default_enhancer.enhance_async(image, mode)
