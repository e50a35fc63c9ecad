"""
Decoding, encoding and resizing helpers around the enhancement engine.
"""

import asyncio
import logging
from typing import Optional

# pylint: disable=no-member
import cv2
import numpy as np

from .errors import EmptyImageError
from .pipeline import EnhanceMode

logger = logging.getLogger("scan-enhance.image-toolkit")

DEFAULT_JPEG_QUALITY = 98
DEFAULT_PREVIEW_MAX_SIDE = 1200


class ImageToolkit:
    @staticmethod
    def validate_image(image_bytes: bytes, max_size_mb: int = 50) -> Optional[str]:
        """
        Validates image content and size.
        """
        if not image_bytes:
            return "Empty image content"

        if len(image_bytes) > max_size_mb * 1024 * 1024:
            return f"Image size exceeds {max_size_mb}MB limit"

        return None

    @staticmethod
    def decode_image(image_bytes: bytes) -> Optional[np.ndarray]:
        """
        Decodes raw image bytes into an RGB or RGBA array.
        Returns None when the payload is not a decodable image.
        """
        if not image_bytes:
            logger.error("Cannot decode empty image payload.")
            return None

        nparr = np.frombuffer(image_bytes, np.uint8)
        img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
        if img is None:
            logger.error("Failed to decode image bytes.")
            return None

        if np.issubdtype(img.dtype, np.floating):
            # Float TIFF/EXR sources hold intensities in [0, 1]
            img = np.clip(np.nan_to_num(img) * 255.0 + 0.5, 0, 255).astype(np.uint8)
        elif img.dtype != np.uint8:
            # 16-bit PNG/TIFF sources
            img = (img >> 8).astype(np.uint8)
        if img.ndim == 2:
            return img
        if img.shape[2] == 4:
            return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)

    @staticmethod
    async def decode_image_async(image_bytes: bytes) -> Optional[np.ndarray]:
        """
        Asynchronously decodes image bytes.
        """
        return await asyncio.to_thread(ImageToolkit.decode_image, image_bytes)

    @staticmethod
    def load_image(path: str) -> Optional[np.ndarray]:
        with open(path, "rb") as fh:
            return ImageToolkit.decode_image(fh.read())

    @staticmethod
    def scale_for_preview(
        image: np.ndarray, max_side: int = DEFAULT_PREVIEW_MAX_SIDE
    ) -> np.ndarray:
        """
        Shrinks an image so its longer side is at most `max_side`.
        Smaller images are returned unchanged.
        """
        height, width = image.shape[:2]
        if width == 0 or height == 0:
            raise EmptyImageError(
                "Cannot scale an empty image", details={"width": width, "height": height}
            )
        longest = max(width, height)
        if longest <= max_side:
            return image

        scale = max_side / longest
        preview_w = max(int(width * scale), 1)
        preview_h = max(int(height * scale), 1)
        return cv2.resize(image, (preview_w, preview_h), interpolation=cv2.INTER_LINEAR)

    @staticmethod
    def output_extension(mode: EnhanceMode) -> str:
        """PNG for black-and-white modes, JPEG for the rest."""
        return ".png" if EnhanceMode(mode).is_binary else ".jpg"

    @staticmethod
    def encode_result(
        result: np.ndarray,
        mode: EnhanceMode,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> tuple[bytes, str]:
        """
        Encodes an RGBA result in the format suited to `mode`.
        Returns the encoded bytes and their file extension.
        """
        ext = ImageToolkit.output_extension(mode)
        if ext == ".png":
            # Binary output is grey in every channel; one channel keeps the file small
            img = result[..., 0] if result.ndim == 3 else result
            params: list[int] = [cv2.IMWRITE_PNG_COMPRESSION, 9]
        else:
            img = cv2.cvtColor(result, cv2.COLOR_RGBA2BGR) if result.ndim == 3 else result
            params = [cv2.IMWRITE_JPEG_QUALITY, int(jpeg_quality)]

        success, buf = cv2.imencode(ext, img, params)
        if not success:
            raise ValueError(f"Could not encode enhanced image as {ext}")
        return buf.tobytes(), ext
