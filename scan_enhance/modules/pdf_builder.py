"""
Assemble enhanced scans into a multi-page A4 PDF.
Each image gets its own portrait page, fitted inside the margins and centered.
"""

import logging
import os
import threading
from typing import BinaryIO, Iterable, Optional, Union

import numpy as np
from PIL import Image

from .image_toolkit import ImageToolkit
from .pipeline import EnhanceMode, ScanEnhancer

logger = logging.getLogger("scan-enhance.pdf")

A4_WIDTH_PT = 595.0
A4_HEIGHT_PT = 842.0
POINTS_PER_INCH = 72.0

try:
    RESAMPLING = Image.Resampling
except AttributeError:
    # Older Pillow versions
    RESAMPLING = Image  # type: ignore


def points_to_pixels(points: float, dpi: int) -> int:
    return int(round(points / POINTS_PER_INCH * dpi))


class ScanPdfBuilder:
    """
    Enhances page images at full resolution and lays them out on A4 pages.
    """

    def __init__(
        self,
        mode: EnhanceMode = EnhanceMode.BW_DOCUMENT,
        dpi: int = 300,
        margin_pt: float = 36.0,
        enhancer: Optional[ScanEnhancer] = None,
    ):
        self.mode = EnhanceMode(mode)
        self.dpi = dpi
        self.margin_pt = margin_pt
        self.enhancer = enhancer or ScanEnhancer()

    @property
    def page_size_px(self) -> tuple[int, int]:
        return (
            points_to_pixels(A4_WIDTH_PT, self.dpi),
            points_to_pixels(A4_HEIGHT_PT, self.dpi),
        )

    def fit_scale(self, width: int, height: int) -> float:
        """Scale that fits a width x height point box inside the printable area."""
        avail_w = A4_WIDTH_PT - 2 * self.margin_pt
        avail_h = A4_HEIGHT_PT - 2 * self.margin_pt
        return min(avail_w / width, avail_h / height)

    def layout_page(self, enhanced: np.ndarray) -> Image.Image:
        """
        Places one enhanced RGBA image on a white A4 page.
        Image pixels are treated as points when fitting, so every page has
        the same physical layout regardless of the render DPI.
        """
        height, width = enhanced.shape[:2]
        scale = self.fit_scale(width, height)
        target_w = max(points_to_pixels(width * scale, self.dpi), 1)
        target_h = max(points_to_pixels(height * scale, self.dpi), 1)

        page_mode = "L" if self.mode.is_binary else "RGB"
        if page_mode == "L":
            picture = Image.fromarray(np.ascontiguousarray(enhanced[..., 0]))
        else:
            picture = Image.fromarray(np.ascontiguousarray(enhanced[..., :3]))
        picture = picture.resize((target_w, target_h), RESAMPLING.LANCZOS)

        page_w, page_h = self.page_size_px
        page = Image.new(page_mode, (page_w, page_h), "white")
        x = (page_w - target_w) // 2
        y = (page_h - target_h) // 2
        page.paste(picture, (x, y))
        return page

    def build_pages(
        self,
        images: Iterable[np.ndarray],
        cancel_event: Optional[threading.Event] = None,
    ) -> list[Image.Image]:
        pages = []
        for index, image in enumerate(images):
            enhanced = self.enhancer.enhance(image, self.mode, cancel_event)
            pages.append(self.layout_page(enhanced))
            logger.debug("Laid out page %d", index + 1)
        return pages

    def write(
        self,
        images: Iterable[np.ndarray],
        output: Union[str, os.PathLike, BinaryIO],
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """
        Writes a PDF with one page per image and returns the page count.
        """
        pages = self.build_pages(images, cancel_event)
        if not pages:
            raise ValueError("No images to write to PDF")

        first, rest = pages[0], pages[1:]
        first.save(
            output,
            format="PDF",
            save_all=True,
            append_images=rest,
            resolution=float(self.dpi),
        )
        logger.info("Wrote %d-page scan PDF", len(pages))
        return len(pages)

    def write_files(
        self,
        paths: Iterable[str],
        output: Union[str, os.PathLike, BinaryIO],
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """
        Loads images from disk and writes them as a PDF. Files that cannot
        be decoded are skipped.
        """
        paths = list(paths)
        if not paths:
            raise ValueError("No input images given")

        images = []
        for path in paths:
            img = ImageToolkit.load_image(path)
            if img is None:
                logger.warning("Skipping undecodable image: %s", path)
                continue
            images.append(img)

        if not images:
            raise ValueError("None of the input images could be decoded")
        return self.write(images, output, cancel_event)
