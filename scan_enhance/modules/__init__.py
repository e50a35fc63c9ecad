"""
Enhancement engine modules.
"""

from .errors import (
    EmptyImageError,
    EnhancementCancelledError,
    EnhancementError,
    InvalidDimensionsError,
)
from .image_toolkit import ImageToolkit
from .pdf_builder import ScanPdfBuilder
from .pipeline import EnhanceMode, ScanEnhancer

__all__ = [
    "EnhanceMode",
    "ScanEnhancer",
    "ImageToolkit",
    "ScanPdfBuilder",
    "EnhancementError",
    "InvalidDimensionsError",
    "EmptyImageError",
    "EnhancementCancelledError",
]
