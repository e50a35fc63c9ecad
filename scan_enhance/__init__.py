"""scan_enhance package — document scan enhancement pipelines
exposed as a standard importable package."""

from .modules.errors import (
    EmptyImageError,
    EnhancementCancelledError,
    EnhancementError,
    InvalidDimensionsError,
)
from .modules.pipeline import EnhanceMode, ScanEnhancer, enhance, enhance_async, enhance_gray

__all__ = [
    "EnhanceMode",
    "ScanEnhancer",
    "enhance",
    "enhance_async",
    "enhance_gray",
    "EnhancementError",
    "InvalidDimensionsError",
    "EmptyImageError",
    "EnhancementCancelledError",
]
__version__ = "0.1.0"
