"""
Error taxonomy for the enhancement engine.
"""

from typing import Any, Optional


class EnhancementError(Exception):
    """Base class for enhancement engine errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class InvalidDimensionsError(EnhancementError):
    """Raised when a buffer length does not match width * height."""


class EmptyImageError(EnhancementError):
    """Raised when an image has zero width or height."""


class EnhancementCancelledError(EnhancementError):
    """Raised when a caller cancels an enhancement between stages."""
