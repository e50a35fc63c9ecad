"""
Configuration module for the scan enhancement tools.

This module defines the settings schema using Pydantic BaseSettings,
supporting environment variable overrides and LRU caching for performance.
"""

import logging
from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scan_enhance.modules.pipeline import EnhanceMode


class Settings(BaseSettings):
    """
    Settings for the scan enhancement CLI and helpers.

    Attributes:
        default_mode: Enhancement mode used when none is given.
        preview_max_side: Longest side of preview images, in pixels.
        jpeg_quality: JPEG quality for non-binary modes.
        max_image_size_mb: Largest accepted input file.
        pdf_dpi: Render resolution of scan PDF pages.
        pdf_margin_pt: Page margin of scan PDFs, in points.
        log_level: Root log level.
        json_logs: Emit structured JSON logs instead of plain text.
    """

    default_mode: EnhanceMode = EnhanceMode.BW_DOCUMENT
    preview_max_side: int = 1200
    jpeg_quality: int = 98
    max_image_size_mb: int = 50

    pdf_dpi: int = 300
    pdf_margin_pt: float = 36.0

    log_level: str = "INFO"
    json_logs: bool = True

    model_config = SettingsConfigDict(
        env_prefix="SCAN_ENHANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("jpeg_quality")
    @classmethod
    def validate_jpeg_quality(cls, value: int) -> int:
        if not 1 <= value <= 100:
            raise ValueError("jpeg_quality must be between 1 and 100")
        return value

    @field_validator("preview_max_side", "pdf_dpi", "max_image_size_mb")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the application settings.
    """
    logging.info("Loading scan-enhance settings from environment and .env file.")
    try:
        return Settings()
    except ValidationError as e:
        logging.error(f"Settings validation error: {e}")
        raise
