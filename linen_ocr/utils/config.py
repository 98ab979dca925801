"""Configuration for the linen inventory OCR pipeline.

Settings live in a YAML file (``configs/config.yaml`` by default) and are
validated into pydantic models. Any section missing from the file keeps its
defaults.
"""

import logging
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_BYTES = 900 * 1024


class OCRProvider(StrEnum):
    """OCR backends the scanner can hand images to."""

    OCR_SPACE = "ocr_space"
    TESSERACT = "tesseract"


class CompressionConfig(BaseModel):
    """Upload size ceiling and JPEG quality ladder for the compressor."""

    max_size_bytes: int = Field(default=DEFAULT_MAX_SIZE_BYTES, gt=0)
    initial_quality: int = Field(default=80, ge=1, le=95)
    quality_step: int = Field(default=10, ge=1)
    min_quality: int = Field(default=10, ge=1, le=95)

    @model_validator(mode="after")
    def check_quality_ladder(self) -> "CompressionConfig":
        if self.min_quality > self.initial_quality:
            raise ValueError(
                f"min_quality ({self.min_quality}) must not exceed "
                f"initial_quality ({self.initial_quality})"
            )
        return self


class OCRConfig(BaseModel):
    """Settings for the hosted OCR.space API and the local Tesseract engine."""

    provider: OCRProvider = OCRProvider.OCR_SPACE
    api_url: str = "https://api.ocr.space/parse/image"
    api_key: str | None = None
    language: str = "eng"
    ocr_engine: int = 2
    detect_orientation: bool = True
    scale: bool = True
    timeout: float = 60.0
    tesseract_cmd: str | None = None
    tesseract_lang: str = "eng"
    psm: int = 6


class EnhancementConfig(BaseModel):
    """Image clean-up applied before local Tesseract OCR."""

    deskew_enabled: bool = True
    contrast_enabled: bool = True
    clahe_clip_limit: float = 2.0
    clahe_tile_size: int = 8
    binarize_enabled: bool = True
    binarize_block_size: int = 31
    binarize_c: int = 10


class AppConfig(BaseModel):
    """Top-level application configuration."""

    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    enhancement: EnhancementConfig = Field(default_factory=EnhancementConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
