"""Select the OCR engine named in the configuration."""

from linen_ocr.utils.config import AppConfig, OCRProvider

from .base import OCREngine
from .ocr_space import OCRSpaceClient
from .tesseract_engine import TesseractEngine


def create_engine(config: AppConfig) -> OCREngine:
    """Build the OCR engine for ``config.ocr.provider``."""
    if config.ocr.provider == OCRProvider.TESSERACT:
        return TesseractEngine.from_config(config.ocr, config.enhancement)
    return OCRSpaceClient.from_config(config.ocr)
