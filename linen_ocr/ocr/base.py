"""Shared result and error types for OCR engines."""

from dataclasses import dataclass
from typing import Protocol


class OCRError(RuntimeError):
    """Raised when an OCR engine cannot return text for an image."""


@dataclass
class OCRResult:
    """Text recognised from one image."""

    text: str
    engine: str
    confidence: float | None = None
    processing_time_ms: float = 0.0


class OCREngine(Protocol):
    """Anything that turns image bytes into text."""

    name: str

    def extract_text(self, image: bytes, filename: str = "image.jpg") -> OCRResult:
        ...
