"""Client for the hosted OCR.space parse endpoint.

The free tier accepts uploads up to about 1 MB, which is why images go
through the compressor first. Engine 2 is used by default; it copes better
with handwritten digits in table cells.
"""

import mimetypes
import os
import time
from typing import Any

import requests

from linen_ocr.utils.config import OCRConfig
from linen_ocr.utils.logger import get_logger

from .base import OCRError, OCRResult

logger = get_logger(__name__)

API_KEY_ENV = "OCR_SPACE_API_KEY"


def _error_message(payload: dict[str, Any]) -> str:
    message = payload.get("ErrorMessage") or payload.get("ErrorDetails")
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message if m)
    return str(message) if message else "OCR failed"


class OCRSpaceClient:
    """Sends images to OCR.space and returns the parsed text.

    Args:
        api_key: OCR.space API key. Falls back to ``$OCR_SPACE_API_KEY``.
        api_url: Parse endpoint URL.
        language: OCR.space language code.
        ocr_engine: OCR.space engine number (1, 2 or 3).
        detect_orientation: Ask the service to auto-rotate the image.
        scale: Ask the service to upscale low-resolution images.
        timeout: Request timeout in seconds.
        session: Optional ``requests.Session`` to reuse connections.
    """

    name = "ocr_space"

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str = "https://api.ocr.space/parse/image",
        language: str = "eng",
        ocr_engine: int = 2,
        detect_orientation: bool = True,
        scale: bool = True,
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key or os.getenv(API_KEY_ENV)
        self.api_url = api_url
        self.language = language
        self.ocr_engine = ocr_engine
        self.detect_orientation = detect_orientation
        self.scale = scale
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: OCRConfig) -> "OCRSpaceClient":
        return cls(
            api_key=config.api_key,
            api_url=config.api_url,
            language=config.language,
            ocr_engine=config.ocr_engine,
            detect_orientation=config.detect_orientation,
            scale=config.scale,
            timeout=config.timeout,
        )

    def _form_fields(self) -> dict[str, str]:
        return {
            "apikey": self.api_key or "",
            "language": self.language,
            "isOverlayRequired": "false",
            "detectOrientation": str(self.detect_orientation).lower(),
            "scale": str(self.scale).lower(),
            "OCREngine": str(self.ocr_engine),
        }

    def extract_text(self, image: bytes, filename: str = "image.jpg") -> OCRResult:
        """Upload an image and return the recognised text.

        Args:
            image: Encoded image bytes.
            filename: Name sent with the upload; the service uses its
                extension to detect the file type.

        Returns:
            Recognised text from all parsed pages, joined by newlines.

        Raises:
            OCRError: On missing API key, transport or HTTP errors, or when
                the service reports a processing failure.
        """
        if not self.api_key:
            raise OCRError(f"No OCR.space API key configured (set {API_KEY_ENV})")

        content_type = mimetypes.guess_type(filename)[0] or "image/jpeg"
        start = time.time()
        try:
            response = self.session.post(
                self.api_url,
                data=self._form_fields(),
                files={"file": (filename, image, content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.error("OCR.space request failed: %s", exc)
            raise OCRError(f"OCR request failed: {exc}") from exc
        except ValueError as exc:
            raise OCRError("OCR.space returned a non-JSON response") from exc

        if payload.get("OCRExitCode") != 1 or payload.get("IsErroredOnProcessing"):
            message = _error_message(payload)
            logger.error("OCR.space could not process %s: %s", filename, message)
            raise OCRError(message)

        parsed = payload.get("ParsedResults") or []
        text = "\n".join(page.get("ParsedText", "") for page in parsed)
        elapsed_ms = (time.time() - start) * 1000

        logger.info(
            "OCR.space returned %d characters for %s in %.0f ms",
            len(text),
            filename,
            elapsed_ms,
        )
        return OCRResult(
            text=text,
            engine=self.name,
            processing_time_ms=elapsed_ms,
        )
