"""Local Tesseract OCR for offline use or when the hosted quota runs out."""

import time

import numpy as np
import pytesseract

from linen_ocr.imaging.compressor import decode_image
from linen_ocr.imaging.enhance import prepare_for_ocr
from linen_ocr.utils.config import EnhancementConfig, OCRConfig
from linen_ocr.utils.logger import get_logger

from .base import OCRError, OCRResult

logger = get_logger(__name__)


def average_confidence(data: dict[str, list]) -> float:
    """Mean word confidence (0-1) from ``pytesseract.image_to_data`` output.

    Entries with a non-positive confidence or empty text are layout rows,
    not words, and are skipped.
    """
    total = 0.0
    count = 0
    for conf, text in zip(data.get("conf", []), data.get("text", []), strict=False):
        conf = float(conf)
        if conf > 0 and str(text).strip():
            total += conf
            count += 1
    return total / count / 100.0 if count else 0.0


class TesseractEngine:
    """Runs Tesseract on an enhanced copy of the page photo.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the one on ``PATH``.
        lang: Tesseract language code.
        psm: Page segmentation mode; 6 treats the sheet as one text block,
            which keeps table rows on single lines.
        enhancement: Pre-OCR image clean-up settings.
    """

    name = "tesseract"

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        lang: str = "eng",
        psm: int = 6,
        enhancement: EnhancementConfig | None = None,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.lang = lang
        self.psm = psm
        self.enhancement = enhancement or EnhancementConfig()

    @classmethod
    def from_config(
        cls, config: OCRConfig, enhancement: EnhancementConfig | None = None
    ) -> "TesseractEngine":
        return cls(
            tesseract_cmd=config.tesseract_cmd,
            lang=config.tesseract_lang,
            psm=config.psm,
            enhancement=enhancement,
        )

    def recognize(self, page: np.ndarray) -> OCRResult:
        """Run Tesseract on an already prepared page array.

        Raises:
            OCRError: If Tesseract is missing or fails.
        """
        config = f"--psm {self.psm}"
        start = time.time()
        try:
            text = pytesseract.image_to_string(page, lang=self.lang, config=config)
            data = pytesseract.image_to_data(
                page,
                lang=self.lang,
                config=config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            logger.error("Tesseract failed: %s", exc)
            raise OCRError(f"Tesseract failed: {exc}") from exc

        confidence = average_confidence(data)
        elapsed_ms = (time.time() - start) * 1000
        logger.info(
            "Tesseract read %d characters with average confidence %.2f",
            len(text),
            confidence,
        )
        return OCRResult(
            text=text,
            engine=self.name,
            confidence=confidence,
            processing_time_ms=elapsed_ms,
        )

    def extract_text(self, image: bytes, filename: str = "image.jpg") -> OCRResult:
        """Decode, enhance and OCR an image.

        Raises:
            ImageDecodeError: If ``image`` is not a decodable image.
            OCRError: If Tesseract is missing or fails.
        """
        logger.debug("Running Tesseract on %s", filename)
        page = prepare_for_ocr(decode_image(image), self.enhancement)
        return self.recognize(page)
