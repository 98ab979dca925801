"""End-to-end scan of one inventory sheet photo.

Reads the image, compresses it to the upload ceiling, sends it to the
configured OCR engine, and parses the returned text.
"""

import time
from dataclasses import dataclass
from pathlib import Path

from linen_ocr.extraction.inventory_parser import InventoryParser
from linen_ocr.extraction.models import InventoryRecord
from linen_ocr.imaging.compressor import compress_image
from linen_ocr.ocr.base import OCREngine
from linen_ocr.ocr.factory import create_engine
from linen_ocr.utils.config import AppConfig
from linen_ocr.utils.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")


@dataclass
class ScanResult:
    """Parsed record plus what happened on the way to it."""

    filename: str
    record: InventoryRecord
    raw_text: str
    original_size: int
    uploaded_size: int
    was_compressed: bool
    ocr_engine: str
    processing_time_ms: float

    def to_dict(self) -> dict[str, object]:
        return {
            "filename": self.filename,
            "data": self.record.to_dict(),
            "raw_text": self.raw_text,
            "original_size": self.original_size,
            "uploaded_size": self.uploaded_size,
            "was_compressed": self.was_compressed,
            "ocr_engine": self.ocr_engine,
            "processing_time_ms": round(self.processing_time_ms, 1),
        }


def upload_name(filename: str, was_compressed: bool) -> str:
    """Filename to send with the upload; compressed output is always JPEG."""
    if not was_compressed:
        return filename
    return str(Path(filename).with_suffix(".jpg"))


class InventoryScanner:
    """Compress, OCR and parse inventory sheet photos.

    Args:
        config: Application configuration.
        engine: OCR engine to use. Defaults to the one named in ``config``.
    """

    def __init__(self, config: AppConfig, engine: OCREngine | None = None) -> None:
        self.config = config
        self.engine = engine or create_engine(config)
        self.parser = InventoryParser()

    def scan(self, source: Path | bytes, filename: str | None = None) -> ScanResult:
        """Scan one image from a path or raw bytes.

        Args:
            source: Image file path or encoded image bytes.
            filename: Display name; defaults to the path's name.

        Returns:
            Scan result with the parsed record.

        Raises:
            ImageDecodeError: If the image needs compressing but cannot be
                decoded.
            OCRError: If the OCR engine fails.
        """
        start = time.time()
        if isinstance(source, bytes):
            data = source
            filename = filename or "image.jpg"
        else:
            path = Path(source)
            data = path.read_bytes()
            filename = filename or path.name

        logger.info("Scanning %s (%d bytes)", filename, len(data))
        compression = compress_image(
            data,
            max_size_bytes=self.config.compression.max_size_bytes,
            config=self.config.compression,
        )
        ocr_result = self.engine.extract_text(
            compression.data, upload_name(filename, compression.was_compressed)
        )
        record = self.parser.parse(ocr_result.text)
        elapsed_ms = (time.time() - start) * 1000

        logger.info(
            "Scanned %s: %d items in %.0f ms",
            filename,
            record.item_count,
            elapsed_ms,
        )
        return ScanResult(
            filename=filename,
            record=record,
            raw_text=ocr_result.text,
            original_size=compression.original_size,
            uploaded_size=compression.compressed_size,
            was_compressed=compression.was_compressed,
            ocr_engine=ocr_result.engine,
            processing_time_ms=elapsed_ms,
        )
