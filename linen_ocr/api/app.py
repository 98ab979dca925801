"""FastAPI application for linen inventory extraction.

Provides REST endpoints to extract a record from a sheet photo, parse
already recognised text, export a reviewed record as CSV, and check health.
"""

import shutil
import time
import uuid
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from linen_ocr import __version__
from linen_ocr.export.csv_export import record_to_csv
from linen_ocr.extraction.inventory_parser import InventoryParser
from linen_ocr.extraction.models import InventoryRecord
from linen_ocr.imaging.compressor import ImageDecodeError
from linen_ocr.ocr.base import OCRError
from linen_ocr.scanner import InventoryScanner
from linen_ocr.utils.config import load_config
from linen_ocr.utils.logger import get_logger

from .schemas import (
    ExtractionResponse,
    HealthResponse,
    InventoryRecordSchema,
    ParseRequest,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Linen Inventory OCR API",
    description="Extract linen and uniform counts from inventory sheet photos",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/bmp",
    "image/webp",
    "application/octet-stream",
}


def _get_scanner() -> InventoryScanner:
    """Build a scanner from the current configuration."""
    return InventoryScanner(load_config())


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    config = load_config()
    return HealthResponse(
        status="healthy",
        version=__version__,
        ocr_provider=config.ocr.provider.value,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.post("/extract", response_model=ExtractionResponse)
def extract_sheet(
    file: Annotated[UploadFile, File(...)],
) -> ExtractionResponse:
    """Extract an inventory record from an uploaded sheet photo.

    Declared without ``async`` so the blocking OCR call runs in the
    threadpool instead of on the event loop.

    Args:
        file: Uploaded image (PNG, JPEG, GIF, BMP or WebP).

    Returns:
        Parsed record, raw OCR text and upload details.
    """
    if file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )

    try:
        scanner = _get_scanner()
        content = file.file.read()
        result = scanner.scan(content, file.filename or "image.jpg")
    except ImageDecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except OCRError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ExtractionResponse(
        success=True,
        document_id=f"EXT-{uuid.uuid4().hex[:12]}",
        filename=result.filename,
        data=InventoryRecordSchema(**result.record.to_dict()),
        raw_text=result.raw_text,
        original_size=result.original_size,
        uploaded_size=result.uploaded_size,
        was_compressed=result.was_compressed,
        ocr_engine=result.ocr_engine,
        processing_time_ms=result.processing_time_ms,
    )


@app.post("/parse", response_model=InventoryRecordSchema)
async def parse_text(request: ParseRequest) -> InventoryRecordSchema:
    """Parse OCR text that was recognised elsewhere."""
    record = InventoryParser().parse(request.text)
    return InventoryRecordSchema(**record.to_dict())


@app.post("/export/csv")
async def export_csv(record: InventoryRecordSchema) -> Response:
    """Render a reviewed record as a CSV report download."""
    csv_text = record_to_csv(InventoryRecord.from_dict(record.model_dump()))
    filename = f"linen_inventory_{time.strftime('%Y-%m-%d')}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
