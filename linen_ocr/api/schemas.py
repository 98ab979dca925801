"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field


class LineItemSchema(BaseModel):
    """One linen or uniform table row."""

    sr_no: int = Field(ge=1)
    item: str
    opening_balance: str = "0"
    clean_received: str = "0"
    total: str = "0"
    soil_sent: str = "0"
    closing_balance: str = "0"
    remark: str = ""


class InventoryHeaderSchema(BaseModel):
    """Sheet header fields."""

    company: str = ""
    sr_no: str = ""
    contractor_name: str = ""
    date: str = ""
    contact_no: str = ""


class InventoryRecordSchema(BaseModel):
    """A parsed (and possibly user-corrected) inventory sheet."""

    header: InventoryHeaderSchema = Field(default_factory=InventoryHeaderSchema)
    linen_items: list[LineItemSchema] = Field(default_factory=list)
    uniform_items: list[LineItemSchema] = Field(default_factory=list)


class ParseRequest(BaseModel):
    """Raw OCR text to parse."""

    text: str


class ExtractionResponse(BaseModel):
    """Response schema for an image extraction request."""

    success: bool
    document_id: str
    filename: str
    data: InventoryRecordSchema
    raw_text: str
    original_size: int
    uploaded_size: int
    was_compressed: bool
    ocr_engine: str
    processing_time_ms: float


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    ocr_provider: str
    tesseract_available: bool
