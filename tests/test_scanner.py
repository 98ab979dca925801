"""Tests for the end-to-end scanner pipeline."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from linen_ocr.imaging.compressor import ImageDecodeError
from linen_ocr.ocr.base import OCRError, OCRResult
from linen_ocr.scanner import InventoryScanner, ScanResult, upload_name
from linen_ocr.utils.config import AppConfig, CompressionConfig


def _engine(text: str = "Towel 10 5 12 2 13\nChef Coat 3 1 4 0 4") -> MagicMock:
    engine = MagicMock()
    engine.extract_text.return_value = OCRResult(text=text, engine="fake")
    return engine


class TestUploadName:
    """Tests for the upload filename."""

    def test_uncompressed_keeps_name(self) -> None:
        assert upload_name("sheet.png", False) == "sheet.png"

    def test_compressed_becomes_jpg(self) -> None:
        assert upload_name("sheet.png", True) == "sheet.jpg"


class TestInventoryScanner:
    """Tests for InventoryScanner.scan."""

    def test_scan_bytes(self, small_png: bytes) -> None:
        engine = _engine()
        scanner = InventoryScanner(AppConfig(), engine=engine)
        result = scanner.scan(small_png, "sheet.png")

        assert isinstance(result, ScanResult)
        assert result.filename == "sheet.png"
        assert result.was_compressed is False
        assert result.uploaded_size == len(small_png)
        assert result.ocr_engine == "fake"
        assert [i.item for i in result.record.linen_items] == ["Towel"]
        assert [i.item for i in result.record.uniform_items] == ["Chef Coat"]
        engine.extract_text.assert_called_once_with(small_png, "sheet.png")

    def test_scan_path(self, tmp_path: Path, small_png: bytes) -> None:
        image_path = tmp_path / "monday.png"
        image_path.write_bytes(small_png)
        result = InventoryScanner(AppConfig(), engine=_engine()).scan(image_path)
        assert result.filename == "monday.png"

    def test_oversized_image_compressed_before_ocr(self, large_png: bytes) -> None:
        engine = _engine()
        config = AppConfig(compression=CompressionConfig(max_size_bytes=200_000))
        result = InventoryScanner(config, engine=engine).scan(large_png, "big.png")

        sent_bytes, sent_name = engine.extract_text.call_args[0]
        assert result.was_compressed is True
        assert result.original_size == len(large_png)
        assert result.uploaded_size == len(sent_bytes)
        assert sent_bytes[:2] == b"\xff\xd8"
        assert sent_name == "big.jpg"

    def test_raw_text_kept(self, small_png: bytes) -> None:
        result = InventoryScanner(AppConfig(), engine=_engine("hello")).scan(small_png)
        assert result.raw_text == "hello"
        assert result.record.item_count == 0

    def test_ocr_error_propagates(self, small_png: bytes) -> None:
        engine = MagicMock()
        engine.extract_text.side_effect = OCRError("quota exceeded")
        with pytest.raises(OCRError):
            InventoryScanner(AppConfig(), engine=engine).scan(small_png)

    def test_decode_error_propagates(self) -> None:
        config = AppConfig(compression=CompressionConfig(max_size_bytes=10))
        with pytest.raises(ImageDecodeError):
            InventoryScanner(config, engine=_engine()).scan(b"x" * 100)

    def test_to_dict(self, small_png: bytes) -> None:
        data = InventoryScanner(AppConfig(), engine=_engine()).scan(small_png).to_dict()
        assert data["data"]["linen_items"][0]["item"] == "Towel"
        assert data["was_compressed"] is False
        assert "raw_text" in data

    def test_default_engine_from_config(self) -> None:
        scanner = InventoryScanner(AppConfig())
        assert scanner.engine.name == "ocr_space"
