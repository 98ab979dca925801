"""Shared test fixtures for the linen OCR test suite."""

import io
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

SAMPLE_SHEET_TEXT = (
    "Hotel: Grand Palace\n"
    "Contractor: Clean Linen Services\n"
    "Date: 12/05/2024\n"
    "Contact No: 9876543210\n"
    "Bed Sheet 100 40 140 35 105\n"
    "Bath Towel 80 20 100 30 70\n"
    "Chef Coat 12 4 16 6 10\n"
    "Pillow Cover 60 10 70 15 55\n"
)


def _encode(image: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def make_noise_png() -> Callable[..., bytes]:
    """Factory for random-noise PNGs, which compress poorly."""

    def _make(width: int, height: int, channels: int = 3) -> bytes:
        rng = np.random.default_rng(42)
        pixels = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
        return _encode(Image.fromarray(pixels))

    return _make


@pytest.fixture
def small_png() -> bytes:
    """A tiny PNG well under any realistic ceiling."""
    return _encode(Image.new("RGB", (20, 10), (255, 255, 255)))


@pytest.fixture
def large_png(make_noise_png: Callable[..., bytes]) -> bytes:
    """A noisy 800x600 PNG of roughly 1.4 MB."""
    return make_noise_png(800, 600)


@pytest.fixture
def sheet_text() -> str:
    """OCR text of a typical inventory sheet."""
    return SAMPLE_SHEET_TEXT


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
