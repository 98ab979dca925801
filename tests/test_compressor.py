"""Tests for the adaptive image compressor."""

import io
import math
from collections.abc import Callable

import pytest
from PIL import Image

from linen_ocr.imaging.compressor import (
    CompressionResult,
    ImageDecodeError,
    compress,
    compress_image,
    compute_scale_factor,
    decode_image,
)
from linen_ocr.utils.config import CompressionConfig

_JPEG_MAGIC = b"\xff\xd8"


class TestComputeScaleFactor:
    """Tests for the square-root scale factor."""

    def test_quarter_size_halves_dimensions(self) -> None:
        assert compute_scale_factor(4_000_000, 1_000_000) == pytest.approx(0.5)

    def test_larger_inputs_scale_more(self) -> None:
        small = compute_scale_factor(2_000_000, 1_000_000)
        large = compute_scale_factor(8_000_000, 1_000_000)
        assert large < small < 1.0

    def test_never_upscales(self) -> None:
        assert compute_scale_factor(500, 1000) == 1.0

    def test_zero_size(self) -> None:
        assert compute_scale_factor(0, 1000) == 1.0


class TestPassthrough:
    """Images within the ceiling are returned untouched."""

    def test_small_image_returned_as_is(self, small_png: bytes) -> None:
        result = compress_image(small_png, max_size_bytes=1024 * 1024)
        assert result.data == small_png
        assert result.was_compressed is False
        assert result.quality is None
        assert result.compressed_size == result.original_size

    def test_exactly_at_ceiling(self, small_png: bytes) -> None:
        result = compress_image(small_png, max_size_bytes=len(small_png))
        assert result.data is small_png

    def test_passthrough_does_not_decode(self) -> None:
        assert compress(b"not an image", 1024) == b"not an image"

    def test_format_preserved(self, small_png: bytes) -> None:
        out = compress(small_png, 1024 * 1024)
        assert Image.open(io.BytesIO(out)).format == "PNG"


class TestCompression:
    """Tests for oversized inputs."""

    def test_output_is_jpeg(self, large_png: bytes) -> None:
        out = compress(large_png, 200_000)
        assert out[:2] == _JPEG_MAGIC
        assert Image.open(io.BytesIO(out)).format == "JPEG"

    def test_fits_ceiling_or_hits_floor(self, large_png: bytes) -> None:
        result = compress_image(large_png, max_size_bytes=200_000)
        assert result.was_compressed is True
        if result.compressed_size > 200_000:
            assert result.reached_floor
        assert result.compressed_size == len(result.data)

    def test_dimensions_scaled_by_sqrt_ratio(self, large_png: bytes) -> None:
        ceiling = 200_000
        result = compress_image(large_png, max_size_bytes=ceiling)
        scale = math.sqrt(ceiling / len(large_png))
        assert result.width == int(800 * scale)
        assert result.height == int(600 * scale)
        decoded = Image.open(io.BytesIO(result.data))
        assert decoded.size == (result.width, result.height)

    def test_larger_input_gives_smaller_output_dimensions(
        self, make_noise_png: Callable[..., bytes]
    ) -> None:
        ceiling = 100_000
        medium = compress_image(make_noise_png(400, 300), max_size_bytes=ceiling)
        large = compress_image(make_noise_png(1000, 750), max_size_bytes=ceiling)
        assert large.width / 1000 < medium.width / 400

    def test_starts_at_initial_quality(self, large_png: bytes) -> None:
        result = compress_image(large_png, max_size_bytes=len(large_png) - 1)
        assert result.quality == 80

    def test_floor_result_returned_when_still_too_big(
        self, make_noise_png: Callable[..., bytes]
    ) -> None:
        # No JPEG fits in 100 bytes, so the ladder runs to the floor.
        result = compress_image(make_noise_png(400, 400), max_size_bytes=100)
        assert result.quality == 10
        assert result.reached_floor is True
        assert result.compressed_size > 100
        assert result.data[:2] == _JPEG_MAGIC

    def test_custom_quality_ladder(self, make_noise_png: Callable[..., bytes]) -> None:
        config = CompressionConfig(initial_quality=60, quality_step=25, min_quality=20)
        result = compress_image(make_noise_png(400, 400), 100, config=config)
        assert result.quality == 20
        assert result.reached_floor is True

    def test_rgba_input_flattened(self, make_noise_png: Callable[..., bytes]) -> None:
        data = make_noise_png(300, 300, channels=4)
        result = compress_image(data, max_size_bytes=len(data) // 4)
        assert Image.open(io.BytesIO(result.data)).mode == "RGB"

    def test_result_type(self, large_png: bytes) -> None:
        assert isinstance(compress_image(large_png, 200_000), CompressionResult)


class TestDecodeErrors:
    """Tests for undecodable input."""

    def test_garbage_over_ceiling_raises(self) -> None:
        with pytest.raises(ImageDecodeError):
            compress(b"x" * 5000, 1000)

    def test_truncated_image_raises(self, large_png: bytes) -> None:
        with pytest.raises(ImageDecodeError):
            compress(large_png[: len(large_png) // 2], 1000)

    def test_decode_image_valid(self, small_png: bytes) -> None:
        assert decode_image(small_png).size == (20, 10)

    def test_decode_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_image(b"")
