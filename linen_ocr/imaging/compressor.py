"""Adaptive JPEG compression for inventory sheet photographs.

Phone photos of paper sheets are usually several megabytes, while the hosted
OCR endpoint rejects uploads above roughly 1 MB. Oversized images are scaled
down by the square root of the size ratio and re-encoded as JPEG with a
falling quality ladder until they fit or the quality floor is reached.
"""

import io
import math
from dataclasses import dataclass

from PIL import Image, ImageOps

from linen_ocr.utils.config import DEFAULT_MAX_SIZE_BYTES, CompressionConfig
from linen_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class ImageDecodeError(ValueError):
    """Raised when input bytes cannot be decoded as an image."""


@dataclass
class CompressionResult:
    """Outcome of a compression pass."""

    data: bytes
    original_size: int
    compressed_size: int
    width: int | None
    height: int | None
    quality: int | None
    was_compressed: bool
    reached_floor: bool = False


def compute_scale_factor(original_size: int, max_size_bytes: int) -> float:
    """Linear scale factor that shrinks pixel area in proportion to bytes.

    Args:
        original_size: Size of the source image in bytes.
        max_size_bytes: Target byte ceiling.

    Returns:
        ``sqrt(max_size_bytes / original_size)``, capped at 1.0.
    """
    if original_size <= 0:
        return 1.0
    return min(1.0, math.sqrt(max_size_bytes / original_size))


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes with Pillow, honouring EXIF orientation.

    Raises:
        ImageDecodeError: If the bytes are not a readable image.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Cannot decode image: {exc}") from exc
    return ImageOps.exif_transpose(image)


def _to_rgb(image: Image.Image) -> Image.Image:
    """Flatten alpha/palette images onto white so they can be saved as JPEG."""
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA", "P"):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=quality, optimize=True)
    return buf.getvalue()


def compress_image(
    data: bytes,
    max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
    config: CompressionConfig | None = None,
) -> CompressionResult:
    """Compress an image so that it fits under a byte ceiling.

    Images already within the ceiling are returned untouched. Larger ones are
    resized by :func:`compute_scale_factor` and encoded as JPEG starting at
    ``config.initial_quality``, dropping by ``config.quality_step`` while the
    output is still too large. Once ``config.min_quality`` is reached the
    result is returned even if it is still over the ceiling.

    Args:
        data: Raw bytes of the source image (any format Pillow reads).
        max_size_bytes: Target byte ceiling.
        config: Quality ladder settings. Defaults to :class:`CompressionConfig`.

    Returns:
        Compression result with the output bytes and the parameters used.

    Raises:
        ImageDecodeError: If ``data`` is not a decodable image.
    """
    config = config or CompressionConfig()
    original_size = len(data)

    if original_size <= max_size_bytes:
        logger.debug(
            "Image is %d bytes, within %d byte ceiling; no compression",
            original_size,
            max_size_bytes,
        )
        return CompressionResult(
            data=data,
            original_size=original_size,
            compressed_size=original_size,
            width=None,
            height=None,
            quality=None,
            was_compressed=False,
        )

    image = decode_image(data)
    scale = compute_scale_factor(original_size, max_size_bytes)
    width = max(1, int(image.width * scale))
    height = max(1, int(image.height * scale))
    resized = _to_rgb(image).resize((width, height), Image.Resampling.LANCZOS)

    quality = config.initial_quality
    encoded = _encode_jpeg(resized, quality)
    while len(encoded) > max_size_bytes and quality > config.min_quality:
        quality = max(config.min_quality, quality - config.quality_step)
        encoded = _encode_jpeg(resized, quality)

    if len(encoded) > max_size_bytes:
        logger.warning(
            "Could not compress below %d bytes; returning %d bytes at quality %d",
            max_size_bytes,
            len(encoded),
            quality,
        )
    else:
        logger.info(
            "Compressed image %d -> %d bytes (%dx%d, quality %d)",
            original_size,
            len(encoded),
            width,
            height,
            quality,
        )

    return CompressionResult(
        data=encoded,
        original_size=original_size,
        compressed_size=len(encoded),
        width=width,
        height=height,
        quality=quality,
        was_compressed=True,
        reached_floor=quality <= config.min_quality,
    )


def compress(data: bytes, max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES) -> bytes:
    """Return ``data`` compressed to fit ``max_size_bytes`` where possible.

    Raises:
        ImageDecodeError: If ``data`` needs compressing but is not an image.
    """
    return compress_image(data, max_size_bytes).data
