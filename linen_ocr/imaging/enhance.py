"""Image clean-up ahead of local Tesseract OCR.

Handheld photos of inventory sheets come in tilted, unevenly lit and with
paper texture in the background. The steps here straighten the page, even
out contrast, and binarize it so Tesseract sees dark text on white.
"""

import cv2
import numpy as np
from PIL import Image

from linen_ocr.utils.config import EnhancementConfig
from linen_ocr.utils.logger import get_logger

logger = get_logger(__name__)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an RGB/RGBA array to single-channel grayscale."""
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)


def detect_skew_angle(gray: np.ndarray) -> float:
    """Estimate page rotation from the dominant near-horizontal lines.

    Ruled inventory sheets give strong horizontal edges; the median angle of
    Hough segments within 45 degrees of horizontal is taken as the skew.

    Args:
        gray: Grayscale page image.

    Returns:
        Skew angle in degrees, 0.0 when no usable lines are found.
    """
    edges = cv2.Canny(gray, 50, 150, apertureSize=3)
    lines = cv2.HoughLinesP(
        edges, 1, np.pi / 180, 100, minLineLength=100, maxLineGap=10
    )
    if lines is None:
        return 0.0

    angles = [
        float(np.degrees(np.arctan2(y2 - y1, x2 - x1)))
        for x1, y1, x2, y2 in lines.reshape(-1, 4)
    ]
    angles = [a for a in angles if abs(a) < 45]
    if not angles:
        return 0.0
    return float(np.median(angles))


def deskew(gray: np.ndarray, angle_threshold: float = 0.5) -> np.ndarray:
    """Rotate the page to cancel the detected skew.

    Angles smaller than ``angle_threshold`` degrees are left alone.
    """
    angle = detect_skew_angle(gray)
    if abs(angle) < angle_threshold:
        return gray

    h, w = gray.shape[:2]
    matrix = cv2.getRotationMatrix2D((w // 2, h // 2), angle, 1.0)
    logger.debug("Deskewing page by %.2f degrees", angle)
    return cv2.warpAffine(
        gray,
        matrix,
        (w, h),
        flags=cv2.INTER_CUBIC,
        borderMode=cv2.BORDER_REPLICATE,
    )


def equalize_contrast(
    gray: np.ndarray, clip_limit: float = 2.0, tile_size: int = 8
) -> np.ndarray:
    """Apply CLAHE to flatten uneven lighting across the sheet."""
    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(tile_size, tile_size))
    return clahe.apply(gray)


def binarize(gray: np.ndarray, block_size: int = 31, c: int = 10) -> np.ndarray:
    """Adaptive Gaussian threshold; ``block_size`` is forced odd."""
    if block_size % 2 == 0:
        block_size += 1
    return cv2.adaptiveThreshold(
        gray,
        255,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY,
        block_size,
        c,
    )


def prepare_for_ocr(
    image: Image.Image, config: EnhancementConfig | None = None
) -> np.ndarray:
    """Run the configured enhancement steps on a decoded page photo.

    Args:
        image: Decoded page image.
        config: Which steps to run. Defaults to :class:`EnhancementConfig`.

    Returns:
        Grayscale (or binary) ``uint8`` array ready for Tesseract.
    """
    config = config or EnhancementConfig()
    if image.mode not in ("L", "RGB", "RGBA"):
        image = image.convert("RGB")
    result = to_gray(np.array(image))

    if config.deskew_enabled:
        result = deskew(result)
    if config.contrast_enabled:
        result = equalize_contrast(
            result,
            clip_limit=config.clahe_clip_limit,
            tile_size=config.clahe_tile_size,
        )
    if config.binarize_enabled:
        result = binarize(
            result,
            block_size=config.binarize_block_size,
            c=config.binarize_c,
        )

    logger.debug("Prepared %dx%d page for OCR", result.shape[1], result.shape[0])
    return result
