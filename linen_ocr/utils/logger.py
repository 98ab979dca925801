"""Console logging for inventory scans.

The ``linen-ocr`` CLI and the ``linen-ocr-server`` entry point both call
:func:`setup_logging` once at startup. Library modules only ask for a named
logger, so embedding applications keep control of handlers.
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Send scan progress and OCR errors to stdout.

    Leaves the root logger untouched when a handler is already installed,
    e.g. by uvicorn or a host application.

    Args:
        level: Level name such as ``"DEBUG"`` or ``"warning"``. Unknown names
            fall back to INFO.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Logger for a ``linen_ocr`` module; pass ``__name__``."""
    return logging.getLogger(name)
