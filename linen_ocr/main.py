"""``linen-ocr-server``: serve the sheet extraction API with uvicorn."""

import uvicorn

from linen_ocr.api.app import app
from linen_ocr.utils.config import load_config
from linen_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    """Load ``configs/config.yaml`` and serve the API on port 8000."""
    config = load_config()
    setup_logging(config.log_level)
    logger.info("Starting inventory API with %s OCR", config.ocr.provider.value)
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
