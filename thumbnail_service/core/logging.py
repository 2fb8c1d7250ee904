"""
Logging configuration for the Thumbnail Service.
"""

import logging
import sys
import os
from datetime import datetime

from thumbnail_service.config import get_settings

settings = get_settings()

# Configure logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

if settings.LOG_LEVEL:
    LOG_LEVEL = logging.getLevelName(settings.LOG_LEVEL.upper())
else:
    LOG_LEVEL = logging.DEBUG if settings.DEV_MODE else logging.INFO


def setup_logging():
    """
    Set up logging configuration.

    A dated log file is written only when LOG_DIR is configured.

    Returns:
        Logger instance
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        current_date = datetime.now().strftime("%Y-%m-%d")
        log_file = os.path.join(settings.LOG_DIR, f"thumbnail_service_{current_date}.log")
        handlers.append(logging.FileHandler(log_file))

    # Configure root logger
    logging.basicConfig(
        level=LOG_LEVEL,
        format=LOG_FORMAT,
        handlers=handlers
    )

    # Set log levels for libraries to avoid excessive logs
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.INFO)

    # Create app logger
    app_logger = logging.getLogger("thumbnail_service")
    app_logger.setLevel(LOG_LEVEL)

    return app_logger


# Create logger instance
logger = setup_logging()
