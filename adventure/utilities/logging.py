from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "text-adventure"


def setup_logging(log_level: str | None = None, log_file: str | None = None) -> logging.Logger:
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_file = log_file or os.getenv("LOG_FILE", "adventure.log")

    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    level = getattr(logging, log_level, logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    file_handler = RotatingFileHandler(log_file, maxBytes=10_485_760, backupCount=5)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # Narration goes to stdout; only problems reach the console.
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(max(level, logging.WARNING))
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    logger.propagate = False

    return logger
