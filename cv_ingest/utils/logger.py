"""Logging configuration for the CV ingestion pipeline."""

import logging
import sys
from typing import Optional

from cv_ingest.config import LOG_LEVEL


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a configured logger instance. LOG_LEVEL, when set, applies if no level is passed."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
    if level is None and LOG_LEVEL:
        level = logging.getLevelName(LOG_LEVEL.upper())
    if isinstance(level, int):
        logger.setLevel(level)
    return logger
