"""Logging setup shared by the application entry points."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_NOISY_LOGGERS = ("httpx", "httpcore", "multipart")


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the root handler once and return the ``sumx`` logger."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger("sumx")
    logger.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger


__all__ = ["configure_logging", "LOG_FORMAT"]
