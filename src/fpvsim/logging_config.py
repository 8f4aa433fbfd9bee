"""Console logging setup for the ``fpvsim`` package loggers."""

from __future__ import annotations

import logging
from logging import Logger

LOGGER_NAME = "fpvsim"


def setup_logging(level: str = "INFO") -> Logger:
    """Attach a console handler to the package logger.

    Safe to call more than once: an existing handler is reused and only the
    level is updated.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    if not logger.handlers:
        ch = logging.StreamHandler()
        fmt = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
        )
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    for handler in logger.handlers:
        handler.setLevel(logger.level)

    logger.debug("Logger initialized.")
    return logger
