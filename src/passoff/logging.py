"""Lightweight logging helpers for passoff.

Centralizes acquisition and one-time configuration of the package logger.
Standard library only, so host applications (the grading server, the admin
API) can attach their own handlers and formatters.
"""

from __future__ import annotations

import logging
from typing import Any

LOGGER_NAME = "passoff"
_configured = False


def get_logger(area: str | None = None) -> logging.Logger:
    """Return the shared package logger, or a child logger for ``area``."""
    if area:
        return logging.getLogger(f"{LOGGER_NAME}.{area}")
    return logging.getLogger(LOGGER_NAME)


def configure_logging(level: str | None = None, *, force: bool = False, **extra: Any) -> None:
    """Configure the passoff logger once.

    If the logger was already configured we only adjust the level (unless
    ``force`` is True).
    """
    global _configured
    logger = get_logger()
    if not force and _configured:
        if level:
            logger.setLevel(level.upper())
        return
    if level:
        logger.setLevel(level.upper())
    if not logger.handlers or force:
        h = logging.StreamHandler()
        fmt = extra.get(
            "format",
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        datefmt = extra.get("datefmt", "%H:%M:%S")
        h.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        if force:
            logger.handlers.clear()
        logger.addHandler(h)
    logger.propagate = False  # Avoid duplicate lines if root configured.
    _configured = True
