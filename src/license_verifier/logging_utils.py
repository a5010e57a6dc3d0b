"""Logging bootstrap helpers."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import VerifierSettings

LOGGER_NAME = "license_verifier"


def _level(settings: VerifierSettings) -> int:
    return getattr(logging, settings.log_level, logging.INFO)


def configure_logging(settings: Optional[VerifierSettings] = None, *, name: str = LOGGER_NAME) -> logging.Logger:
    """Return the package logger, attaching its handler on first use.

    The handler (and therefore ``log_file``) is fixed by the first call.
    Later calls with explicit ``settings`` only update the level.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        if settings is not None:
            logger.setLevel(_level(settings))
        return logger

    settings = settings or VerifierSettings.from_env()
    handler: logging.Handler
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(settings.log_file, maxBytes=1_000_000, backupCount=3)
    else:
        handler = logging.StreamHandler()
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    handler.setFormatter(fmt)

    logger.setLevel(_level(settings))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
