"""Centralised logging configuration helpers."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional


DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_CONFIGURED = False


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Initialise root logging configuration.

    The level comes from ``KONTROLA_LOG_LEVEL`` unless ``level`` is given.
    Records always go to stdout; when ``KONTROLA_LOG_FILE`` (or ``log_file``)
    names a path, a UTF-8 file handler with the same format is added as well.
    """

    global _CONFIGURED

    desired_level = (level or os.getenv("KONTROLA_LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, desired_level, logging.INFO)
    root_logger = logging.getLogger()
    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    elif not _CONFIGURED:
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    target_file = log_file or os.getenv("KONTROLA_LOG_FILE")
    if target_file and not any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(target_file)
        for handler in root_logger.handlers
    ):
        os.makedirs(os.path.dirname(os.path.abspath(target_file)), exist_ok=True)
        file_handler = logging.FileHandler(target_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger with the global configuration applied."""

    if not _CONFIGURED:
        setup_logging()
    return logging.getLogger(name)


__all__ = ["setup_logging", "get_logger", "DEFAULT_LOG_FORMAT"]
