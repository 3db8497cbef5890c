"""Logging utilities for llmpkt."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = "INFO"
PACKAGE_LOGGER = "llmpkt"


def _resolve_level(name: str | None, default: int) -> int:
    if not name:
        return default
    level = getattr(logging, name.upper(), None)
    return level if isinstance(level, int) else default


def configure_logging(level: str | None = None, package_level: str | None = None) -> logging.Logger:
    """
    Configure logging for scripts using llmpkt.

    The root logger gets ``level`` (or ``LLMPKT_LOG_LEVEL``, default INFO).
    The ``llmpkt`` logger gets ``package_level`` (or
    ``LLMPKT_PACKAGE_LOG_LEVEL``), so the engine's DEBUG traces can be turned
    on without raising verbosity for every other library.

    Returns:
        The ``llmpkt`` package logger
    """
    root_level = _resolve_level(level or os.getenv("LLMPKT_LOG_LEVEL"), logging.INFO)
    logging.basicConfig(level=root_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_level = _resolve_level(package_level or os.getenv("LLMPKT_PACKAGE_LOG_LEVEL"), logging.NOTSET)
    package_logger.setLevel(pkg_level)
    return package_logger
