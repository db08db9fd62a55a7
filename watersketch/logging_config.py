"""Centralized logging configuration for the viewer and the server."""

from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"
LEVEL_ENV = "WATERSKETCH_LOG_LEVEL"


def configure_logging(
    level: str | None = None,
    *,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    include_uvicorn: bool = False,
) -> logging.Logger:
    """Configure package logging.

    Args:
        level: Optional explicit log level. Falls back to ``WATERSKETCH_LOG_LEVEL``
            or INFO when not provided.
        format: Log format string.
        datefmt: Date format string.
        include_uvicorn: Align uvicorn loggers with the package level.

    Returns:
        The package logger (``watersketch``).
    """
    raw_level = level if level is not None else os.getenv(LEVEL_ENV)
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    app_logger = logging.getLogger("watersketch")
    app_logger.setLevel(resolved_level)

    if include_uvicorn:
        for uvicorn_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(uvicorn_logger).setLevel(resolved_level)

    # matplotlib is chatty at DEBUG about font discovery
    logging.getLogger("matplotlib").setLevel(max(logging.INFO, app_logger.level))

    app_logger.debug("Logging configured at %s", resolved_level)
    return app_logger
