from __future__ import annotations

"""Logger factory for infergraph modules."""

import logging

from .config import ConfigError, LoggingSettings, get_settings

ROOT_LOGGER = "infergraph"

_configured = False


def _logging_settings() -> LoggingSettings:
    try:
        return get_settings().logging
    except ConfigError as exc:
        logging.getLogger(ROOT_LOGGER).warning(
            "Invalid settings, using default logging configuration: %s", exc
        )
        return LoggingSettings()


def configure_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """
    Apply level and format to the package logger.

    Missing arguments fall back to ``get_settings().logging`` (or the
    defaults when the environment holds invalid settings). A handler is only
    attached when the package logger has none yet, so repeated calls just
    update the level.
    """
    global _configured

    settings = _logging_settings()
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level or settings.level)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or settings.format))
        root.addHandler(handler)

    _configured = True
    return root


def ensure_logging() -> None:
    """Configure the package logger once; later calls are no-ops."""
    if not _configured:
        configure_logging()


def getLogger(name: str) -> logging.Logger:
    """Return a logger below the package logger. Reads no settings."""
    return logging.getLogger(name)
