"""Diagnostic logging for the burn-in tool.

The run log is written by :mod:`burnin.runtime.logsink` and tees to stdout.
Diagnostic records go to stderr, and optionally to ``diagnostic_log_path``,
so they never interleave with the run log on the console or in the file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import AppSettings, get_settings

LOGGER_NAME = "burnin"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _LevelToggleFilter(logging.Filter):
    """Drop records whose level is switched off in the settings."""

    def __init__(self, settings: AppSettings) -> None:
        super().__init__()
        self._settings = settings

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if record.levelno >= logging.ERROR:
            return self._settings.log_error_enabled
        if record.levelno >= logging.WARNING:
            return self._settings.log_warning_enabled
        if record.levelno >= logging.INFO:
            return self._settings.log_info_enabled
        return self._settings.log_debug_enabled

    def update(self, settings: AppSettings) -> None:
        self._settings = settings


_configured = False
_filter: Optional[_LevelToggleFilter] = None
_file_path: Optional[Path] = None


def _build_handlers(settings: AppSettings) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.diagnostic_log_path is not None:
        settings.diagnostic_log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.diagnostic_log_path, encoding="utf-8"))
    return handlers


def configure_logging(settings: Optional[AppSettings] = None, *, force: bool = False) -> None:
    """Configure the shared burn-in logger.

    Later calls only refresh the level toggles, unless ``force`` is given or
    the diagnostic file changed, in which case the handlers are rebuilt.
    """

    global _configured, _filter, _file_path
    settings = settings or get_settings()
    logger = logging.getLogger(LOGGER_NAME)

    if _configured and not force:
        if _filter:
            _filter.update(settings)
        if settings.diagnostic_log_path == _file_path:
            return

    logger.setLevel(logging.DEBUG)
    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
        old_handler.close()

    _filter = _LevelToggleFilter(settings)
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)
    for handler in _build_handlers(settings):
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        handler.addFilter(_filter)
        logger.addHandler(handler)

    logger.propagate = False
    logging.captureWarnings(True)

    _file_path = settings.diagnostic_log_path
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger scoped under the burn-in namespace."""

    if not _configured:
        configure_logging()
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
