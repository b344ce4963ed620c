"""Logging bootstrap for the cewatch runtime.

The terminal belongs to the UI while a session runs, so records go to a
rotating file under the platform log directory instead of stderr.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "cewatch"
LOG_FILENAME = "cewatch.log"
LOG_LEVEL_ENV = "CEWATCH_LOG_LEVEL"
LOG_FILE_ENV = "CEWATCH_LOG_FILE"


@dataclass(frozen=True)
class LoggingRuntime:
    """Resolved runtime logging configuration."""

    level_name: str
    level: int
    file_path: Path


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str | None) -> tuple[str, int]:
    normalized = str(raw or "INFO").strip().upper()
    level = getattr(logging, normalized, None)
    if not isinstance(level, int):
        level = logging.INFO
    return logging.getLevelName(level), level


def default_log_path() -> Path:
    """Return the log file location, honoring ``CEWATCH_LOG_FILE``."""
    override = os.environ.get(LOG_FILE_ENV)
    if override:
        return Path(override)
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def _make_file_handler(level: int, file_path: Path) -> logging.Handler:
    handler = RotatingFileHandler(
        file_path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def configure(level_name: str | None = None) -> LoggingRuntime:
    """Configure the ``cewatch`` logger hierarchy with a rotating file handler.

    Idempotent: repeated calls return the originally configured runtime.
    ``level_name`` wins over ``CEWATCH_LOG_LEVEL``; INFO is the fallback.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    resolved_name, level = _parse_level(level_name or os.environ.get(LOG_LEVEL_ENV))
    file_path = default_log_path()
    file_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(_make_file_handler(level, file_path))

    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name=resolved_name, level=level, file_path=file_path)
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    """Return configured logging runtime, if ``configure()`` has run."""
    return _RUNTIME


def reset() -> None:
    """Detach handlers and forget the configured runtime."""
    global _RUNTIME
    logger = logging.getLogger(APP_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _RUNTIME = None
