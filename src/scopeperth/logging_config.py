"""
Logging Configuration Module

Everything the dashboard logs goes through the ``scopeperth`` package
logger. Its level, format, optional log file and the third-party loggers
kept quiet all come from ``LoggingConfig`` (``SCOPEPERTH_LOG_*`` and
``SCOPEPERTH_QUIET_LOGGERS``), so the API server, the report CLI and the
tests share one setup.

Usage:
    from scopeperth.logging_config import setup_logging, get_logger

    setup_logging()  # Once, at process start
    logger = get_logger(__name__)
    logger.info("Dashboard data loaded")
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from scopeperth.config import LoggingConfig, get_config
from scopeperth.core import constants

PACKAGE_LOGGER = "scopeperth"

_logging_configured = False


def resolve_level(level: Optional[str], fallback: str = "INFO") -> int:
    """Numeric level for a level name; unknown names use ``fallback``."""
    name = (level or fallback).strip().upper()
    if name not in constants.LOG_LEVELS:
        name = fallback.upper()
    return getattr(logging, name)


def build_handlers(
    settings: LoggingConfig,
    level: int,
    log_file: Optional[str] = None,
) -> List[logging.Handler]:
    """Console handler plus, when a path is given, a UTF-8 file handler."""
    formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def quiet_loggers(names: Iterable[str], level: str = "WARNING") -> None:
    """Hold noisy third-party loggers at ``level``."""
    numeric_level = resolve_level(level, fallback="WARNING")
    for name in names:
        logging.getLogger(name).setLevel(numeric_level)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
    settings: Optional[LoggingConfig] = None,
) -> None:
    """Configure the package logger.

    Args:
        level: Level name overriding ``settings.level`` (e.g. from ``--log-level``).
        log_file: Log file path overriding ``settings.log_file``.
        force: Reconfigure even if logging is already set up.
        settings: Logging settings; defaults to the global config's.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    settings = settings or get_config().logging
    numeric_level = resolve_level(level, fallback=settings.level)
    if log_file is None:
        log_file = settings.log_file

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _close_handlers(package_logger)
    package_logger.setLevel(numeric_level)
    for handler in build_handlers(settings, numeric_level, log_file):
        package_logger.addHandler(handler)
    package_logger.propagate = False

    quiet_loggers(settings.quiet_loggers, settings.quiet_level)
    _logging_configured = True

    if level and level.strip().upper() not in constants.LOG_LEVELS:
        package_logger.warning("Unknown log level %r, using %s", level, settings.level)
    if log_file:
        package_logger.debug("Logging to %s", log_file)


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace, configuring logging on first use.

    Args:
        name: Module name (typically __name__).
    """
    if not _logging_configured:
        setup_logging()

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop the package handlers so the next call reconfigures (for tests)."""
    global _logging_configured
    _logging_configured = False
    _close_handlers(logging.getLogger(PACKAGE_LOGGER))


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
