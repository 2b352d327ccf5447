"""
Logger levels for rrule_lite.

The console handler comes from ``rrule_lite._init_logging``; this module only
decides levels. The root level follows the configured level name, the
``rrule_lite`` package logger opens up to DEBUG in debug mode, and the parsing
libraries underneath the engine stay at WARNING either way.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "rrule_lite"

# Third-party loggers held at WARNING
QUIET_LIBRARIES = ("dateutil", "pydantic", "yaml")

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUTHY = ("1", "true", "yes", "on")


def debug_requested(debug_mode: bool = False, force_debug: Optional[bool] = None) -> bool:
    """Resolve debug mode: ``force_debug``, then RRULE_LITE_DEBUG, then ``debug_mode``."""
    if force_debug is not None:
        return force_debug
    if os.getenv("RRULE_LITE_DEBUG", "").strip().lower() in _TRUTHY:
        return True
    return debug_mode


def _level_from_name(name: Optional[str]) -> Optional[int]:
    if not name:
        return None
    name = name.strip().upper()
    if name not in LEVEL_NAMES:
        return None
    return getattr(logging, name)


def configure_lite_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Apply rrule_lite logger levels.

    Args:
        debug_mode: Open the package logger up to DEBUG
        force_debug: Override debug mode (None to use env var detection)
        log_level: Configured root level name, used when debug mode is off

    Environment Variables:
        RRULE_LITE_DEBUG: '1', 'true', 'yes' or 'on' force debug mode
        RRULE_LITE_LOG_LEVEL: Root level name; wins over debug mode and ``log_level``

    Unknown level names are ignored.
    """
    debug = debug_requested(debug_mode, force_debug)

    root_level = _level_from_name(os.getenv("RRULE_LITE_LOG_LEVEL"))
    if root_level is None:
        if debug:
            root_level = logging.DEBUG
        else:
            root_level = _level_from_name(log_level) or logging.INFO
    logging.getLogger().setLevel(root_level)

    # NOTSET lets the package inherit the root level outside debug mode
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if debug else logging.NOTSET)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(
        "Logging configured: root=%s debug=%s", logging.getLevelName(root_level), debug
    )


def get_logging_status() -> dict[str, str]:
    """
    Report effective levels of the root, package and quieted loggers.

    Returns:
        Dictionary mapping logger names to level names
    """
    status = {"root": logging.getLevelName(logging.getLogger().getEffectiveLevel())}
    for name in (PACKAGE_LOGGER, *QUIET_LIBRARIES):
        status[name] = logging.getLevelName(logging.getLogger(name).getEffectiveLevel())
    return status
