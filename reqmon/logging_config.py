"""Logging configuration for ReqMon."""

import logging
import os
import sys

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_log_level(name: str | None) -> int:
    """Map a level name to a logging constant, defaulting to INFO.

    Matching is case-insensitive; unknown names resolve to INFO.
    """
    if not name:
        return logging.INFO
    return _LEVELS.get(name.strip().upper(), logging.INFO)


def configure_logging(level: str | None = None) -> int:
    """Configure application-wide logging and return the effective level.

    The level comes from the ``level`` argument when given, otherwise from
    the REQMON_LOG_LEVEL environment variable (default: INFO). Records go to
    stderr with timestamp, module name, and level.

    Examples:
        # Default INFO level
        $ python -m reqmon

        # Every accepted request and every bridge point
        $ REQMON_LOG_LEVEL=DEBUG python -m reqmon

        # Only dropped entries and an unavailable observer
        $ REQMON_LOG_LEVEL=WARNING python -m reqmon
    """
    if level is None:
        level = os.environ.get("REQMON_LOG_LEVEL", "INFO")
    log_level = resolve_log_level(level)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    logging.getLogger(__name__).info(
        "Logging configured: level=%s", logging.getLevelName(log_level)
    )
    return log_level
