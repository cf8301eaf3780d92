"""Environment-driven configuration for ReqMon."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_GAP_THRESHOLD_MS = 1000
DEFAULT_SUMMARY_INTERVAL_MS = 2000

SOURCE_FAKE = "fake"
SOURCE_NONE = "none"
_SOURCES = (SOURCE_FAKE, SOURCE_NONE)


def _read_number(name: str, default: float, allow_zero: bool = False) -> float:
    """Read a numeric environment variable, falling back to default.

    Non-numeric and out-of-range values are logged and ignored.
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number (using %s)", name, raw, default)
        return default

    if value < 0 or (value == 0 and not allow_zero):
        logger.warning("Ignoring %s=%r: out of range (using %s)", name, raw, default)
        return default

    return value


@dataclass(frozen=True)
class MonitorConfig:
    """Runtime settings for the monitor and the headless runner.

    Environment Variables:
        REQMON_GAP_THRESHOLD_MS: Idle gap (ms) after which a bridge point
                                 is inserted. Default 1000.
        REQMON_SOURCE: Observation source for the runner, "fake" or "none".
                       Default "fake".
        REQMON_SUMMARY_INTERVAL_MS: How often the runner logs a summary.
                                    Default 2000.
        REQMON_RUN_SECONDS: Stop the runner after this many seconds.
                            Default 0 (run until interrupted).
    """

    gap_threshold_ms: float = DEFAULT_GAP_THRESHOLD_MS
    source: str = SOURCE_FAKE
    summary_interval_ms: int = DEFAULT_SUMMARY_INTERVAL_MS
    run_seconds: float = 0

    @classmethod
    def from_env(cls) -> "MonitorConfig":
        source = os.environ.get("REQMON_SOURCE", SOURCE_FAKE).strip().lower()
        if source not in _SOURCES:
            logger.warning("Unknown REQMON_SOURCE=%r (using %s)", source, SOURCE_FAKE)
            source = SOURCE_FAKE

        return cls(
            gap_threshold_ms=_read_number("REQMON_GAP_THRESHOLD_MS", DEFAULT_GAP_THRESHOLD_MS),
            source=source,
            summary_interval_ms=int(
                _read_number("REQMON_SUMMARY_INTERVAL_MS", DEFAULT_SUMMARY_INTERVAL_MS)
            ),
            run_seconds=_read_number("REQMON_RUN_SECONDS", 0, allow_zero=True),
        )
