"""Text formatting helpers for presenting ReqMon data."""

from datetime import datetime


def format_elapsed(ms: float) -> str:
    """Format an offset from the first request, e.g. ``+1.234s``."""
    return f"+{ms / 1000:.3f}s"


def format_axis_tick(ms: float) -> str:
    """Format a time-axis tick label, e.g. ``1.2s``."""
    return f"{ms / 1000:.1f}s"


def format_wall_clock(epoch_ms: float, tz=None) -> str:
    """Format an epoch timestamp as 24-hour ``HH:MM:SS.mmm``.

    Uses local time unless a tzinfo is given.
    """
    whole_ms = int(epoch_ms)
    ts = datetime.fromtimestamp(whole_ms // 1000, tz=tz)
    return f"{ts.strftime('%H:%M:%S')}.{whole_ms % 1000:03d}"


def truncate_domain(domain: str | None, max_length: int = 12) -> str:
    """Shorten a domain for narrow labels, appending ``...`` when cut."""
    if not domain:
        return ""
    if len(domain) > max_length:
        return f"{domain[:max_length]}..."
    return domain
