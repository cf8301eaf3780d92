"""Bridge-point synthesis for per-domain request series.

A line drawn straight between two real samples separated by a long idle
period suggests steady growth over that period. Inserting one flat point
shortly after the earlier sample shows the series was idle instead.
"""

import logging
from typing import Sequence

from reqmon.config import DEFAULT_GAP_THRESHOLD_MS
from reqmon.models import HistoryPoint

logger = logging.getLogger(__name__)


def maybe_bridge(
    history: Sequence[HistoryPoint],
    new_time: float,
    gap_threshold_ms: float = DEFAULT_GAP_THRESHOLD_MS,
) -> HistoryPoint | None:
    """Return the bridge point to insert before a point at new_time, if any.

    Exactly one bridge is produced when the gap since the last point exceeds
    gap_threshold_ms, however long the gap is. It sits half a threshold after
    the last point and carries the last point's count. A series with no
    points never bridges.
    """
    if not history:
        return None

    last = history[-1]
    if new_time - last.absolute_time <= gap_threshold_ms:
        return None

    offset = gap_threshold_ms / 2
    bridge = HistoryPoint(
        absolute_time=last.absolute_time + offset,
        relative_time=last.relative_time + offset,
        packet_count=last.packet_count,
        synthetic=True,
    )
    logger.debug(
        "Bridge inserted at %s (gap=%sms, count=%d)",
        bridge.absolute_time,
        new_time - last.absolute_time,
        bridge.packet_count,
    )
    return bridge
