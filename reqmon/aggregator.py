"""Session-wide request telemetry aggregation."""

import logging
from types import MappingProxyType

from PySide6.QtCore import QObject, Signal

from reqmon.config import DEFAULT_GAP_THRESHOLD_MS
from reqmon.models import (
    DomainMetric,
    DomainSnapshot,
    GlobalMetrics,
    GlobalSnapshot,
    HistoryPoint,
    MetricsSnapshot,
    TotalsPoint,
)
from reqmon.synthesizer import maybe_bridge

logger = logging.getLogger(__name__)

DOMAIN_COLORS = (
    "chart-1",
    "chart-2",
    "chart-3",
    "chart-4",
    "chart-5",
)


class _SessionState:
    """Everything the aggregator knows about the current session.

    Replaced wholesale on reset, never cleared field by field.
    """

    def __init__(self):
        self.domains = {}  # {domain: DomainMetric}
        self.domain_order = []  # Domains in first-seen order
        self.totals = GlobalMetrics()
        self.has_activity = False


class TelemetryAggregator(QObject):
    """Accumulates per-domain request counts and time series.

    Events are applied one at a time, in the order they are delivered; they
    are never re-sorted by timestamp. All mutation happens in handle_event
    and reset, which must be called from the thread owning this object.
    Presenters listen to metrics_changed and pull a snapshot().
    """

    # Signals
    metrics_changed = Signal()
    domain_added = Signal(str, str)  # (domain, color)
    was_reset = Signal()

    def __init__(
        self,
        palette=DOMAIN_COLORS,
        gap_threshold_ms: float = DEFAULT_GAP_THRESHOLD_MS,
        parent=None,
    ):
        """Initialize an empty session.

        Args:
            palette: Colors assigned to domains in first-seen order, cycling
            gap_threshold_ms: Idle gap after which a bridge point is inserted
            parent: Qt parent object
        """
        super().__init__(parent)
        if not palette:
            raise ValueError("Palette cannot be empty")
        if gap_threshold_ms <= 0:
            raise ValueError(f"gap_threshold_ms must be positive, got {gap_threshold_ms}")

        self.palette = tuple(palette)
        self.gap_threshold_ms = gap_threshold_ms
        self._state = _SessionState()

    def handle_event(self, domain: str, now: float):
        """Apply one accepted request event observed at ``now`` (epoch ms)."""
        state = self._state
        totals = state.totals

        if totals.first_event_time is None:
            totals.first_event_time = now
            logger.debug("Session started at %s", now)

        metric = state.domains.get(domain)
        if metric is None:
            color = self.palette[len(state.domain_order) % len(self.palette)]
            metric = DomainMetric(color=color)
            state.domains[domain] = metric
            state.domain_order.append(domain)
            logger.debug(
                "Domain added: %s (color=%s, total: %d)", domain, color, len(state.domain_order)
            )
            self.domain_added.emit(domain, color)

        metric.packet_count += 1

        bridge = maybe_bridge(metric.history, now, self.gap_threshold_ms)
        if bridge is not None:
            metric.history.append(bridge)

        metric.history.append(
            HistoryPoint(
                absolute_time=now,
                relative_time=now - totals.first_event_time,
                packet_count=metric.packet_count,
            )
        )

        totals.sent_total += 1
        totals.received_total += 1
        totals.history.append(
            TotalsPoint(time=now, sent=totals.sent_total, received=totals.received_total)
        )
        totals.last_update = now
        state.has_activity = True

        self.metrics_changed.emit()

    def reset(self):
        """Discard the session and start over with empty state."""
        self._state = _SessionState()
        logger.info("Telemetry reset")
        self.was_reset.emit()
        self.metrics_changed.emit()

    @property
    def has_activity(self) -> bool:
        return self._state.has_activity

    def domain_count(self) -> int:
        return len(self._state.domain_order)

    def domains(self):
        """Get tracked domains in first-seen order."""
        return list(self._state.domain_order)

    def get_domain(self, domain: str) -> DomainSnapshot | None:
        metric = self._state.domains.get(domain)
        return metric.frozen() if metric is not None else None

    def totals(self) -> GlobalSnapshot:
        return self._state.totals.frozen()

    def snapshot(self) -> MetricsSnapshot:
        """Return an immutable copy of the session.

        The copy is O(total history); call it when rendering, not per event.
        """
        state = self._state
        domains = {domain: state.domains[domain].frozen() for domain in state.domain_order}
        return MetricsSnapshot(
            domains=MappingProxyType(domains),
            totals=state.totals.frozen(),
            has_activity=state.has_activity,
        )
