"""Network monitor: wires the event source to the aggregator."""

import logging

from PySide6.QtCore import QObject, Signal

from reqmon.aggregator import DOMAIN_COLORS, TelemetryAggregator
from reqmon.aligner import align_series, sorted_domains
from reqmon.config import MonitorConfig
from reqmon.models import ChartData, MetricsSnapshot
from reqmon.source import Clock, EventSourceAdapter, ResourceObserver

logger = logging.getLogger(__name__)


class NetworkMonitor(QObject):
    """Owns one monitoring session for the composing application.

    Key features:
    - Subscribes to the host's resource observer through an EventSourceAdapter
    - Feeds accepted events, in delivery order, to a TelemetryAggregator
    - Degrades to zero activity if the observer is missing or refuses
    - Produces render-time views (sorted domains, aligned chart data)
    """

    # Signals
    started = Signal(bool)  # available
    stopped = Signal()

    def __init__(
        self,
        observer: ResourceObserver | None,
        clock: Clock | None = None,
        config: MonitorConfig | None = None,
        palette=DOMAIN_COLORS,
        parent=None,
    ):
        """Initialize the monitor.

        Args:
            observer: Host observation facility, or None if the host has none
            clock: Callable returning wall-clock epoch milliseconds
            config: Monitor settings (defaults when None)
            palette: Colors cycled over domains in first-seen order
            parent: Qt parent object
        """
        super().__init__(parent)

        self.config = config if config is not None else MonitorConfig()
        self.aggregator = TelemetryAggregator(
            palette=palette,
            gap_threshold_ms=self.config.gap_threshold_ms,
            parent=self,
        )

        self.adapter = None
        if observer is not None:
            self.adapter = EventSourceAdapter(observer, clock=clock, parent=self)
            self.adapter.event_observed.connect(self.aggregator.handle_event)

        self.is_monitoring = False
        self.available = False

    @property
    def metrics_changed(self):
        return self.aggregator.metrics_changed

    def start(self) -> bool:
        """Start observing. Returns whether the observer is available."""
        if self.is_monitoring:
            return self.available

        self.is_monitoring = True
        if self.adapter is None:
            logger.warning("No resource observer available, reporting no activity")
            self.available = False
        else:
            self.available = self.adapter.start()

        logger.info("Monitoring started (available=%s)", self.available)
        self.started.emit(self.available)
        return self.available

    def stop(self):
        """Tear down: unsubscribe, clear the host buffer, and discard state."""
        if not self.is_monitoring:
            return

        self.is_monitoring = False
        if self.adapter is not None and self.available:
            self.adapter.stop()
        self.available = False
        self.aggregator.reset()

        logger.info("Monitoring stopped")
        self.stopped.emit()

    def reset(self):
        """Clear collected telemetry; the subscription stays live."""
        self.aggregator.reset()
        if self.adapter is not None and self.available:
            self.adapter.clear_host_buffer()

    def snapshot(self) -> MetricsSnapshot:
        return self.aggregator.snapshot()

    def sorted_domains(self, snapshot: MetricsSnapshot | None = None):
        """Get (domain, metric) pairs ordered by request count, descending."""
        if snapshot is None:
            snapshot = self.snapshot()
        return sorted_domains(snapshot.domains)

    def chart_data(self, snapshot: MetricsSnapshot | None = None) -> ChartData:
        """Align all domain series for charting."""
        if snapshot is None:
            snapshot = self.snapshot()
        return align_series(snapshot.domains)

    def summary(self):
        """Get aggregate totals.

        Returns:
            Dict with sent/received totals, activity flag and domain count
        """
        totals = self.aggregator.totals()
        return {
            "sent": totals.sent_total,
            "received": totals.received_total,
            "has_activity": self.aggregator.has_activity,
            "domains": self.aggregator.domain_count(),
        }
