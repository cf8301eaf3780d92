"""Headless entry point for ReqMon.

Runs the monitor against a simulated resource observer and logs a periodic
summary of request activity per domain.
"""

import logging
import signal
import sys

from PySide6.QtCore import QCoreApplication, QTimer

from reqmon.config import SOURCE_NONE, MonitorConfig
from reqmon.fake_source import FakeResourceFeed, FakeResourceObserver
from reqmon.formatting import format_axis_tick, format_elapsed, format_wall_clock, truncate_domain
from reqmon.logging_config import configure_logging
from reqmon.monitor import NetworkMonitor
from reqmon.ui.domain_model import DomainListModel

# Configure logging early
configure_logging()
logger = logging.getLogger(__name__)

FEED_INTERVAL_MS = 250
TOP_DOMAINS = 5
DOMAIN_WIDTH = 15


def log_summary(monitor: NetworkMonitor, model: DomainListModel):
    """Refresh the domain list if needed, then log totals and top domains."""
    snapshot = monitor.snapshot()
    summary = monitor.summary()
    if model.is_stale:
        model.update_from_snapshot(snapshot)

    if not snapshot.has_activity:
        logger.info("No network activity recorded")
        return

    chart = monitor.chart_data(snapshot)
    logger.info(
        "TX=%d RX=%d domains=%d span=%s last=%s",
        summary["sent"],
        summary["received"],
        summary["domains"],
        format_axis_tick(chart.points[-1].time),
        format_wall_clock(snapshot.totals.last_update),
    )
    for domain, metric in model.top(TOP_DOMAINS):
        logger.info(
            "  %-18s %5d  at %s (%s)",
            truncate_domain(domain, DOMAIN_WIDTH),
            metric.packet_count,
            format_elapsed(metric.history[-1].relative_time),
            metric.color,
        )


def main():
    """Main entry point for the ReqMon runner."""
    app = QCoreApplication(sys.argv)
    config = MonitorConfig.from_env()

    observer = FakeResourceObserver(available=config.source != SOURCE_NONE)
    if config.source == SOURCE_NONE:
        logger.info("Simulating a host without resource observation (REQMON_SOURCE=none)")

    monitor = NetworkMonitor(observer, config=config)
    model = DomainListModel()
    monitor.metrics_changed.connect(model.mark_stale)

    feed = FakeResourceFeed()
    feed_timer = QTimer()
    feed_timer.timeout.connect(lambda: feed.tick(observer))

    summary_timer = QTimer()
    summary_timer.timeout.connect(lambda: log_summary(monitor, model))

    def shutdown():
        feed_timer.stop()
        summary_timer.stop()
        log_summary(monitor, model)
        monitor.stop()
        app.quit()

    # Let Ctrl+C reach Python between Qt events
    signal.signal(signal.SIGINT, lambda *_: shutdown())
    interrupt_timer = QTimer()
    interrupt_timer.timeout.connect(lambda: None)
    interrupt_timer.start(200)

    monitor.start()
    feed_timer.start(FEED_INTERVAL_MS)
    summary_timer.start(config.summary_interval_ms)

    if config.run_seconds > 0:
        QTimer.singleShot(int(config.run_seconds * 1000), shutdown)
        logger.info("Running for %.1fs", config.run_seconds)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
