"""Event source adapter between the host's resource observer and ReqMon."""

import logging
import time
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Protocol
from urllib.parse import urlsplit

from PySide6.QtCore import QObject, Signal, Slot

from reqmon.models import NetworkEvent

logger = logging.getLogger(__name__)

EntryBatchCallback = Callable[[list[Any]], None]
Clock = Callable[[], float]


class ResourceObserver(Protocol):
    """Protocol for the host facility that reports completed resource loads.

    Entries are mappings (or objects) carrying at least a ``name`` holding
    the requested URL.
    """

    def observe(self, callback: EntryBatchCallback, buffered: bool = True) -> None:
        """Deliver batches of entries to callback.

        With buffered=True, entries recorded before the call are delivered as
        well as future ones.
        """
        ...

    def disconnect(self) -> None:
        """Stop delivering entries."""
        ...

    def clear_resource_timings(self) -> None:
        """Drop the entries currently held in the host buffer."""
        ...


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds since the epoch."""
    return float(time.time_ns() // 1_000_000)


def entry_url(entry: Any) -> Any:
    """Return the URL carried by an entry, or None."""
    if isinstance(entry, Mapping):
        return entry.get("name")
    return getattr(entry, "name", None)


def parse_domain(url: Any) -> str:
    """Extract the hostname from a URL string.

    Raises:
        ValueError: If url is not a string, cannot be parsed, or has no host.
    """
    if not isinstance(url, str):
        raise ValueError(f"Entry URL must be a string, got {type(url).__name__}")

    parts = urlsplit(url.strip())
    if not parts.scheme:
        raise ValueError(f"URL has no scheme: {url!r}")

    hostname = parts.hostname
    if not hostname:
        raise ValueError(f"URL has no host: {url!r}")
    if hostname.isascii():
        return hostname

    # Internationalized names are keyed by their punycode form
    try:
        return hostname.encode("idna").decode("ascii")
    except UnicodeError:
        return hostname


class EventSourceAdapter(QObject):
    """Subscribes to a ResourceObserver and emits (domain, timestamp) events.

    Each raw entry is normalized to its hostname and stamped with the wall
    clock at delivery time. Entries that cannot be normalized are dropped and
    logged; they never reach the aggregator and never raise.

    Connecting event_observed to the aggregator lets Qt serialize delivery:
    a queued connection is used automatically when the observer calls back
    from another thread.
    """

    # Signals
    event_observed = Signal(str, float)  # (domain, observed_at_ms)
    entry_dropped = Signal(str)  # reason

    def __init__(self, observer: ResourceObserver, clock: Clock | None = None, parent=None):
        super().__init__(parent)
        self._observer = observer
        self._clock = clock if clock is not None else wall_clock_ms
        self._subscribed = False
        self._accepted = 0
        self._dropped = 0

        # Counters are bumped by our own slots, so entries delivered from
        # another thread are counted on this object's thread.
        self.event_observed.connect(self._count_accepted)
        self.entry_dropped.connect(self._count_dropped)

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed

    def start(self) -> bool:
        """Subscribe to buffered and live entries.

        Entries recorded before subscribing are replayed by the observer
        through the same callback. Returns False (after a single warning) if
        the observer cannot be subscribed to.
        """
        if self._subscribed:
            return True

        try:
            self._observer.observe(self.process_entries, buffered=True)
        except Exception as e:
            logger.warning("Resource observation unavailable, reporting no activity: %s", e)
            return False

        self._subscribed = True
        logger.info("Subscribed to resource observer")
        return True

    def stop(self):
        """Unsubscribe and clear host-side buffered entries."""
        if not self._subscribed:
            return

        self._subscribed = False
        try:
            self._observer.disconnect()
        finally:
            self.clear_host_buffer()
        logger.info(
            "Unsubscribed from resource observer (accepted=%d, dropped=%d)",
            self._accepted,
            self._dropped,
        )

    def clear_host_buffer(self):
        """Ask the host to forget its buffered resource entries."""
        try:
            self._observer.clear_resource_timings()
        except Exception as e:
            logger.warning("Could not clear host resource buffer: %s", e)

    def process_entries(self, entries: Iterable[Any]):
        """Normalize a batch of entries, in delivery order."""
        for entry in entries:
            self.process_entry(entry)

    def normalize(self, entry: Any) -> NetworkEvent:
        """Turn a raw entry into a NetworkEvent stamped with the clock.

        Raises:
            ValueError: If the entry carries no usable URL.
        """
        domain = parse_domain(entry_url(entry))
        return NetworkEvent(domain=domain, observed_at=float(self._clock()))

    def process_entry(self, entry: Any) -> bool:
        """Normalize a single entry and emit it. Returns True if accepted.

        Nothing raised while reading an entry escapes; the entry is dropped
        and the rest of its batch carries on.
        """
        try:
            event = self.normalize(entry)
        except ValueError as e:
            logger.warning("Dropping resource entry: %s", e)
            self.entry_dropped.emit(str(e))
            return False
        except Exception as e:
            logger.exception("Dropping unreadable resource entry: %s", e)
            self.entry_dropped.emit(f"{type(e).__name__}: {e}")
            return False

        logger.debug("Resource entry accepted: domain=%s, at=%d", event.domain, event.observed_at)
        self.event_observed.emit(event.domain, event.observed_at)
        return True

    @Slot(str, float)
    def _count_accepted(self, domain, observed_at):
        self._accepted += 1

    @Slot(str)
    def _count_dropped(self, reason):
        self._dropped += 1

    def stats(self):
        """Get adapter counters.

        Counts reflect entries whose signals have reached this object's
        thread; entries still queued from another thread are not yet counted.

        Returns:
            Dict with accepted/dropped counts and subscription state
        """
        return {
            "accepted": self._accepted,
            "dropped": self._dropped,
            "subscribed": self._subscribed,
        }
