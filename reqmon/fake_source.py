"""Simulated resource observation facility for ReqMon testing and demos."""

import logging
import random

from reqmon.source import EntryBatchCallback

logger = logging.getLogger(__name__)

DEFAULT_DOMAINS = (
    "example.com",
    "cdn.example.com",
    "api.github.com",
    "fonts.gstatic.com",
    "keys.openpgp.org",
)

DEFAULT_PATHS = ("/", "/index.js", "/styles.css", "/logo.svg", "/api/v1/keys")


class ObserverUnavailableError(RuntimeError):
    """Raised when the simulated host has no observation facility."""


class FakeResourceObserver:
    """In-memory ResourceObserver.

    Keeps a host-side buffer of every recorded entry (until cleared) and
    delivers new entries to the subscribed callback. Subscribing with
    buffered=True replays the buffer first, like a browser performance
    observer does.
    """

    def __init__(self, available: bool = True):
        self.available = available
        self._buffer = []
        self._callback: EntryBatchCallback | None = None

    @property
    def is_observing(self) -> bool:
        return self._callback is not None

    def observe(self, callback: EntryBatchCallback, buffered: bool = True) -> None:
        if not self.available:
            raise ObserverUnavailableError("resource observation is not supported by this host")
        self._callback = callback
        if buffered and self._buffer:
            callback(list(self._buffer))

    def disconnect(self) -> None:
        self._callback = None

    def get_entries(self):
        return list(self._buffer)

    def clear_resource_timings(self) -> None:
        self._buffer.clear()

    def record(self, *entries) -> None:
        """Record completed resource loads and deliver them as one batch."""
        if not entries:
            return
        self._buffer.extend(entries)
        if self._callback is not None:
            self._callback(list(entries))


class FakeResourceFeed:
    """Generates fake resource-load entries for a FakeResourceObserver."""

    def __init__(self, seed: int | None = None, domains=DEFAULT_DOMAINS):
        """Initialize with optional random seed for deterministic behavior."""
        if not domains:
            raise ValueError("At least one domain is required")

        self._random = random.Random(seed)
        self.domains = tuple(domains)

        # Simulation parameters
        self.burst_probability = 0.2  # Chance a tick loads several resources
        self.max_burst = 4
        self.idle_probability = 0.3  # Chance a tick loads nothing
        self.malformed_probability = 0.01  # Chance of an unparsable entry

    def generate_entry(self):
        """Generate a single resource entry."""
        if self._random.random() < self.malformed_probability:
            return {"name": "not a url", "initiatorType": "other"}

        # Skew toward the first domains so the ranking is not flat
        index = min(int(self._random.expovariate(1.0)), len(self.domains) - 1)
        domain = self.domains[index]
        path = self._random.choice(DEFAULT_PATHS)
        return {"name": f"https://{domain}{path}", "initiatorType": "fetch"}

    def generate_batch(self):
        """Generate the entries completed during one tick (possibly none)."""
        if self._random.random() < self.idle_probability:
            return []

        count = 1
        if self._random.random() < self.burst_probability:
            count = self._random.randint(2, self.max_burst)
        return [self.generate_entry() for _ in range(count)]

    def tick(self, observer: FakeResourceObserver) -> int:
        """Record one tick's worth of entries on observer. Returns the count."""
        batch = self.generate_batch()
        observer.record(*batch)
        if batch:
            logger.debug("Fake feed recorded %d entries", len(batch))
        return len(batch)
