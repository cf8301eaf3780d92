"""Data models for ReqMon telemetry.

All timestamps are milliseconds since the Unix epoch; all durations are
milliseconds.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class NetworkEvent:
    """A single accepted resource-load event."""

    domain: str
    observed_at: float


@dataclass(frozen=True)
class HistoryPoint:
    """One sample of a domain's cumulative request count."""

    absolute_time: float
    relative_time: float
    packet_count: int
    synthetic: bool = False  # True for bridge points


@dataclass
class DomainMetric:
    """Per-domain counters and time series."""

    color: str
    packet_count: int = 0
    history: list[HistoryPoint] = field(default_factory=list)

    def frozen(self) -> "DomainSnapshot":
        return DomainSnapshot(
            color=self.color,
            packet_count=self.packet_count,
            history=tuple(self.history),
        )


@dataclass(frozen=True)
class DomainSnapshot:
    """Immutable copy of a DomainMetric."""

    color: str
    packet_count: int
    history: tuple[HistoryPoint, ...]


@dataclass(frozen=True)
class TotalsPoint:
    """Running totals recorded after an accepted event."""

    time: float
    sent: int
    received: int


@dataclass
class GlobalMetrics:
    """Session-wide totals.

    sent_total and received_total both count accepted events, so they are
    always equal. They are a proxy for traffic, not true TX/RX figures.
    """

    sent_total: int = 0
    received_total: int = 0
    first_event_time: float | None = None
    last_update: float | None = None
    history: list[TotalsPoint] = field(default_factory=list)

    def frozen(self) -> "GlobalSnapshot":
        return GlobalSnapshot(
            sent_total=self.sent_total,
            received_total=self.received_total,
            first_event_time=self.first_event_time,
            last_update=self.last_update,
            history=tuple(self.history),
        )


@dataclass(frozen=True)
class GlobalSnapshot:
    """Immutable copy of GlobalMetrics."""

    sent_total: int
    received_total: int
    first_event_time: float | None
    last_update: float | None
    history: tuple[TotalsPoint, ...]


@dataclass(frozen=True)
class MetricsSnapshot:
    """Read-only view of the whole session handed to presenters."""

    domains: Mapping[str, DomainSnapshot]
    totals: GlobalSnapshot
    has_activity: bool

    @classmethod
    def empty(cls) -> "MetricsSnapshot":
        return cls(
            domains=MappingProxyType({}),
            totals=GlobalMetrics().frozen(),
            has_activity=False,
        )


@dataclass(frozen=True)
class DomainSample:
    """A domain's value at one aligned instant."""

    packet_count: int
    absolute_time: float


@dataclass(frozen=True)
class AlignedPoint:
    """One instant on the shared time axis.

    A value of None means the domain had no sample at exactly this instant;
    renderers should connect across it rather than drop to zero.
    """

    time: float
    values: Mapping[str, DomainSample | None]


@dataclass(frozen=True)
class ChartData:
    """Aligned points plus axis bounds, ready for a line chart."""

    points: tuple[AlignedPoint, ...]
    x_domain: tuple[float, float]
    y_domain: tuple[int, int]

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0
