"""Align independent per-domain series onto one shared time axis.

Runs at render time only: the cost grows with the total number of history
points across all domains.
"""

import logging
from math import ceil
from types import MappingProxyType
from typing import Iterable, Mapping

from reqmon.models import AlignedPoint, ChartData, DomainSample, DomainSnapshot

logger = logging.getLogger(__name__)

EMPTY_X_DOMAIN = (0, 1000)
X_PADDING = 1.05
Y_PADDING = 1.1


def sorted_domains(domains: Mapping[str, DomainSnapshot]) -> list[tuple[str, DomainSnapshot]]:
    """Return (domain, metric) pairs, busiest first.

    The sort is stable, so domains with equal counts keep first-seen order.
    """
    return sorted(domains.items(), key=lambda item: item[1].packet_count, reverse=True)


def axis_bounds(times: Iterable[float], counts: Iterable[int]):
    """Compute (x_domain, y_domain) for the given axis times and counts.

    X spans [0, max time + 5%], or [0, 1000] with no times. Y spans
    [0, ceil(max count * 1.1)] with the max count floored at 1.
    """
    times = list(times)
    if times:
        x_domain = (0, max(times) * X_PADDING)
    else:
        x_domain = EMPTY_X_DOMAIN

    max_count = max(counts, default=1)
    y_domain = (0, ceil(max(max_count, 1) * Y_PADDING))
    return x_domain, y_domain


def align_series(domains: Mapping[str, DomainSnapshot]) -> ChartData:
    """Merge every domain's history onto the union of their relative times.

    A domain without a point at a given instant gets None there, not zero.
    """
    # {domain: {relative_time: DomainSample}}; the first point at a time wins
    by_time = {}
    all_counts = []
    for domain, metric in domains.items():
        samples = {}
        for point in metric.history:
            all_counts.append(point.packet_count)
            if point.relative_time not in samples:
                samples[point.relative_time] = DomainSample(
                    packet_count=point.packet_count,
                    absolute_time=point.absolute_time,
                )
        by_time[domain] = samples

    axis = sorted({t for samples in by_time.values() for t in samples})

    points = tuple(
        AlignedPoint(
            time=t,
            values=MappingProxyType(
                {domain: samples.get(t) for domain, samples in by_time.items()}
            ),
        )
        for t in axis
    )

    x_domain, y_domain = axis_bounds(axis, all_counts)
    logger.debug(
        "Aligned %d domains onto %d instants (x=%s, y=%s)",
        len(by_time),
        len(points),
        x_domain,
        y_domain,
    )
    return ChartData(points=points, x_domain=x_domain, y_domain=y_domain)
