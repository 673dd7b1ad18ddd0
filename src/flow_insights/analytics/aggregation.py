"""Interval aggregation — bin raw samples into fixed-width time buckets.

Bucket boundaries come from integer division of the minute field:
``minute // interval * interval``, with seconds and microseconds zeroed.
Intervals that do not divide 60 (or exceed it) still follow this rule, so a
7-minute interval yields boundaries at :00, :07, ... :56 within every hour
and a 90-minute interval collapses every sample to the top of its hour.
That is the canonical behaviour, not a calendar alignment.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Iterable

import structlog

from flow_insights.models import Bucket, Sample

logger = structlog.get_logger(__name__)


def floor_timestamp(ts: datetime, interval_minutes: int) -> datetime:
    """Floor ``ts`` to the start of its ``interval_minutes`` bucket."""
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
    minute = (ts.minute // interval_minutes) * interval_minutes
    return ts.replace(minute=minute, second=0, microsecond=0)


def aggregate(samples: Iterable[Sample], interval_minutes: int) -> list[Bucket]:
    """Reduce ``samples`` to one :class:`Bucket` per interval boundary.

    Parameters
    ----------
    samples
        Readings in any order, possibly spanning several days.
    interval_minutes
        Bucket width; must be positive.

    Returns
    -------
    list[Bucket]
        One bucket per boundary that received at least one sample, sorted
        ascending.  Sentinel (``0``) and negative values are dropped before
        reduction; a boundary that only saw sentinels is kept with zeros.
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

    groups: dict[datetime, list[float]] = defaultdict(list)
    for sample in samples:
        key = floor_timestamp(sample.timestamp, interval_minutes)
        values = groups[key]
        if sample.value > 0:
            values.append(sample.value)

    buckets: list[Bucket] = []
    for key in sorted(groups):
        values = groups[key]
        if not values:
            buckets.append(Bucket(timestamp=key))
            continue
        buckets.append(
            Bucket(
                timestamp=key,
                min=min(values),
                max=max(values),
                average=sum(values) / len(values),
            )
        )

    logger.debug(
        "aggregation.buckets_built",
        interval_minutes=interval_minutes,
        buckets=len(buckets),
        empty=sum(1 for b in buckets if b.is_empty),
    )
    return buckets
