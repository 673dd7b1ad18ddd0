"""Statistical summaries and correlation over bucketed series."""

from __future__ import annotations

import math
import statistics
from datetime import datetime, time
from typing import Sequence

import structlog

from flow_insights.models import (
    Bucket,
    DailyStats,
    DailyValue,
    Outlier,
    SimilarDayPair,
    TimedValue,
)

logger = structlog.get_logger(__name__)


def format_time(ts: datetime) -> str:
    """Render a timestamp as ``hh:mm AM/PM`` for display strings."""
    return ts.strftime("%I:%M %p")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5`` gives ``3``)."""
    return math.floor(value + 0.5)


# ── Summaries ─────────────────────────────────────────────────


def summarize(
    buckets: Sequence[Bucket],
    stability_scale: float,
    outlier_sigma: float = 2.0,
) -> DailyStats:
    """Summarise the non-empty buckets of one signal.

    Parameters
    ----------
    buckets
        Output of :func:`~flow_insights.analytics.aggregation.aggregate`.
        Buckets with ``average <= 0`` are ignored.
    stability_scale
        The ``k`` in ``stability = max(0, 100 - deviation * k)``.  There is
        no default: each call site picks its own calibration.
    outlier_sigma
        Buckets further than ``outlier_sigma`` population standard
        deviations from the mean are reported as outliers.

    Returns
    -------
    DailyStats
        :meth:`DailyStats.empty` when no bucket carries data.
    """
    valid = [b for b in buckets if b.average > 0]
    if not valid:
        return DailyStats.empty()

    values = [b.average for b in valid]
    mean = statistics.fmean(values)
    deviation = statistics.pstdev(values, mu=mean)

    # First occurrence wins on ties.
    peak = low = valid[0]
    for bucket in valid[1:]:
        if bucket.average > peak.average:
            peak = bucket
        if bucket.average < low.average:
            low = bucket

    outliers = [
        Outlier(value=b.average, time=format_time(b.timestamp))
        for b in valid
        if abs(b.average - mean) > outlier_sigma * deviation
    ]

    return DailyStats(
        average=mean,
        peak=TimedValue(value=peak.average, time=peak.timestamp),
        low=TimedValue(value=low.average, time=low.timestamp),
        deviation=deviation,
        stability=max(0.0, 100.0 - deviation * stability_scale),
        outliers=outliers,
    )


def summarize_series(
    series: Sequence[DailyValue],
    stability_scale: float,
    outlier_sigma: float = 2.0,
) -> DailyStats:
    """Summarise a per-day series; each day is treated as one bucket."""
    buckets = [
        Bucket(
            timestamp=datetime.combine(point.day, time()),
            min=point.value,
            max=point.value,
            average=point.value,
        )
        for point in series
    ]
    return summarize(buckets, stability_scale, outlier_sigma)


# ── Correlation ───────────────────────────────────────────────


def correlation(series_a: Sequence[float], series_b: Sequence[float]) -> float:
    """Pearson product-moment correlation of two equal-length series.

    Returns exactly ``0.0`` when either series has zero variance (including
    empty input).  Raises :class:`ValueError` on a length mismatch.
    """
    if len(series_a) != len(series_b):
        raise ValueError(
            f"correlation requires equal-length series, got {len(series_a)} and {len(series_b)}"
        )

    n = len(series_a)
    sum_x = sum(series_a)
    sum_y = sum(series_b)
    sum_xy = sum(x * y for x, y in zip(series_a, series_b))
    sum_x2 = sum(x * x for x in series_a)
    sum_y2 = sum(y * y for y in series_b)

    numerator = n * sum_xy - sum_x * sum_y
    spread_x = n * sum_x2 - sum_x * sum_x
    spread_y = n * sum_y2 - sum_y * sum_y
    # Constant series can leave float residue in the spread terms.
    if spread_x <= 0 or spread_y <= 0 or len(set(series_a)) < 2 or len(set(series_b)) < 2:
        return 0.0

    r = numerator / math.sqrt(spread_x * spread_y)
    return max(-1.0, min(1.0, r))


def aligned_averages(
    buckets_a: Sequence[Bucket],
    buckets_b: Sequence[Bucket],
) -> tuple[list[float], list[float]]:
    """Pair bucket averages that share a timestamp, in chronological order.

    Pairs where either bucket is empty are dropped.
    """
    by_time = {b.timestamp: b.average for b in buckets_b if not b.is_empty}
    xs: list[float] = []
    ys: list[float] = []
    for bucket in buckets_a:
        if not bucket.is_empty and bucket.timestamp in by_time:
            xs.append(bucket.average)
            ys.append(by_time[bucket.timestamp])
    return xs, ys


# ── Day similarity ────────────────────────────────────────────


def find_most_similar_days(
    series: Sequence[DailyValue],
    top_count: int = 3,
) -> list[SimilarDayPair]:
    """Return the ``top_count`` day pairs whose values differ the least."""
    pairs = [
        SimilarDayPair(
            day1=a.day,
            day2=b.day,
            value1=a.value,
            value2=b.value,
            difference=abs(a.value - b.value),
        )
        for i, a in enumerate(series)
        for b in series[i + 1:]
    ]
    pairs.sort(key=lambda p: p.difference)
    return pairs[:top_count]
