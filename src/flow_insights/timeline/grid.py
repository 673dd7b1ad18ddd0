"""Timeline grid — one averaged point per interval boundary of a day.

Each boundary takes the mean of the samples within ±(interval × multiplier)/2
of it, so neighbouring points overlap slightly and sparse data still fills
the grid.  Points are then grouped into hour rows of twelve 5-minute slots.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Iterable, Sequence

import structlog

from flow_insights.analytics.ingest import samples_for_day
from flow_insights.config import get_settings
from flow_insights.models import Sample, TimePoint

logger = structlog.get_logger(__name__)

SLOTS_PER_HOUR = 12
SLOT_MINUTES = 60 // SLOTS_PER_HOUR

# Plausible reading ranges for a grid cell.
FLOW_RANGE = (5.0, 150.0)
HEART_RATE_RANGE = (40.0, 200.0)


# ── Indicator heuristics ─────────────────────────────────────


def frustration_score(flow: float, heart_rate: float) -> float:
    if flow < 40 and heart_rate > 80:
        return 85.0
    if flow < 60 and heart_rate > 70:
        return 60.0
    return max(0.0, min(100.0, 100 - flow + (heart_rate - 70)))


def excitement_score(flow: float, heart_rate: float) -> float:
    if flow > 80 and heart_rate > 75:
        return 85.0
    if flow > 60 and heart_rate > 65:
        return 60.0
    return max(0.0, min(100.0, flow * 0.8 + (heart_rate - 60) * 0.4))


def calm_score(flow: float, heart_rate: float) -> float:
    if 40 < flow < 80 and heart_rate < 70:
        return 85.0
    if heart_rate < 75:
        return 60.0
    return max(0.0, min(100.0, 100 - (heart_rate - 50)))


# ── Grid construction ─────────────────────────────────────────


def _window_mean(samples: Sequence[Sample], center: datetime, half_window: timedelta) -> float | None:
    values = [s.value for s in samples if abs(s.timestamp - center) <= half_window]
    if not values:
        return None
    return sum(values) / len(values)


def _positive(samples: Iterable[Sample], day: date) -> list[Sample]:
    return [s for s in samples_for_day(samples, day) if s.value > 0]


def build_time_points(
    flow: Iterable[Sample],
    heart_rate: Iterable[Sample],
    day: date,
    *,
    interval_minutes: int = 5,
    window_multiplier: float | None = None,
    min_points: int | None = None,
    frustration: Iterable[Sample] = (),
    excitement: Iterable[Sample] = (),
    calm: Iterable[Sample] = (),
) -> list[TimePoint]:
    """Build the day's timeline points.

    Parameters
    ----------
    flow, heart_rate
        Sample streams; only positive samples dated ``day`` are used.
    interval_minutes
        Spacing of the boundaries, starting at midnight.
    window_multiplier
        Averaging window as a multiple of the interval, centred on each
        boundary.  Defaults to ``settings.timeline_window_multiplier``.
    min_points
        Minimum number of samples required of *each* of flow and heart
        rate; below it the day yields no points.  Defaults to
        ``settings.timeline_min_points``.
    frustration, excitement, calm
        Optional raw indicator samples on a 0–100 scale.  Where a window
        has none, the indicator is scored from the point's flow and heart
        rate instead.

    Returns
    -------
    list[TimePoint]
        Chronological; boundaries lacking flow or heart-rate samples are
        omitted rather than filled with placeholders.
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")

    settings = get_settings()
    if window_multiplier is None:
        window_multiplier = settings.timeline_window_multiplier
    if min_points is None:
        min_points = settings.timeline_min_points

    day_flow = _positive(flow, day)
    day_hr = _positive(heart_rate, day)
    if len(day_flow) < min_points or len(day_hr) < min_points:
        logger.warning(
            "timeline.insufficient_data",
            day=day.isoformat(),
            flow_samples=len(day_flow),
            heart_rate_samples=len(day_hr),
            min_points=min_points,
        )
        return []

    indicators = {
        "frustration": (_positive(frustration, day), frustration_score),
        "excitement": (_positive(excitement, day), excitement_score),
        "calm": (_positive(calm, day), calm_score),
    }

    tz = day_flow[0].timestamp.tzinfo
    step = timedelta(minutes=interval_minutes)
    half_window = step * window_multiplier / 2
    current = datetime.combine(day, time(), tzinfo=tz)

    points: list[TimePoint] = []
    while current.date() == day:
        flow_value = _window_mean(day_flow, current, half_window)
        hr_value = _window_mean(day_hr, current, half_window)
        if flow_value is not None and hr_value is not None:
            extra: dict[str, float] = {}
            for name, (samples, score) in indicators.items():
                raw = _window_mean(samples, current, half_window) if samples else None
                extra[name] = raw if raw is not None else score(flow_value, hr_value)
            points.append(
                TimePoint(timestamp=current, flow=flow_value, heart_rate=hr_value, **extra)
            )
        current += step

    logger.debug("timeline.points_built", day=day.isoformat(), points=len(points))
    return points


# ── Hour × slot grid ──────────────────────────────────────────


def is_valid_time_point(point: TimePoint) -> bool:
    """Whether a point's readings are finite and physiologically plausible."""
    if not (math.isfinite(point.flow) and math.isfinite(point.heart_rate)):
        return False
    return (
        FLOW_RANGE[0] <= point.flow <= FLOW_RANGE[1]
        and HEART_RATE_RANGE[0] <= point.heart_rate <= HEART_RATE_RANGE[1]
    )


def hour_key(ts: datetime) -> datetime:
    return ts.replace(minute=0, second=0, microsecond=0)


def slot_of(ts: datetime) -> int:
    return ts.minute // SLOT_MINUTES


def group_by_hour(points: Iterable[TimePoint]) -> dict[datetime, dict[int, TimePoint]]:
    """Group valid points into hour rows keyed by hour start, then by slot.

    A later point landing in an occupied slot replaces the earlier one.
    """
    grid: dict[datetime, dict[int, TimePoint]] = {}
    for point in points:
        if not is_valid_time_point(point):
            continue
        grid.setdefault(hour_key(point.timestamp), {})[slot_of(point.timestamp)] = point
    return grid


def ordered_hours(grid: dict[datetime, dict[int, TimePoint]]) -> list[datetime]:
    return sorted(grid)
