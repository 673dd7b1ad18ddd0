"""Builders shared by the test modules."""

from __future__ import annotations

from datetime import date, datetime, timezone

from flow_insights.models import DailyStats, TimedValue

DAY = date(2024, 3, 4)


def at(hour: int, minute: int = 0, second: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)


def stats(average: float, stability: float, peak: float | None = None, deviation: float = 0.0) -> DailyStats:
    return DailyStats(
        average=average,
        peak=TimedValue(value=peak if peak is not None else average, time=at(12)),
        low=TimedValue(value=average, time=at(9)),
        deviation=deviation,
        stability=stability,
    )
