"""Record ingestion — flatten stored device records into sample streams."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Iterable, Sequence

import structlog

from flow_insights.analytics.statistics import round_half_up
from flow_insights.models import DailyValue, FlowRecord, Sample, SignalType

logger = structlog.get_logger(__name__)

# Indicator fractions are stored in [0, 1]; the engine works on 0–100.
_INDICATOR_SCALE = 100.0


def record_time(record: FlowRecord) -> datetime:
    """Return the record's timestamp as an aware UTC datetime."""
    return datetime.fromtimestamp(record.ts, tz=timezone.utc)


def _record_values(record: FlowRecord, signal: SignalType) -> list[float]:
    if signal is SignalType.FLOW:
        return list(record.flow_activity_values)
    if signal is SignalType.HEART_RATE:
        return list(record.heart_rate_values)

    raw = {
        SignalType.FRUSTRATION: record.frustrated_indicator_value,
        SignalType.EXCITEMENT: record.excited_indicator_value,
        SignalType.CALM: record.calm_indicator_value,
    }[signal]
    return [v * _INDICATOR_SCALE for v in raw or []]


def record_samples(records: Iterable[FlowRecord], signal: SignalType) -> list[Sample]:
    """Flatten every value of ``signal`` across ``records`` into samples.

    All values of a record share the record's timestamp.  Records without
    values for an indicator contribute nothing.
    """
    samples: list[Sample] = []
    for record in records:
        ts = record_time(record)
        samples.extend(Sample(timestamp=ts, value=v) for v in _record_values(record, signal))
    logger.debug("ingest.samples_flattened", signal=signal.value, count=len(samples))
    return samples


def samples_for_day(samples: Iterable[Sample], day: date) -> list[Sample]:
    """Keep only the samples recorded on ``day``."""
    return [s for s in samples if s.timestamp.date() == day]


def daily_series(records: Sequence[FlowRecord], signal: SignalType) -> list[DailyValue]:
    """Per-day mean of each record's first ``signal`` value.

    This is the weekly-chart series.  Non-positive first values are skipped;
    a day seen only with such values reports ``0``.  Days are returned in
    chronological order.
    """
    sums: dict[date, list[float]] = defaultdict(lambda: [0.0, 0])
    for record in records:
        day = record_time(record).date()
        values = _record_values(record, signal)
        value = values[0] if values else 0.0
        acc = sums[day]
        if value > 0:
            acc[0] += value
            acc[1] += 1

    return [
        DailyValue(day=day, value=round_half_up(total / count) if count else 0.0)
        for day, (total, count) in sorted(sums.items())
    ]
