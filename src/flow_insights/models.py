"""Shared Pydantic models used across the analytics engine."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ─────────────────────────────────────────────────────


class SignalType(str, Enum):
    """Physiological streams carried by a flow record."""

    FLOW = "flow"
    HEART_RATE = "heart_rate"
    FRUSTRATION = "frustration"
    EXCITEMENT = "excitement"
    CALM = "calm"


class IndicatorSource(str, Enum):
    """Which code path produced a derived indicator value."""

    RAW = "raw"
    HEURISTIC = "heuristic"


# ── Raw input ─────────────────────────────────────────────────


class Sample(BaseModel):
    """A single timestamped reading.

    A ``value`` of ``0`` is the "no reading" sentinel and never contributes
    to averages or extremes.
    """

    timestamp: datetime
    value: float


class FlowRecord(BaseModel):
    """One persisted device record as handed over by the record store.

    Accepts both the stored camelCase keys and snake_case names.  Indicator
    lists hold fractions in [0, 1].
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field("", alias="userId")
    ts: float = Field(alias="_ts", description="Epoch timestamp in seconds.")
    flow_activity_values: list[float] = Field(default_factory=list, alias="flowActivityValues")
    heart_rate_values: list[float] = Field(default_factory=list, alias="heartRateValues")
    frustrated_indicator_value: list[float] | None = Field(None, alias="frustratedIndicatorValue")
    excited_indicator_value: list[float] | None = Field(None, alias="excitedIndicatorValue")
    calm_indicator_value: list[float] | None = Field(None, alias="calmIndicatorValue")


# ── Aggregates ────────────────────────────────────────────────


class Bucket(BaseModel):
    """Fixed-width interval aggregate of raw samples.

    A bucket whose samples were all sentinels keeps its time slot but has
    ``min == max == average == 0``.
    """

    timestamp: datetime
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.average <= 0


class TimedValue(BaseModel):
    """A value together with the bucket start it came from."""

    value: float = 0.0
    time: datetime | None = None


class Outlier(BaseModel):
    value: float
    time: str


class DailyStats(BaseModel):
    """Statistical summary of one signal's buckets."""

    average: float = 0.0
    peak: TimedValue = Field(default_factory=TimedValue)
    low: TimedValue = Field(default_factory=TimedValue)
    deviation: float = 0.0
    stability: float = Field(0.0, ge=0.0, le=100.0)
    outliers: list[Outlier] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> DailyStats:
        """Zero-value summary returned when no bucket carries data."""
        return cls()

    @property
    def has_data(self) -> bool:
        return self.peak.time is not None


class DerivedIndicators(BaseModel):
    """Frustration / excitement / calm indicators on a 0–100 scale."""

    frustration: float = Field(0.0, ge=0.0, le=100.0)
    excitement: float = Field(0.0, ge=0.0, le=100.0)
    calm: float = Field(0.0, ge=0.0, le=100.0)
    sources: dict[SignalType, IndicatorSource] = Field(default_factory=dict)


class DailyInsights(BaseModel):
    """Everything the daily analysis produces for one calendar day."""

    day: date
    flow_stats: DailyStats = Field(default_factory=DailyStats)
    heart_rate_stats: DailyStats = Field(default_factory=DailyStats)
    correlation: float = Field(0.0, ge=-1.0, le=1.0)
    indicators: DerivedIndicators = Field(default_factory=DerivedIndicators)
    key_insights: list[str] = Field(default_factory=list)

    flow_buckets: list[Bucket] = Field(default_factory=list)
    heart_rate_buckets: list[Bucket] = Field(default_factory=list)
    frustration_buckets: list[Bucket] = Field(default_factory=list)
    excitement_buckets: list[Bucket] = Field(default_factory=list)
    calm_buckets: list[Bucket] = Field(default_factory=list)


# ── Weekly view ───────────────────────────────────────────────


class DailyValue(BaseModel):
    """One point of a per-day series (weekly chart)."""

    day: date
    value: float


class SimilarDayPair(BaseModel):
    day1: date
    day2: date
    value1: float
    value2: float
    difference: float


class WeeklySummary(BaseModel):
    """Per-day series and their summaries across a multi-day window."""

    flow_series: list[DailyValue] = Field(default_factory=list)
    heart_rate_series: list[DailyValue] = Field(default_factory=list)
    flow_stats: DailyStats = Field(default_factory=DailyStats)
    heart_rate_stats: DailyStats = Field(default_factory=DailyStats)
    flow_similar_days: list[SimilarDayPair] = Field(default_factory=list)
    heart_rate_similar_days: list[SimilarDayPair] = Field(default_factory=list)


# ── Timeline ──────────────────────────────────────────────────


class TimePoint(BaseModel):
    """Readings for one cell of the hour × 5-minute timeline grid."""

    timestamp: datetime
    flow: float
    heart_rate: float
    frustration: float | None = None
    excitement: float | None = None
    calm: float | None = None


class SegmentSelection(BaseModel):
    """A closed range of timeline cells, given by its two clicked corners.

    ``start`` is the first click and ``end`` the second; they may be in
    either chronological order.  All fields ``None`` means no selection.
    """

    start_hour: datetime | None = None
    start_slot: int | None = Field(None, ge=0, le=11)
    end_hour: datetime | None = None
    end_slot: int | None = Field(None, ge=0, le=11)

    @property
    def is_empty(self) -> bool:
        return self.start_hour is None or self.start_slot is None

    @property
    def is_complete(self) -> bool:
        return not self.is_empty and self.end_hour is not None and self.end_slot is not None


class SegmentAverages(BaseModel):
    """Per-metric means over the data-bearing cells of a selection.

    Indicator means are ``None`` when no included cell carried that
    indicator.
    """

    flow: float
    heart_rate: float
    frustration: float | None = None
    excitement: float | None = None
    calm: float | None = None
    point_count: int = Field(gt=0)
    start_time: str
    end_time: str
