"""Daily insights — the full per-day analysis bundle.

Pipeline for one calendar day:

1. filter every stream to the day and aggregate into interval buckets,
2. summarise flow and heart-rate buckets,
3. correlate flow against heart rate on buckets sharing a timestamp,
4. derive frustration / excitement / calm indicators,
5. render the ordered key-insight strings.

Derived indicators have two sources.  When the day carries raw indicator
samples their mean is used as-is; otherwise a heuristic score is computed
from the flow / heart-rate statistics.  The two are not calibrated against
each other and the raw path always wins when present.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Sequence

import structlog

from flow_insights.analytics.aggregation import aggregate
from flow_insights.analytics.ingest import daily_series, samples_for_day
from flow_insights.analytics.statistics import (
    aligned_averages,
    correlation,
    find_most_similar_days,
    format_time,
    round_half_up,
    summarize,
    summarize_series,
)
from flow_insights.config import get_settings
from flow_insights.models import (
    DailyInsights,
    DailyStats,
    DerivedIndicators,
    FlowRecord,
    IndicatorSource,
    Sample,
    SignalType,
    WeeklySummary,
)

logger = structlog.get_logger(__name__)

# Peaks closer than this are treated as one high-demand period.
_PEAK_PROXIMITY = timedelta(minutes=30)
_BREAK_OFFSET = timedelta(minutes=45)


# ── Derived indicators ───────────────────────────────────────


def _raw_mean(samples: Sequence[Sample]) -> float | None:
    values = [s.value for s in samples if s.value > 0]
    if not values:
        return None
    return sum(values) / len(values)


def frustration_heuristic(flow: DailyStats, heart_rate: DailyStats, corr: float) -> float:
    score = 0.0
    if flow.stability < 40 and heart_rate.stability > 60:
        score += 30
    if flow.average < 40 and heart_rate.average > 85:
        score += 30
    if corr < -0.5:
        score += 40
    return min(100.0, score * 1.5)


def excitement_heuristic(flow: DailyStats, heart_rate: DailyStats) -> float:
    score = 0.0
    if flow.average > 75:
        score += 40
    if flow.peak.value > 85:
        score += 20
    if heart_rate.average > 80:
        score += 20
    if heart_rate.peak.value > 95:
        score += 20
    return min(100.0, score)


def calm_heuristic(flow: DailyStats, heart_rate: DailyStats) -> float:
    score = 0.0
    if flow.average < 50 and heart_rate.average < 70:
        score += 40
    if flow.stability > 70:
        score += 30
    if heart_rate.stability > 70:
        score += 30
    return min(100.0, score)


def derive_indicators(
    flow: DailyStats,
    heart_rate: DailyStats,
    corr: float,
    raw_frustration: Sequence[Sample] = (),
    raw_excitement: Sequence[Sample] = (),
    raw_calm: Sequence[Sample] = (),
) -> DerivedIndicators:
    """Resolve each indicator from raw samples, else from the heuristics."""
    candidates = {
        SignalType.FRUSTRATION: (_raw_mean(raw_frustration), lambda: frustration_heuristic(flow, heart_rate, corr)),
        SignalType.EXCITEMENT: (_raw_mean(raw_excitement), lambda: excitement_heuristic(flow, heart_rate)),
        SignalType.CALM: (_raw_mean(raw_calm), lambda: calm_heuristic(flow, heart_rate)),
    }

    values: dict[SignalType, float] = {}
    sources: dict[SignalType, IndicatorSource] = {}
    for signal, (raw, heuristic) in candidates.items():
        if raw is not None:
            value, sources[signal] = raw, IndicatorSource.RAW
        else:
            value, sources[signal] = heuristic(), IndicatorSource.HEURISTIC
        values[signal] = float(round_half_up(max(0.0, min(100.0, value))))

    return DerivedIndicators(
        frustration=values[SignalType.FRUSTRATION],
        excitement=values[SignalType.EXCITEMENT],
        calm=values[SignalType.CALM],
        sources=sources,
    )


# ── Narrative ─────────────────────────────────────────────────


def _correlation_sentence(corr: float) -> str:
    sign = "positive" if corr > 0 else "negative"
    if abs(corr) > 0.7:
        return f"Strong {sign} correlation ({corr:.2f}) between flow and heart rate"
    if abs(corr) > 0.3:
        return f"Moderate {sign} correlation ({corr:.2f}) between flow and heart rate"
    return f"Weak correlation ({corr:.2f}) between flow and heart rate"


def _water_intake(flow: DailyStats, heart_rate: DailyStats, base_litres: float) -> float:
    intake = base_litres
    if flow.average > 80:
        intake += 0.5
    elif flow.average > 60:
        intake += 0.3
    if heart_rate.average > 80:
        intake += 0.5
    elif heart_rate.average > 70:
        intake += 0.3
    return intake


def build_key_insights(
    flow: DailyStats,
    heart_rate: DailyStats,
    corr: float,
    base_water_litres: float = 2.0,
) -> list[str]:
    """Render the ordered, human-readable observations for one day."""
    insights: list[str] = []

    if flow.peak.value > 80 and flow.peak.time is not None:
        insights.append(
            f"Peak flow intensity of {round_half_up(flow.peak.value)}% at {format_time(flow.peak.time)}"
        )
    if flow.stability > 80:
        insights.append(f"Very stable flow state with {round_half_up(flow.stability)}% consistency")
    if flow.outliers:
        spikes = ", ".join(f"{round_half_up(o.value)}% at {o.time}" for o in flow.outliers)
        insights.append(f"Notable flow intensity spikes: {spikes}")

    if heart_rate.peak.value > 90 and heart_rate.peak.time is not None:
        insights.append(
            f"Notable heart rate peak of {round_half_up(heart_rate.peak.value)} bpm "
            f"at {format_time(heart_rate.peak.time)}"
        )
    if heart_rate.stability > 80:
        insights.append(f"Consistent heart rate patterns with {round_half_up(heart_rate.stability)}% stability")
    if heart_rate.outliers:
        variations = ", ".join(f"{round_half_up(o.value)} bpm at {o.time}" for o in heart_rate.outliers)
        insights.append(f"Notable heart rate variations: {variations}")

    insights.append(f"Flow intensity deviation: {round_half_up(flow.deviation)} points")
    insights.append(f"Heart rate deviation: {round_half_up(heart_rate.deviation)} bpm")
    insights.append(_correlation_sentence(corr))

    flow_peak, hr_peak = flow.peak.time, heart_rate.peak.time
    if flow_peak is not None and hr_peak is not None:
        if abs(flow_peak - hr_peak) < _PEAK_PROXIMITY:
            insights.append(
                "Consider taking a 15-minute break around "
                f"{format_time(flow_peak + _BREAK_OFFSET)} after your peak performance period"
            )
        else:
            insights.append(
                "Consider taking breaks after peak periods: around "
                f"{format_time(flow_peak)} and {format_time(hr_peak)}"
            )

    intake = _water_intake(flow, heart_rate, base_water_litres)
    insights.append(f"Recommended water intake: {intake:.1f}L based on your activity levels")
    return insights


# ── Entry points ──────────────────────────────────────────────


def analyze_day(
    flow: Iterable[Sample],
    heart_rate: Iterable[Sample],
    day: date,
    *,
    frustration: Iterable[Sample] = (),
    excitement: Iterable[Sample] = (),
    calm: Iterable[Sample] = (),
    interval_minutes: int | None = None,
    stability_scale: float | None = None,
    outlier_sigma: float | None = None,
) -> DailyInsights:
    """Run the full daily analysis for ``day``.

    Streams may span several days; only samples dated ``day`` are used.
    Unset tunables come from :func:`~flow_insights.config.get_settings`.
    """
    settings = get_settings()
    interval = settings.interval_minutes if interval_minutes is None else interval_minutes
    k = settings.daily_stability_scale if stability_scale is None else stability_scale
    sigma = settings.outlier_sigma if outlier_sigma is None else outlier_sigma

    day_flow = samples_for_day(flow, day)
    day_hr = samples_for_day(heart_rate, day)
    day_frustration = samples_for_day(frustration, day)
    day_excitement = samples_for_day(excitement, day)
    day_calm = samples_for_day(calm, day)

    flow_buckets = aggregate(day_flow, interval)
    hr_buckets = aggregate(day_hr, interval)

    flow_stats = summarize(flow_buckets, k, sigma)
    hr_stats = summarize(hr_buckets, k, sigma)
    corr = correlation(*aligned_averages(flow_buckets, hr_buckets))

    indicators = derive_indicators(
        flow_stats, hr_stats, corr, day_frustration, day_excitement, day_calm,
    )

    insights = DailyInsights(
        day=day,
        flow_stats=flow_stats,
        heart_rate_stats=hr_stats,
        correlation=corr,
        indicators=indicators,
        key_insights=build_key_insights(flow_stats, hr_stats, corr, settings.base_water_intake_litres),
        flow_buckets=flow_buckets,
        heart_rate_buckets=hr_buckets,
        frustration_buckets=aggregate(day_frustration, interval),
        excitement_buckets=aggregate(day_excitement, interval),
        calm_buckets=aggregate(day_calm, interval),
    )

    if not flow_stats.has_data or not hr_stats.has_data:
        logger.warning(
            "insights.insufficient_data",
            day=day.isoformat(),
            flow_samples=len(day_flow),
            heart_rate_samples=len(day_hr),
        )

    logger.info(
        "insights.day_analyzed",
        day=day.isoformat(),
        flow_avg=round(flow_stats.average, 1),
        hr_avg=round(hr_stats.average, 1),
        correlation=round(corr, 2),
        frustration=indicators.frustration,
        excitement=indicators.excitement,
        calm=indicators.calm,
        n_insights=len(insights.key_insights),
    )
    return insights


def summarize_week(
    records: Sequence[FlowRecord],
    *,
    stability_scale: float | None = None,
    top_count: int | None = None,
) -> WeeklySummary:
    """Summarise per-day flow / heart-rate averages across ``records``."""
    settings = get_settings()
    k = settings.weekly_stability_scale if stability_scale is None else stability_scale
    top = settings.similar_days_top_count if top_count is None else top_count

    flow_series = daily_series(records, SignalType.FLOW)
    hr_series = daily_series(records, SignalType.HEART_RATE)

    return WeeklySummary(
        flow_series=flow_series,
        heart_rate_series=hr_series,
        flow_stats=summarize_series(flow_series, k, settings.outlier_sigma),
        heart_rate_stats=summarize_series(hr_series, k, settings.outlier_sigma),
        flow_similar_days=find_most_similar_days(flow_series, top),
        heart_rate_similar_days=find_most_similar_days(hr_series, top),
    )
