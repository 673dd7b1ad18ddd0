"""Tests for derived indicators, key insights and the daily / weekly analyses."""

from __future__ import annotations

from datetime import date

import pytest

from flow_insights.analytics.insights import (
    analyze_day,
    build_key_insights,
    calm_heuristic,
    derive_indicators,
    excitement_heuristic,
    frustration_heuristic,
    summarize_week,
)
from flow_insights.models import IndicatorSource, Sample, SignalType, TimedValue
from helpers import at, stats


# ── Derived indicators ───────────────────────────────────────


class TestHeuristics:
    def test_frustration_all_conditions(self):
        flow = stats(average=30, stability=30)
        hr = stats(average=90, stability=70)
        assert frustration_heuristic(flow, hr, corr=-0.8) == 100

    def test_frustration_scaled(self):
        flow = stats(average=30, stability=80)
        hr = stats(average=90, stability=50)
        assert frustration_heuristic(flow, hr, corr=0.0) == 45

    def test_excitement(self):
        flow = stats(average=80, stability=50, peak=90)
        hr = stats(average=85, stability=50, peak=100)
        assert excitement_heuristic(flow, hr) == 100

    def test_calm(self):
        flow = stats(average=40, stability=75)
        hr = stats(average=60, stability=75)
        assert calm_heuristic(flow, hr) == 100


class TestDeriveIndicators:
    def test_heuristic_path(self):
        flow = stats(average=40, stability=75)
        hr = stats(average=60, stability=75)
        result = derive_indicators(flow, hr, 0.0)
        assert result.calm == 100
        assert result.frustration == 0
        assert set(result.sources.values()) == {IndicatorSource.HEURISTIC}

    def test_raw_samples_win(self):
        flow = stats(average=40, stability=75)
        hr = stats(average=60, stability=75)
        raw = [Sample(timestamp=at(9), value=20), Sample(timestamp=at(9, 1), value=30)]
        result = derive_indicators(flow, hr, 0.0, raw_calm=raw)
        assert result.calm == 25
        assert result.sources[SignalType.CALM] == IndicatorSource.RAW
        assert result.sources[SignalType.FRUSTRATION] == IndicatorSource.HEURISTIC

    def test_sentinel_only_raw_falls_back(self):
        flow = stats(average=40, stability=75)
        hr = stats(average=60, stability=75)
        raw = [Sample(timestamp=at(9), value=0)]
        result = derive_indicators(flow, hr, 0.0, raw_calm=raw)
        assert result.sources[SignalType.CALM] == IndicatorSource.HEURISTIC

    def test_raw_values_clamped_and_rounded(self):
        flow = stats(average=50, stability=50)
        raw = [Sample(timestamp=at(9), value=140.0)]
        result = derive_indicators(flow, flow, 0.0, raw_excitement=raw)
        assert result.excitement == 100

    def test_raw_mean_rounds_half_up(self):
        flow = stats(average=50, stability=50)
        raw = [Sample(timestamp=at(9), value=60.0), Sample(timestamp=at(9, 1), value=61.0)]
        result = derive_indicators(flow, flow, 0.0, raw_frustration=raw)
        assert result.frustration == 61
        assert result.sources[SignalType.FRUSTRATION] == IndicatorSource.RAW


# ── Key insights ──────────────────────────────────────────────


class TestKeyInsights:
    def test_break_suggestion_when_peaks_far_apart(self):
        flow = stats(average=50, stability=50)
        hr = stats(average=60, stability=50).model_copy(
            update={"peak": TimedValue(value=60, time=at(15))}
        )
        insights = build_key_insights(flow, hr, 0.1)
        assert "Consider taking breaks after peak periods: around 12:00 PM and 03:00 PM" in insights

    def test_correlation_wording(self):
        flow = stats(average=50, stability=50)
        assert "Moderate negative correlation (-0.50) between flow and heart rate" in (
            build_key_insights(flow, flow, -0.5)
        )
        assert "Weak correlation (0.10) between flow and heart rate" in build_key_insights(flow, flow, 0.1)

    def test_water_intake(self):
        flow = stats(average=85, stability=50)
        hr = stats(average=85, stability=50)
        insights = build_key_insights(flow, hr, 0.0, base_water_litres=2.5)
        assert insights[-1] == "Recommended water intake: 3.5L based on your activity levels"


# ── Daily analysis ────────────────────────────────────────────


class TestAnalyzeDay:
    def test_full_day(self, flow_samples, heart_rate_samples, day):
        result = analyze_day(flow_samples, heart_rate_samples, day, interval_minutes=5)

        assert result.day == day
        assert len(result.flow_buckets) == 12
        assert len(result.heart_rate_buckets) == 12
        assert result.flow_stats.average == pytest.approx(64)
        assert result.heart_rate_stats.average == pytest.approx(75.5)
        assert result.correlation == pytest.approx(1.0)

        assert result.indicators.frustration == 0
        assert result.indicators.excitement == 20
        assert result.indicators.calm == 30
        assert result.frustration_buckets == []

    def test_key_insights_order(self, flow_samples, heart_rate_samples, day):
        result = analyze_day(flow_samples, heart_rate_samples, day, interval_minutes=5)
        assert result.key_insights == [
            "Peak flow intensity of 86% at 09:55 AM",
            "Consistent heart rate patterns with 90% stability",
            "Flow intensity deviation: 14 points",
            "Heart rate deviation: 3 bpm",
            "Strong positive correlation (1.00) between flow and heart rate",
            "Consider taking a 15-minute break around 10:40 AM after your peak performance period",
            "Recommended water intake: 2.6L based on your activity levels",
        ]

    def test_other_days_ignored(self, flow_samples, heart_rate_samples, day):
        stray = [Sample(timestamp=at(9, day=date(2024, 3, 5)), value=99)]
        baseline = analyze_day(flow_samples, heart_rate_samples, day, interval_minutes=5)
        result = analyze_day(flow_samples + stray, heart_rate_samples, day, interval_minutes=5)
        assert result == baseline

    def test_raw_indicators_used(self, flow_samples, heart_rate_samples, day):
        frustration = [Sample(timestamp=at(9, 1), value=70), Sample(timestamp=at(9, 2), value=0)]
        result = analyze_day(
            flow_samples, heart_rate_samples, day,
            frustration=frustration, interval_minutes=5,
        )
        assert result.indicators.frustration == 70
        assert result.indicators.sources[SignalType.FRUSTRATION] == IndicatorSource.RAW
        assert len(result.frustration_buckets) == 1

    def test_correlation_ignores_empty_buckets(self, day):
        times = [at(9), at(9, 5), at(9, 10), at(9, 15)]
        flow = [Sample(timestamp=t, value=v) for t, v in zip(times, [50, 60, 70, 0])]
        heart_rate = [Sample(timestamp=t, value=v) for t, v in zip(times, [70, 80, 90, 100])]
        result = analyze_day(flow, heart_rate, day, interval_minutes=5)
        assert len(result.flow_buckets) == 4
        assert result.correlation == pytest.approx(1.0)

    def test_no_data(self, day):
        result = analyze_day([], [], day, interval_minutes=5)
        assert not result.flow_stats.has_data
        assert result.correlation == 0
        assert result.key_insights == [
            "Flow intensity deviation: 0 points",
            "Heart rate deviation: 0 bpm",
            "Weak correlation (0.00) between flow and heart rate",
            "Recommended water intake: 2.0L based on your activity levels",
        ]


class TestSummarizeWeek:
    def test_weekly_summary(self, records):
        result = summarize_week(records, stability_scale=10, top_count=3)
        assert [p.value for p in result.flow_series] == [65, 0, 66]
        assert result.flow_stats.average == pytest.approx(65.5)
        assert result.flow_stats.stability == pytest.approx(95)
        assert result.flow_similar_days[0].difference == 1
        assert len(result.flow_similar_days) == 3
        assert [p.value for p in result.heart_rate_series] == [76, 0, 78]
