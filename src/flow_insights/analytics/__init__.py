"""Analytics — interval aggregation, statistics, correlation and daily insights."""

from flow_insights.analytics.aggregation import aggregate, floor_timestamp
from flow_insights.analytics.insights import analyze_day, summarize_week
from flow_insights.analytics.statistics import correlation, summarize

__all__ = [
    "aggregate",
    "analyze_day",
    "correlation",
    "floor_timestamp",
    "summarize",
    "summarize_week",
]
