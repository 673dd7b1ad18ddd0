"""Timeline — hour × 5-minute grid of averaged points and segment selection."""

from flow_insights.timeline.grid import build_time_points, group_by_hour, ordered_hours
from flow_insights.timeline.selection import (
    SegmentSelector,
    average_selection,
    is_in_selection,
)

__all__ = [
    "SegmentSelector",
    "average_selection",
    "build_time_points",
    "group_by_hour",
    "is_in_selection",
    "ordered_hours",
]
