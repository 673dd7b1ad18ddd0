"""Segment selection over the hour × slot timeline grid.

A selection is defined by two clicked cells.  Cells are ordered by
``(hour position, slot)``, and the selected range runs from the earlier of
the two clicks to the later one, inclusive, whichever was clicked first.
Partial first and last hour rows fall out of that ordering: the earlier
row contributes its slots from the anchor onward, the later row its slots
up to the anchor, and every row in between is fully included.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import structlog

from flow_insights.analytics.statistics import format_time
from flow_insights.models import SegmentAverages, SegmentSelection, TimePoint
from flow_insights.timeline.grid import SLOTS_PER_HOUR, ordered_hours as sorted_hours

logger = structlog.get_logger(__name__)

Grid = dict[datetime, dict[int, TimePoint]]


class SegmentSelector:
    """Two-click selection protocol.

    The first click opens a selection anchored at that cell, the second
    closes it at the clicked cell and a third click starts over.
    """

    def __init__(self) -> None:
        self.selection = SegmentSelection()
        self._selecting = False

    @property
    def is_selecting(self) -> bool:
        return self._selecting

    def select_cell(self, hour: datetime, slot: int) -> SegmentSelection:
        if not self._selecting:
            self.selection = SegmentSelection(
                start_hour=hour, start_slot=slot, end_hour=hour, end_slot=slot,
            )
            self._selecting = True
        else:
            self.selection = SegmentSelection(
                start_hour=self.selection.start_hour,
                start_slot=self.selection.start_slot,
                end_hour=hour,
                end_slot=slot,
            )
            self._selecting = False
        return self.selection

    def clear(self) -> None:
        self.selection = SegmentSelection()
        self._selecting = False


def _bounds(
    selection: SegmentSelection,
    hours: Sequence[datetime],
) -> tuple[tuple[int, int], tuple[int, int]] | None:
    """Earliest and latest selected cell as ``(hour index, slot)``."""
    if not selection.is_complete:
        return None
    try:
        start = (hours.index(selection.start_hour), selection.start_slot)
        end = (hours.index(selection.end_hour), selection.end_slot)
    except ValueError:
        return None
    return min(start, end), max(start, end)


def is_in_selection(
    hour: datetime,
    slot: int,
    selection: SegmentSelection,
    ordered_hours: Sequence[datetime],
) -> bool:
    bounds = _bounds(selection, ordered_hours)
    if bounds is None or hour not in ordered_hours:
        return False
    first, last = bounds
    return first <= (ordered_hours.index(hour), slot) <= last


def selected_cells(
    selection: SegmentSelection,
    ordered_hours: Sequence[datetime],
) -> list[tuple[datetime, int]]:
    """Every ``(hour, slot)`` inside the selection, chronologically."""
    bounds = _bounds(selection, ordered_hours)
    if bounds is None:
        return []
    (first_hour, first_slot), (last_hour, last_slot) = bounds

    cells: list[tuple[datetime, int]] = []
    for index in range(first_hour, last_hour + 1):
        lo = first_slot if index == first_hour else 0
        hi = last_slot if index == last_hour else SLOTS_PER_HOUR - 1
        cells.extend((ordered_hours[index], slot) for slot in range(lo, hi + 1))
    return cells


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def average_selection(
    selection: SegmentSelection,
    grid: Grid,
    ordered_hours: Sequence[datetime] | None = None,
) -> SegmentAverages | None:
    """Average every metric over the data-bearing cells of ``selection``.

    Empty cells are skipped, not counted as zero.  Returns ``None`` when
    the selection is incomplete, references an hour missing from the grid,
    or covers no cell with data.
    """
    hours = list(ordered_hours) if ordered_hours is not None else sorted_hours(grid)

    points = [
        grid[hour][slot]
        for hour, slot in selected_cells(selection, hours)
        if slot in grid.get(hour, {})
    ]
    if not points:
        logger.debug("selection.empty", start_hour=selection.start_hour, end_hour=selection.end_hour)
        return None

    averages = SegmentAverages(
        flow=_mean([p.flow for p in points]),
        heart_rate=_mean([p.heart_rate for p in points]),
        frustration=_mean([p.frustration for p in points if p.frustration is not None]),
        excitement=_mean([p.excitement for p in points if p.excitement is not None]),
        calm=_mean([p.calm for p in points if p.calm is not None]),
        point_count=len(points),
        start_time=format_time(points[0].timestamp),
        end_time=format_time(points[-1].timestamp),
    )
    logger.debug("selection.averaged", point_count=averages.point_count)
    return averages
