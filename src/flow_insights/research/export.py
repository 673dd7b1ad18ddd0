"""Export utilities — bucketed series as pandas frames and CSV files."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd
import structlog

from flow_insights.models import Bucket, DailyInsights

logger = structlog.get_logger(__name__)

_BUCKET_COLUMNS = ["min", "max", "average"]


def buckets_to_dataframe(buckets: Sequence[Bucket]) -> pd.DataFrame:
    """Load buckets into a :class:`pandas.DataFrame`.

    Columns: ``min``, ``max``, ``average``, indexed by ``timestamp``.
    """
    df = pd.DataFrame(
        [b.model_dump() for b in buckets],
        columns=["timestamp", *_BUCKET_COLUMNS],
    )
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df.set_index("timestamp").sort_index()


def insights_to_dataframe(insights: DailyInsights) -> pd.DataFrame:
    """Flow and heart-rate buckets of one day, outer-joined on timestamp.

    Columns are prefixed ``flow_`` and ``heart_rate_``; a bucket present in
    only one stream leaves the other stream's columns as ``NaN``.
    """
    flow = buckets_to_dataframe(insights.flow_buckets).add_prefix("flow_")
    heart_rate = buckets_to_dataframe(insights.heart_rate_buckets).add_prefix("heart_rate_")
    return flow.join(heart_rate, how="outer").sort_index()


def export_insights_csv(insights: DailyInsights, output_path: str | Path) -> Path:
    """Write :func:`insights_to_dataframe` to a CSV file.

    Returns the resolved output path.
    """
    df = insights_to_dataframe(insights)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output, index_label="timestamp")

    logger.info("export.csv_written", path=str(output), rows=len(df), day=insights.day.isoformat())
    return output
