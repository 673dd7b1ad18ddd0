"""Command-line entrypoint — analyse or export a day of stored flow records."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from flow_insights.affect.classifier import classify
from flow_insights.affect.models import ClassifierInputs
from flow_insights.analytics.ingest import record_samples, record_time
from flow_insights.analytics.insights import analyze_day
from flow_insights.config import get_settings
from flow_insights.logger import setup_logging
from flow_insights.models import DailyInsights, FlowRecord, SignalType
from flow_insights.research.export import export_insights_csv

logger = structlog.get_logger(__name__)

_RECORDS = TypeAdapter(list[FlowRecord])


def load_records(path: str | Path) -> list[FlowRecord]:
    """Read a JSON array of stored records."""
    with Path(path).open(encoding="utf-8") as f:
        return _RECORDS.validate_python(json.load(f))


def run_analysis(
    records: list[FlowRecord],
    day: date | None = None,
    *,
    interval_minutes: int | None = None,
) -> DailyInsights:
    """Analyse ``day``, defaulting to the day of the most recent record."""
    if day is None:
        day = max(record_time(r) for r in records).date()
    return analyze_day(
        record_samples(records, SignalType.FLOW),
        record_samples(records, SignalType.HEART_RATE),
        day,
        frustration=record_samples(records, SignalType.FRUSTRATION),
        excitement=record_samples(records, SignalType.EXCITEMENT),
        calm=record_samples(records, SignalType.CALM),
        interval_minutes=interval_minutes,
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="flow-insights",
        description="Daily flow / heart-rate analytics and emotional-state classification.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override the configured log level.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── analyze ───────────────────────────────────────────────
    analyze_parser = sub.add_parser("analyze", help="Print a day's insights and classification as JSON.")
    analyze_parser.add_argument("records", help="JSON file holding an array of stored records.")
    analyze_parser.add_argument("--day", type=date.fromisoformat, default=None, help="YYYY-MM-DD")

    # ── export ────────────────────────────────────────────────
    export_parser = sub.add_parser("export", help="Write a day's flow / heart-rate buckets as CSV.")
    export_parser.add_argument("records", help="JSON file holding an array of stored records.")
    export_parser.add_argument("output", help="Destination CSV path.")
    export_parser.add_argument("--day", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    export_parser.add_argument("--interval", type=int, default=None, help="Bucket width in minutes.")

    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        records = load_records(args.records)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        parser.error(f"cannot read records from {args.records}: {exc}")
    if not records:
        parser.error(f"no records in {args.records}")
    logger.info("cli.records_loaded", path=str(args.records), records=len(records))

    if args.command == "analyze":
        insights = run_analysis(records, args.day)
        indicators = insights.indicators
        result = classify(
            ClassifierInputs(
                frustration=indicators.frustration,
                excitement=indicators.excitement,
                calm=indicators.calm,
                flow_stats=insights.flow_stats,
                heart_rate_stats=insights.heart_rate_stats,
                correlation=insights.correlation,
            ),
            indicator_threshold=settings.indicator_threshold,
        )
        payload = {
            "insights": insights.model_dump(mode="json"),
            "classification": result.model_dump(mode="json"),
        }
        print(json.dumps(payload, indent=2))
    elif args.command == "export":
        if args.interval is not None and args.interval <= 0:
            parser.error("--interval must be a positive number of minutes")
        insights = run_analysis(records, args.day, interval_minutes=args.interval)
        path = export_insights_csv(insights, args.output)
        print(f"Wrote {path}")


if __name__ == "__main__":
    main()
