"""Query a JSON project snapshot and print filtered views plus fleet stats."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from project_health.adapters import json_adapter
from project_health.config import load_config
from project_health.engine import recompute
from project_health.query import SORT_OPTIONS
from project_health.schema import DateRange, FilterSpec, NumericRange


def _range(low, high):
    if low is None and high is None:
        return None
    return NumericRange(
        min=float("-inf") if low is None else low,
        max=float("inf") if high is None else high,
    )


def build_filters(args: argparse.Namespace) -> FilterSpec:
    date_range = None
    if args.start_from or args.start_to:
        date_range = DateRange(start=args.start_from, end=args.start_to)
    return FilterSpec(
        search=args.search,
        status=args.status,
        project_type=args.project_type,
        priority=args.priority,
        risk_level=args.risk_level,
        health_level=args.health_level,
        phase=args.phase,
        manager=args.manager,
        region=args.region,
        date_range=date_range,
        progress_range=_range(args.progress_min, args.progress_max),
        budget_range=_range(args.budget_min, args.budget_max),
        quality_range=_range(args.quality_min, args.quality_max),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the project health query engine over a JSON snapshot")
    parser.add_argument("--data", required=True, help="Path to a JSON list of project documents")
    parser.add_argument("--search", help="Search terms separated by spaces, commas or semicolons")
    for flag in ("status", "project-type", "priority", "risk-level", "health-level", "phase", "manager", "region"):
        parser.add_argument(f"--{flag}")
    for flag in ("progress", "budget", "quality"):
        parser.add_argument(f"--{flag}-min", type=float)
        parser.add_argument(f"--{flag}-max", type=float)
    parser.add_argument("--start-from", help="ISO date; earliest start date to include")
    parser.add_argument("--start-to", help="ISO date; latest start date to include")
    parser.add_argument("--sort", help=f"One of: {', '.join(SORT_OPTIONS)}")
    parser.add_argument("--now", help="ISO timestamp used as the reference instant")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    records = json_adapter.parse(args.data)
    result = recompute(records, build_filters(args), args.sort, args.now, load_config())

    report = {
        "views": [asdict(view) for view in result.views],
        "stats": asdict(result.stats),
        "quality_summary": result.quality_summary,
    }
    print(json.dumps(report, indent=2, default=str))


if __name__ == "__main__":
    main()
