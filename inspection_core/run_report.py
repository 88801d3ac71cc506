#!/usr/bin/env python3
"""
Fleet inspection reports from the command line.

Usage:
  # Dashboard figures for a JSON export of the inspection history
  python -m inspection_core.run_report report --input inspections.json

  # Same, restricted to a date range (inclusive, YYYY-MM-DD)
  python -m inspection_core.run_report report --input inspections.json --start 2023-10-21 --end 2023-10-26

  # Tabular export, one row per checklist result (.csv or .xlsx)
  python -m inspection_core.run_report export --input inspections.json --output report.xlsx

  # Show the checklist for a vehicle type
  python -m inspection_core.run_report checklist --type TRAM
"""

import argparse
import sys

from .config.settings import configure_logging
from .src.errors import InspectionError


def run_report(args):
    from .src.catalog import load_catalog
    from .src.classifier import failed_results
    from .src.pipeline import build_report, load_records

    records = load_records(args.input)
    stats = build_report(
        records,
        start=args.start,
        end=args.end,
        alert_limit=args.limit,
        catalog=load_catalog(args.catalog),
    )

    print(f"\n{'='*60}")
    print(f"INSPECTIONS {args.start or '*'} .. {args.end or '*'}")
    print(f"{'='*60}")
    print(f"Total: {stats.total} | OK: {stats.ok_count} | NOK: {stats.nok_count} ({stats.nok_rate:.0%})")

    if stats.category_issue_counts:
        print("\nISSUES BY CATEGORY:")
        for row in stats.category_breakdown():
            print(f"  - {row['name']}: {row['issues']}")

    if stats.recent_alerts:
        print("\nRECENT ALERTS:")
        for record in stats.recent_alerts:
            print(f"  Fleet {record.vehicle.fleet_number} - {record.date.date().isoformat()} ({record.inspector_name})")
            for result in failed_results(record):
                print(f"    * {result.category}: {result.label}")
            if record.ai_summary:
                print(f"    AI: {record.ai_summary}")
    else:
        print("\nRECENT ALERTS: None")


def run_export(args):
    from .src.date_filter import filter_by_range, newest_first
    from .src.pipeline import export_records, load_records

    records = newest_first(filter_by_range(load_records(args.input), args.start, args.end))
    out_path = export_records(records, args.output)
    print(f"Exported {len(records)} inspections to {out_path}")


def run_checklist(args):
    from .src.catalog import load_catalog

    catalog = load_catalog(args.catalog)
    items = catalog.items_for(args.type.upper())
    print(f"\nCHECKLIST - {args.type.upper()} ({len(items)} items)")
    for item in items:
        print(f"  [{item.id}] {item.category}: {item.label}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Fleet inspection reports")
    parser.add_argument("--catalog", help="Checklist YAML (default: config/checklists.yaml)")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # report
    rp = subparsers.add_parser("report", help="Pass/fail and category figures")
    rp.add_argument("--input", required=True, help="JSON file with inspection records")
    rp.add_argument("--start", help="First day (YYYY-MM-DD), inclusive")
    rp.add_argument("--end", help="Last day (YYYY-MM-DD), inclusive")
    rp.add_argument("--limit", type=int, help="Number of recent alerts to show")
    rp.set_defaults(func=run_report)

    # export
    ep = subparsers.add_parser("export", help="Export inspections to CSV/Excel")
    ep.add_argument("--input", required=True, help="JSON file with inspection records")
    ep.add_argument("--output", required=True, help="Output file (.csv or .xlsx)")
    ep.add_argument("--start", help="First day (YYYY-MM-DD), inclusive")
    ep.add_argument("--end", help="Last day (YYYY-MM-DD), inclusive")
    ep.set_defaults(func=run_export)

    # checklist
    cp = subparsers.add_parser("checklist", help="Show a vehicle type's checklist")
    cp.add_argument("--type", required=True, help="BUS or TRAM")
    cp.set_defaults(func=run_checklist)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        args.func(args)
    except (InspectionError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
