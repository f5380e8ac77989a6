"""
main.py - CLI entry point for the finreport transaction reporting pipeline.

Usage:
    python main.py --input transactions.json --output output/
    python main.py --input transactions.json --output output/ --filter 3months
    python main.py --input export.csv --output output/ --filter all --now 2024-06-15T10:00:00
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="finreport",
        description="Filter, bucket and summarize a user's transactions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Filter tokens:
  today, 1day, 7days, 1week, 2weeks, 1month, 3months, 6months, all
  (anything else falls back to today)

Examples:
  python main.py --input transactions.json --output output/
  python main.py --input transactions.json --filter all --granularity weekly
        """,
    )
    parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="JSON or CSV export of transactions",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("output"),
        help="Directory for output files (default: output/)",
    )
    parser.add_argument(
        "--filter", "-f",
        dest="token",
        type=str,
        default="all",
        metavar="TOKEN",
        help="Date range filter token (default: all)",
    )
    parser.add_argument(
        "--now",
        type=str,
        default=None,
        metavar="ISO",
        help="Treat this instant as 'now' (default: current time)",
    )
    parser.add_argument(
        "--granularity",
        choices=["daily", "weekly", "monthly"],
        default=None,
        help="Bucket size for the line chart (default: chosen from the filter)",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        default=None,
        metavar="ID",
        help="Only include transactions owned by this user",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to a settings.yaml (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log pipeline details",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from finreport.config import load_settings
    from finreport.errors import FinreportError

    try:
        settings = load_settings(args.settings)
    except (FileNotFoundError, FinreportError) as e:
        print(f"\nError loading settings: {e}", file=sys.stderr)
        return 1

    try:
        now = pd.Timestamp(args.now) if args.now else pd.Timestamp.now()
    except ValueError as e:
        print(f"\nInvalid --now value: {e}", file=sys.stderr)
        return 1

    print("=" * 60)
    print("  Transaction Report")
    print("=" * 60)
    print(f"  Input:   {args.input.resolve()}")
    print(f"  Output:  {args.output.resolve()}")
    print(f"  Filter:  {args.token}")
    print(f"  Now:     {now.isoformat()}")
    print()

    # --- Ingest ---
    from finreport.ingest import load_file

    try:
        print("Step 1/3  Loading transactions...")
        df = load_file(args.input, settings)
    except (FileNotFoundError, ValueError) as e:
        print(f"\nError during ingestion: {e}", file=sys.stderr)
        return 1

    if args.user_id is not None:
        original_len = len(df)
        df = df[df["user_id"].astype(str) == args.user_id].reset_index(drop=True)
        print(f"  User filter: {original_len} → {len(df)} transactions")

    print(f"  Loaded {len(df)} transactions")

    # --- Report ---
    from finreport.pipeline import build_report

    print("\nStep 2/3  Building report...")
    results = build_report(df, args.token, now, settings, args.granularity)
    summary = results["summary"]
    cur = settings.currency_symbol
    print(f"  Applied filter:  {results['token']}")
    print(f"  In range:        {summary.transaction_count} transactions")
    print(f"  Total income:    {cur}{summary.total_income:,.2f}")
    print(f"  Total expenses:  {cur}{summary.total_expenses:,.2f}")
    print(f"  Net savings:     {cur}{summary.net_savings:,.2f}")

    # --- Export ---
    from finreport.export import export

    print("\nStep 3/3  Exporting...")
    try:
        export(results, args.output, settings.currency_symbol)
    except OSError as e:
        print(f"\nError during export: {e}", file=sys.stderr)
        return 1

    print("\n" + "=" * 60)
    print("  Done! Charts in charts.json, assistant context in context.txt")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
