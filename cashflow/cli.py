#!/usr/bin/env python3
"""
Cashflow Dashboard CLI — terminal views of the dashboard and the API server.

USAGE:
  python -m cashflow.cli summary                              # Balance + recent transactions
  python -m cashflow.cli summary --source export.json         # Read a single JSON/CSV export

  python -m cashflow.cli analysis                             # Trends, categories, last 30 days
  python -m cashflow.cli analysis --type expense --range 90 --category Food

  python -m cashflow.cli history                              # Full history, newest first
  python -m cashflow.cli history --query uber --type expense
  python -m cashflow.cli history --lenient                    # Include unusable records

  python -m cashflow.cli serve                                # Start API server
  python -m cashflow.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from cashflow.config import DEFAULT_RANGE_DAYS, INBOX_FOLDER, RANGE_CHOICES, RECENT_COUNT
from cashflow.data.loader import source_for_path
from cashflow.data.store import DataStore
from cashflow.data.schemas import FilterSpec, FilterType
from cashflow.analytics.dashboard import analysis, format_amount, home_summary, transaction_history


def _load_store(args) -> DataStore:
    source = source_for_path(Path(args.source)) if args.source else None
    return DataStore(source).load()


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  CASHFLOW DASHBOARD — {title}")
    print("=" * 70)


def _tx_line(tx: dict) -> str:
    sign = "+" if tx["direction"] == "income" else "-"
    return f"  {tx['timestamp'][:10]}  {tx['title'][:32]:<34}{sign}{format_amount(tx['amount']):>14}"


def cmd_summary(args):
    _banner("SUMMARY")
    store = _load_store(args)
    data = home_summary(store, args.recent)
    print(f"\n  Balance   {format_amount(data['balance']):>16}")
    print(f"  Income    {format_amount(data['income']):>16}")
    print(f"  Expense   {format_amount(data['expense']):>16}")
    print(f"\nRECENT ({len(data['recent'])}):\n")
    if not data["recent"]:
        print("  No recent transactions")
    for tx in data["recent"]:
        print(_tx_line(tx))


def cmd_analysis(args):
    _banner("ANALYSIS")
    store = _load_store(args)
    try:
        spec = FilterSpec(FilterType(args.type), args.category, args.range)
    except ValueError as exc:
        print(f"  {exc}")
        sys.exit(2)
    data = analysis(store, spec)

    print("\nSPENDING BY CATEGORY:\n")
    for row in data["category_spending"][:10]:
        print(f"  {row['category'][:30]:<32}{format_amount(row['total']):>14}  {row['share_pct']:>5.1f}%")

    print("\nLAST 12 MONTHS (EXPENSES):\n")
    for row in data["monthly_trend"]["months"]:
        print(f"  {row['label']:<10}{format_amount(row['expense']):>16}")

    print("\nYEARLY (EXPENSES):\n")
    for row in data["yearly_trend"]["years"]:
        print(f"  {row['year']:<10}{format_amount(row['expense']):>16}")

    f = data["filtered"]
    print(f"\nFILTER: {data['filter']['label']}  ({f['count']} transactions)\n")
    print(f"  Income    {format_amount(f['totals']['income']):>16}")
    print(f"  Expense   {format_amount(f['totals']['expense']):>16}")
    print(f"  Net       {format_amount(f['totals']['net']):>16}")


def cmd_history(args):
    _banner("TRANSACTION HISTORY")
    store = _load_store(args)
    data = transaction_history(store, args.query, FilterType(args.type), strict=not args.lenient)
    print(f"\n{data['count']} transaction(s)"
          + (f", {data['dropped']} unusable record(s) left out" if data["dropped"] else "") + "\n")
    for tx in data["transactions"][:args.limit]:
        print(_tx_line(tx))


def cmd_serve(args):
    """Start the FastAPI server."""
    import uvicorn
    if args.source:
        # an app instance cannot be reloaded; --reload only applies to the default inbox
        from cashflow.main import create_app
        app = create_app(DataStore(source_for_path(Path(args.source))))
        uvicorn.run(app, host="0.0.0.0", port=args.port)
        return
    uvicorn.run("cashflow.main:app", host="0.0.0.0", port=args.port, reload=args.reload)


def main():
    parser = argparse.ArgumentParser(
        description="Cashflow Dashboard — transaction analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command")

    def _with_source(p):
        p.add_argument("--source", help=f"JSON/CSV export or folder (default: {INBOX_FOLDER})")
        return p

    summary_parser = _with_source(subparsers.add_parser("summary", help="Balance and recent transactions"))
    summary_parser.add_argument("--recent", type=int, default=RECENT_COUNT, help="Recent transactions to show")

    analysis_parser = _with_source(subparsers.add_parser("analysis", help="Trends, categories and filtered totals"))
    analysis_parser.add_argument("--type", choices=[t.value for t in FilterType], default="all")
    analysis_parser.add_argument("--category", default="All", help="Category name (default: All)")
    analysis_parser.add_argument("--range", type=int, default=DEFAULT_RANGE_DAYS,
                                 help=f"Trailing window in days, e.g. {', '.join(map(str, RANGE_CHOICES))}")

    history_parser = _with_source(subparsers.add_parser("history", help="Search transaction history"))
    history_parser.add_argument("--query", default="", help="Search text")
    history_parser.add_argument("--type", choices=[t.value for t in FilterType], default="all")
    history_parser.add_argument("--lenient", action="store_true", help="Include records that could not be rebuilt")
    history_parser.add_argument("--limit", type=int, default=50, help="Rows to print")

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.add_argument("--source", help="JSON/CSV export or folder to serve instead of the inbox")

    args = parser.parse_args()
    commands = {
        "summary": cmd_summary,
        "analysis": cmd_analysis,
        "history": cmd_history,
        "serve": cmd_serve,
    }
    if args.command not in commands:
        parser.print_help()
        return
    commands[args.command](args)


if __name__ == "__main__":
    main()
