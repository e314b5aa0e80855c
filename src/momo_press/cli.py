#!/usr/bin/env python3
"""Command-line interface for momo-press."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from momo_press.config import (
    create_default_config,
    get_output_path,
    get_rules,
    get_server_address,
    get_source_path,
    load_config,
    save_json_config,
)
from momo_press.errors import InvalidPeriodError, MalformedRecordError, SourceError
from momo_press.models import NormalizedTransaction
from momo_press.normalizer import TransactionNormalizer, validate_period
from momo_press.rules import DEFAULT_CATEGORIES
from momo_press.summary import search, spending_by_category, totals


def print_summary(transactions: list[NormalizedTransaction]) -> None:
    """Print sent/received totals and spend per category to stderr."""
    result = totals(transactions)
    print(f"Received: {result.received} ({result.received_count} transactions)", file=sys.stderr)
    print(f"Sent:     {result.sent} ({result.sent_count} transactions)", file=sys.stderr)
    print(f"Balance:  {result.balance}", file=sys.stderr)

    categories = sorted({category for category, _ in DEFAULT_CATEGORIES.values()})
    spending = spending_by_category(transactions, categories)
    spent = {cat: amount for cat, amount in spending.items() if amount}
    if spent:
        print("\nSpending by category:", file=sys.stderr)
        for cat, amount in sorted(spent.items(), key=lambda kv: kv[1], reverse=True):
            print(f"  {cat:<15} {amount:>12}", file=sys.stderr)


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Normalize MoMo transaction exports for the MoMo Press app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  momo-press transactions.json --year 2025 --month 11
  momo-press transactions.json --year 2025 --month 11 -o november.json --summary
  momo-press --year 2025 --month 11 --search linda
  momo-press --serve --port 3000
  momo-press --remote http://localhost:3000 --year 2025 --month 11
        """,
    )

    parser.add_argument(
        "source",
        nargs="?",
        type=Path,
        help="Raw transaction export (default: from config or transactions.json)",
    )
    parser.add_argument("--year", type=int, help="Year to keep")
    parser.add_argument("--month", type=int, help="Month to keep (1-12)")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output JSON file (default: transactions.normalized.json)",
    )
    parser.add_argument(
        "--raw-categories",
        action="store_true",
        help="Keep the raw TransactionType as category (no icon mapping)",
    )
    parser.add_argument(
        "--search",
        help="Only keep transactions whose name, phone or category matches",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print sent/received totals and spending by category",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config.json to the config directory",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Backend
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP backend",
    )
    parser.add_argument("--host", help="Host to bind (default: from config or 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port to bind (default: from config or 3000)")
    parser.add_argument(
        "--remote",
        metavar="URL",
        help="Fetch normalized transactions from a running backend instead of a file",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.init_config:
        path = save_json_config(create_default_config(), args.config)
        print(f"Configuration saved to {path}", file=sys.stderr)
        return 0

    config: dict[str, Any] | None = load_config(args.config)

    if args.show_config:
        if config:
            print(json.dumps(config, indent=2))
        else:
            print("No configuration found.")
            print("Run 'momo-press --init-config' to create one.")
        return 0

    if args.serve:
        return serve(config, args.host, args.port, args.verbose)

    try:
        year, month = validate_period(args.year, args.month)
    except InvalidPeriodError as e:
        print(f"Error: {e}. Use --year YYYY --month 1-12", file=sys.stderr)
        return 1

    output_path = get_output_path(config, args.output)

    if args.remote:
        return fetch_remote(args.remote, year, month, output_path)

    source_path = get_source_path(config, args.source)
    normalizer = TransactionNormalizer(
        rules=get_rules(config),
        map_categories=not args.raw_categories,
    )

    try:
        transactions = normalizer.process_file(source_path, year, month)
    except (SourceError, MalformedRecordError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.search:
        transactions = search(transactions, args.search)

    print(f"Found {len(transactions)} transactions for {year:04d}-{month:02d}", file=sys.stderr)

    if args.summary:
        print_summary(transactions)

    try:
        normalizer.write_json(transactions, output_path)
    except SourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {len(transactions)} transactions to {output_path}", file=sys.stderr)
    return 0


def serve(config: dict[str, Any] | None, host: str | None, port: int | None, verbose: bool) -> int:
    """Run the backend with uvicorn."""
    import uvicorn

    from momo_press.logging_setup import configure_logging
    from momo_press.server import create_app

    configure_logging(verbose)
    default_host, default_port = get_server_address(config)
    uvicorn.run(create_app(config), host=host or default_host, port=port or default_port)
    return 0


def fetch_remote(base_url: str, year: int, month: int, output_path: Path) -> int:
    """Ask a running backend for one month and save the result."""
    import requests

    from momo_press.client import MoMoPressClient

    client = MoMoPressClient(base_url)
    try:
        transactions = client.update_transactions(year, month)
    except requests.RequestException as e:
        print(f"Error fetching from {base_url}: {e}", file=sys.stderr)
        return 1

    try:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(transactions, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        print(f"Error: Could not write {output_path}: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {len(transactions)} transactions to {output_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
