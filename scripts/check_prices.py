#!/usr/bin/env python3
"""
Batch Price Check

Refreshes the prices of tracked items listed in a JSON file and prints a
summary of what changed. Items are checked one at a time with a pause in
between.

Input format (list of objects):
    [
        {"id": "1", "name": "Panadol Extra 120 Tablets",
         "url": "https://www.boots.com/...", "current_price": 4.99},
        ...
    ]

Usage:
    python3 scripts/check_prices.py --input items.json
    python3 scripts/check_prices.py --input items.json --delay 5 --output prices.json
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv

from beepbeepcheap.common import load_settings, setup_logging
from beepbeepcheap.extraction import ProductExtractor, create_renderer
from beepbeepcheap.monitoring import PriceCheckItem, PriceChecker, PriceCheckSummary

load_dotenv()

logger = logging.getLogger(__name__)


def load_items(path: str) -> list[PriceCheckItem]:
    """Load tracked items from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("items", [])

    return [PriceCheckItem.from_dict(record) for record in data if record.get("url")]


def print_summary(summary: PriceCheckSummary) -> None:
    """Print batch summary."""
    print("\n" + "=" * 60)
    print("Price Check Summary")
    print("=" * 60)
    print(f"\n  Checked: {summary.checked}")
    print(f"  Changed: {summary.changed}")
    print(f"  Errors:  {summary.errors}")
    print(f"  Time:    {summary.elapsed_seconds:.1f}s")

    if summary.changes:
        print("\n  Changes:")
        for change in summary.changes:
            direction = "DOWN" if change.is_drop else "UP"
            percent = f"{change.change_percent:+.1f}%" if change.change_percent is not None else "new"
            label = change.item.name or change.item.url
            print(f"    [{direction:4}] {change.old_price} -> {change.new_price} ({percent}) {label[:50]}")

    if summary.failed_urls:
        print("\n  Failed:")
        for url in summary.failed_urls:
            print(f"    {url}")

    print("\n" + "=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="Refresh prices for a list of tracked items"
    )
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="JSON file with tracked items"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Optional: write refreshed prices to this JSON file"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between items (default: from config/settings.yaml)"
    )
    parser.add_argument(
        "--renderer",
        choices=["http", "browser"],
        help="Page renderer (default: from config/settings.yaml)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not os.path.exists(args.input):
        logger.error("Input file not found: %s", args.input)
        sys.exit(1)

    items = load_items(args.input)
    if not items:
        logger.error("No items with URLs in %s", args.input)
        sys.exit(1)

    delay = args.delay
    if delay is None:
        delay = float(load_settings().get('batch', {}).get('delay_seconds', 2.0))

    extractor = ProductExtractor(renderer=create_renderer(args.renderer))
    checker = PriceChecker(extractor=extractor, delay=delay)
    summary = checker.check_all(items)

    print_summary(summary)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(summary.prices, f, indent=2, ensure_ascii=False)
        logger.info("Prices saved to %s", args.output)

    sys.exit(0 if summary.errors == 0 else 1)


if __name__ == "__main__":
    main()
