#!/usr/bin/env python3
"""
Single Product Extraction

Extracts a single product page and prints an extraction report. With
--compare, also searches other stores and lists cheaper alternatives.
Store is auto-detected from URL.

Usage:
    python3 extract_single.py --url https://www.zara.com/uk/en/wool-coat-p02010744.html
    python3 extract_single.py --url https://www.boots.com/panadol-extra-10263537 --compare
    python3 extract_single.py --url https://www.amazon.co.uk/dp/B0ABC --renderer http --json
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from dotenv import load_dotenv

from beepbeepcheap.common import load_settings, setup_logging
from beepbeepcheap.extraction import ProductExtractor, create_renderer
from beepbeepcheap.matching import ComparisonReport, PriceComparer
from beepbeepcheap.models import ExtractedProduct

load_dotenv()

logger = logging.getLogger(__name__)


def print_report(product: ExtractedProduct):
    """Print extraction report."""

    print("\n" + "="*80)
    print("EXTRACTION REPORT")
    print("="*80)

    print(f"\nStore: {product.store_name}")
    print(f"Product URL: {product.source_url}")

    print("\n" + "-"*80)
    print("EXTRACTED DATA")
    print("-"*80)

    fields = [
        ("Name", product.name, 'name'),
        ("Price", f"{product.price:.2f}" if product.price is not None else "", 'price'),
        ("Image", product.image_url, 'image'),
    ]

    for label, value, key in fields:
        status = "OK" if value else "MISSING"
        method = product.extraction_method.get(key, "")
        print(f"  [{status:7}] {label:8} {value or 'MISSING'}")
        if method:
            print(f"            {'':8} via {method}")

    print("\n" + "="*80)


def print_comparison(report: ComparisonReport):
    """Print cross-store comparison."""
    identity = report.identity

    print("\n" + "-"*80)
    print("COMPARISON")
    print("-"*80)

    print(f"\n  Search query: {report.query}")
    print(f"  Identifying words: {', '.join(identity.identifying_words) or '-'}")
    print(f"  Model number: {identity.model_number or '-'}")
    print(f"  Variants: {', '.join(identity.variants) or '-'}")

    for error in report.provider_errors:
        print(f"  WARNING: {error}")

    alternatives = report.result.alternatives
    print(f"\nALTERNATIVES ({len(alternatives)}):")
    for idx, alternative in enumerate(alternatives, 1):
        if alternative.is_cheaper:
            delta = f"save {alternative.savings_amount:.2f} ({alternative.savings_percent}%)"
        elif alternative.extra_cost is not None:
            delta = f"costs {alternative.extra_cost:.2f} more ({alternative.extra_cost_percent}%)"
        else:
            delta = ""
        print(f"  {idx}. {alternative.price:.2f} at {alternative.store_name or 'unknown store'} {delta}")
        print(f"     {alternative.title[:70]}")
        if alternative.product_url:
            print(f"     {alternative.product_url}")

    if report.result.has_best_price:
        print("\n  Current price is the best price found.")

    print("\n" + "="*80)


def main():
    parser = argparse.ArgumentParser(
        description="Extract a single product with an extraction report"
    )
    parser.add_argument(
        "--url",
        required=True,
        help="Product URL"
    )
    parser.add_argument(
        "--store",
        help="Store label overriding the one detected from the URL"
    )
    parser.add_argument(
        "--brand",
        help="Brand name added to the comparison search query"
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Search other stores for cheaper alternatives"
    )
    parser.add_argument(
        "--no-store-search",
        action="store_true",
        help="With --compare, skip stores' own site search (shopping indexes only)"
    )
    parser.add_argument(
        "--renderer",
        choices=["http", "browser"],
        help="Page renderer (default: from config/settings.yaml)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a report"
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

    renderer = create_renderer(args.renderer)
    extractor = ProductExtractor(renderer=renderer)

    if args.compare:
        max_alternatives = load_settings().get('matching', {}).get('max_alternatives', 3)
        comparer = PriceComparer(
            extractor=extractor,
            max_alternatives=max_alternatives,
            store_search=not args.no_store_search,
        )
        report = comparer.compare(args.url, brand=args.brand, store_hint=args.store)
        product = report.product
    else:
        report = None
        product = extractor.extract(args.url, store_hint=args.store)

    if args.json:
        output = {"product": asdict(product)}
        if report is not None:
            output["comparison"] = {
                "query": report.query,
                "identity": asdict(report.identity),
                "alternatives": [asdict(a) for a in report.result.alternatives],
                "has_best_price": report.result.has_best_price,
                "provider_errors": report.provider_errors,
            }
        print(json.dumps(output, indent=2, ensure_ascii=False))
        sys.exit(0 if product.success else 1)

    if not product.success:
        print(f"\nExtraction failed ({product.store_name}): {product.error}")
        sys.exit(1)

    print_report(product)
    if report is not None:
        print_comparison(report)

    sys.exit(0 if product.price is not None else 1)


if __name__ == "__main__":
    main()
