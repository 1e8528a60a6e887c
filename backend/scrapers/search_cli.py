#!/usr/bin/env python3
"""
Command-line price search.

Usage:
    cd backend
    python -m scrapers.search_cli COUNTRY QUERY

Examples:
    python -m scrapers.search_cli US "iPhone 128GB"     # Search US sites
    python -m scrapers.search_cli IN "iPhone" --json    # Print JSON
    python -m scrapers.search_cli --list                # List all sites
"""

import asyncio
import argparse
import logging
import json
from typing import List, Optional

from scrapers.base import PriceSearchError
from scrapers.config import get_site_summary
from scrapers.manager import ScraperManager, SearchResult


def list_sites(country: Optional[str] = None):
    """List all configured sites."""
    print(f"\n{'='*60}")
    print("Configured Sites")
    print(f"{'='*60}\n")

    for site in get_site_summary(country):
        status = "✅" if site['enabled'] else "⏳"
        print(f"{status} [{site['country']}] {site['name']:14} - {site['currency']} ({site['type']}, {site['link_mode']})")
        print(f"              {site['search_url']}")
        print()


def print_result(result: SearchResult):
    """Print listings and per-site statuses."""
    print(f"\n{'='*60}")
    print(f"{len(result.listings)} results for \"{result.query}\" in {result.country}")
    print(f"{'='*60}\n")

    for i, listing in enumerate(result.listings, 1):
        tag = f" [{listing.parameter1}]" if listing.parameter1 else ""
        print(f"{i}. {listing.price:,.2f} {listing.currency} - {listing.product_name}{tag}")
        print(f"   {listing.source_site}: {listing.link}")

    for outcome in result.outcomes:
        if not outcome.is_success:
            print(f"\n  ! {outcome.describe(result.query)}")


async def run_search(country: str, query: str, timeout: float, as_json: bool) -> int:
    manager = ScraperManager(navigation_timeout=timeout)
    try:
        result = await manager.search(country, query)
    except PriceSearchError as e:
        print(f"ERROR: {e}")
        return 1

    if as_json:
        print(json.dumps(result.to_list(), indent=2, ensure_ascii=False))
    else:
        print_result(result)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Compare product prices across retail sites')
    parser.add_argument('country', nargs='?', help='Country code (e.g., US, IN)')
    parser.add_argument('query', nargs='?', help='Product query (e.g., "iPhone 128GB")')
    parser.add_argument('--list', action='store_true', help='List configured sites')
    parser.add_argument('--json', action='store_true', help='Print listings as JSON')
    parser.add_argument('--timeout', type=float, default=60.0, help='Navigation timeout in seconds')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.list:
        list_sites(args.country)
        return 0

    if not args.country or not args.query:
        parser.print_help()
        print('\nExample: python -m scrapers.search_cli US "iPhone 128GB"')
        return 2

    return asyncio.run(run_search(args.country, args.query, args.timeout, args.json))


if __name__ == '__main__':
    raise SystemExit(main())
