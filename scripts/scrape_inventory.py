#!/usr/bin/env python3
"""Scrape one dealership inventory page and print the snapshot as JSON.

Usage:
  python scripts/scrape_inventory.py --url https://www.johnsautosales.com/inventory
  python scripts/scrape_inventory.py --url https://dealer.test/ --html ./saved_page.html --out snapshot.json

With ``--html`` the page is read from disk instead of fetched, and ``--url``
only supplies the base for relative links and the domain-name fallback.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.core.log_config import configure_logging  # noqa: E402
from backend.app.parsers.inventory import build_snapshot  # noqa: E402
from backend.app.services.inventory_scraper import (  # noqa: E402
    InventoryScraper,
    InventoryScrapeError,
    PageFetchError,
    validate_inventory_url,
)


async def _scrape(url: str):
    scraper = InventoryScraper()
    try:
        return await scraper.scrape(url)
    finally:
        await scraper.aclose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", required=True, help="Inventory page URL")
    parser.add_argument("--html", help="Read the page from this file instead of fetching it")
    parser.add_argument("--out", help="Write JSON here instead of stdout")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        url = validate_inventory_url(args.url)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        if args.html:
            html = Path(args.html).read_text(encoding="utf-8", errors="replace")
            snapshot = build_snapshot(html, url)
        else:
            snapshot = asyncio.run(_scrape(url))
    except (PageFetchError, InventoryScrapeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    rendered = json.dumps(snapshot.to_dict(), indent=2)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(rendered, encoding="utf-8")
        print(f"Wrote {len(snapshot.vehicles)} vehicles to {out}")
    else:
        print(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
