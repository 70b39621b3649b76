from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

from backend.app.parsers.inventory import build_snapshot
from backend.app.parsers.records import InventorySnapshot
from backend.app.services.page_fetcher import PageFetcher, PageFetchError

logger = logging.getLogger(__name__)

SCRAPE_FAILED_MESSAGE = "Failed to scrape inventory. The website may be blocking automated access."


class InventoryScrapeError(Exception):
    """Raised when a fetched page could not be turned into a snapshot."""


def validate_inventory_url(url: Optional[str]) -> str:
    if not url or not url.strip():
        raise ValueError("URL is required")
    candidate = url.strip()
    try:
        parsed = urlparse(candidate)
    except ValueError as exc:
        raise ValueError("Invalid URL provided") from exc
    if parsed.scheme.lower() not in {"http", "https"} or not parsed.netloc:
        raise ValueError("Invalid URL provided")
    return candidate


class InventoryScraper:
    def __init__(self, fetcher: Optional[PageFetcher] = None):
        self.fetcher = fetcher or PageFetcher()

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    async def scrape(self, url: str) -> InventorySnapshot:
        """Fetch ``url`` and extract its inventory.

        ``PageFetchError`` propagates untouched; anything that goes wrong after
        the download is reported as ``InventoryScrapeError``.
        """
        target = validate_inventory_url(url)
        page = await self.fetcher.fetch(target)
        try:
            return build_snapshot(page.html, target, base_url=page.url)
        except Exception as exc:
            logger.exception(f"Extraction failed for {target}")
            raise InventoryScrapeError(SCRAPE_FAILED_MESSAGE) from exc


__all__ = [
    "InventoryScraper",
    "InventoryScrapeError",
    "PageFetchError",
    "SCRAPE_FAILED_MESSAGE",
    "validate_inventory_url",
]
