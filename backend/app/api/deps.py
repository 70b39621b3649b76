from __future__ import annotations

from typing import AsyncIterator

from backend.app.services.inventory_scraper import InventoryScraper
from backend.app.services.venice_client import VeniceClient


async def get_inventory_scraper() -> AsyncIterator[InventoryScraper]:
    scraper = InventoryScraper()
    try:
        yield scraper
    finally:
        await scraper.aclose()


async def get_venice_client() -> AsyncIterator[VeniceClient]:
    client = VeniceClient()
    try:
        yield client
    finally:
        await client.aclose()
