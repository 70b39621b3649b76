import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from backend.app.api.deps import get_inventory_scraper
from backend.app.services.inventory_scraper import (
    SCRAPE_FAILED_MESSAGE,
    InventoryScraper,
    InventoryScrapeError,
    PageFetchError,
    validate_inventory_url,
)

logger = logging.getLogger(__name__)

router = APIRouter()

class ScrapeRequest(BaseModel):
    url: str | None = None

@router.post("")
async def scrape(body: ScrapeRequest, scraper: InventoryScraper = Depends(get_inventory_scraper)):
    try:
        url = validate_inventory_url(body.url)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        snapshot = await scraper.scrape(url)
    except PageFetchError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InventoryScrapeError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except Exception as exc:  # pragma: no cover - unexpected failure
        logger.exception(f"Scraping error for {url}")
        raise HTTPException(status_code=500, detail=SCRAPE_FAILED_MESSAGE) from exc
    return snapshot.to_dict()
