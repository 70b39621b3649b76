"""Inventory extraction for dealership pages on unknown platforms.

Discovery walks ``DISCOVERY_TIERS`` in order. A tier returns ``None`` when it
found nothing to work with, which hands control to the next tier; any list
(even an empty one) is final. Results from different tiers are never merged.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from ._inventory_common import extract_price, extract_year, resolve_url
from .dealership import extract_dealership_name
from .dedupe import deduplicate_vehicles
from .make_model import parse_make_model
from .records import InventorySnapshot, VehicleRecord
from .vehicle_element import element_text, extract_vehicle, placeholder_id

logger = logging.getLogger(__name__)

HTML_PARSER = "lxml"

# Most specific (platform-proprietary) first, generic patterns last.
CONTAINER_SELECTORS: Tuple[str, ...] = (
    # DealerCarSearch spotlight carousel
    ".rspotlightItem",
    ".spotlightItem",
    # DealerSocket and similar
    ".vehicle-card",
    ".inventory-listing",
    ".srp-list-item",
    "[data-vehicle]",
    ".vehicle-item",
    ".inventory-item",
    ".vehicle-listing",
    # CarGurus dealer sites
    ".listing-row",
    # Dealer.com
    ".hproduct",
    # Generic
    'article[class*="vehicle"]',
    'div[class*="vehicle-card"]',
    'li[class*="vehicle"]',
)

DETAIL_LINK_SELECTOR = ", ".join(
    (
        'a[href*="/vehicle/"]',
        'a[href*="/inventory/"]',
        'a[href*="/used/"]',
        'a[href*="/new/"]',
        'a[href*="/car/"]',
        'a[href*="vin="]',
        'a[href*="stock"]',
    )
)

HEADING_SELECTOR = 'h2, h3, h4, h5, .vehicle-title, [class*="title"]'

TierResult = Optional[List[VehicleRecord]]


@dataclass(frozen=True)
class DiscoveryTier:
    name: str
    run: Callable[[BeautifulSoup, str], TierResult]


def _isolated(label: str, extract: Callable[..., Optional[VehicleRecord]], *args) -> Optional[VehicleRecord]:
    try:
        return extract(*args)
    except Exception as exc:  # skip the candidate, keep the page
        logger.warning(f"Skipping {label}: {exc}")
        return None


def _collect(candidates: Iterable[Optional[VehicleRecord]]) -> List[VehicleRecord]:
    return [record for record in candidates if record is not None]


def _from_containers(soup: BeautifulSoup, base_url: str) -> TierResult:
    for selector in CONTAINER_SELECTORS:
        elements = soup.select(selector)
        if not elements:
            continue
        logger.debug(f"Container selector {selector!r} matched {len(elements)} elements")
        return _collect(
            _isolated(f"{selector} candidate {index}", extract_vehicle, element, index, base_url)
            for index, element in enumerate(elements)
        )
    return None


def _vehicle_from_link(anchor: Tag, base_url: str) -> Optional[VehicleRecord]:
    text = element_text(anchor)
    year = extract_year(text)
    if not year:
        return None
    parsed = parse_make_model(text, year)
    return VehicleRecord(
        id=f"vehicle-{uuid.uuid4().hex[:9]}",
        year=year,
        make=parsed.make,
        model=parsed.model,
        trim=parsed.trim or None,
        detail_url=resolve_url(base_url, anchor.get("href")),
    )


def _from_detail_links(soup: BeautifulSoup, base_url: str) -> TierResult:
    records = _collect(
        _isolated(f"link {anchor.get('href')!r}", _vehicle_from_link, anchor, base_url)
        for anchor in soup.select(DETAIL_LINK_SELECTOR)
    )
    return records or None


def _vehicle_from_heading(heading: Tag, index: int, base_url: str) -> Optional[VehicleRecord]:
    text = element_text(heading)
    year = extract_year(text)
    if not year:
        return None

    parent = heading.parent
    price = extract_price(element_text(parent))
    link = parent.find("a", href=True) if parent is not None else None
    detail_url = resolve_url(base_url, link["href"]) if link else None

    # The element right after the heading often carries the model/trim line.
    sibling_text = element_text(heading.find_next_sibling())
    parsed = parse_make_model(f"{text} {sibling_text}", year)

    return VehicleRecord(
        id=placeholder_id(index),
        year=year,
        make=parsed.make,
        model=parsed.model,
        trim=parsed.trim or None,
        price=price,
        detail_url=detail_url,
    )


def _from_year_headings(soup: BeautifulSoup, base_url: str) -> TierResult:
    return _collect(
        _isolated(f"heading candidate {index}", _vehicle_from_heading, heading, index, base_url)
        for index, heading in enumerate(soup.select(HEADING_SELECTOR))
    )


DISCOVERY_TIERS: Tuple[DiscoveryTier, ...] = (
    DiscoveryTier("container_selectors", _from_containers),
    DiscoveryTier("detail_links", _from_detail_links),
    DiscoveryTier("year_headings", _from_year_headings),
)


def discover_vehicles(
    soup: BeautifulSoup,
    base_url: str,
    tiers: Sequence[DiscoveryTier] = DISCOVERY_TIERS,
) -> List[VehicleRecord]:
    """Run the tier cascade and return raw (not yet deduplicated) records."""
    for tier in tiers:
        records = tier.run(soup, base_url)
        if records is not None:
            logger.debug(f"Discovery tier {tier.name} produced {len(records)} vehicles")
            return records
    return []


def load_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", HTML_PARSER)


def parse_inventory(html: str, base_url: str) -> List[VehicleRecord]:
    """Extract deduplicated vehicles, in document order, from raw HTML."""
    return deduplicate_vehicles(discover_vehicles(load_document(html), base_url))


def build_snapshot(
    html: str,
    page_url: str,
    *,
    base_url: Optional[str] = None,
    scraped_at: Optional[datetime] = None,
) -> InventorySnapshot:
    """Turn one fetched page into an immutable inventory snapshot.

    ``base_url`` defaults to ``page_url``; pass the effective URL after
    redirects so relative links resolve against the page actually served.
    """
    soup = load_document(html)
    vehicles = deduplicate_vehicles(discover_vehicles(soup, base_url or page_url))
    snapshot = InventorySnapshot(
        dealership_name=extract_dealership_name(soup, page_url),
        dealership_url=page_url,
        vehicles=tuple(vehicles),
        scraped_at=scraped_at or datetime.now(timezone.utc),
    )
    logger.info(f"Extracted {len(snapshot.vehicles)} vehicles for {snapshot.dealership_name} ({page_url})")
    return snapshot


__all__ = [
    "CONTAINER_SELECTORS",
    "DETAIL_LINK_SELECTOR",
    "DISCOVERY_TIERS",
    "DiscoveryTier",
    "HEADING_SELECTOR",
    "build_snapshot",
    "discover_vehicles",
    "load_document",
    "parse_inventory",
]
