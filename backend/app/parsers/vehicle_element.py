"""Build a single vehicle record from one listing element.

Each entry in ``ELEMENT_STRATEGIES`` pairs a cheap applicability check with an
extractor. The first strategy whose check passes owns the element: if its
extractor returns ``None`` the candidate is discarded rather than handed to
the next strategy.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from bs4 import Tag

from ._inventory_common import (
    collapse_whitespace,
    extract_mileage,
    extract_price,
    extract_stock_number,
    extract_vin,
    extract_year,
    resolve_url,
)
from .make_model import parse_make_model
from .records import UNKNOWN, VehicleRecord

# DealerCarSearch spotlight carousel cards ("2019 Audi" / "Q5 Premium" / "$23,995").
SPOTLIGHT_YEAR_MAKE_SELECTOR = ".vehicle-year-make"
SPOTLIGHT_MODEL_TRIM_SELECTOR = ".vehicle-model-trim"
SPOTLIGHT_PRICE_SELECTOR = ".vehiclePrice"
SPOTLIGHT_DETAIL_LINK_SELECTOR = 'a[href*="/vdp/"], a[href*="/vehicle/"], a[href*="/inventory/"]'
VDP_ID_RE = re.compile(r"/vdp/(\d+)")

TITLE_SELECTOR = 'h2, h3, h4, .title, .vehicle-title, [class*="title"]'

LAZY_IMAGE_ATTRS = ("data-src", "data-lazy-src")
EAGER_IMAGE_ATTRS = ("src",)


def element_text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return collapse_whitespace(element.get_text(" "))


def placeholder_id(index: int) -> str:
    return f"vehicle-{index}"


def _image_url(element: Tag, base_url: str, attrs: Sequence[str]) -> Optional[str]:
    img = element.find("img")
    if img is None:
        return None
    for attr in attrs:
        value = (img.get(attr) or "").strip()
        if not value or value.lower().startswith("data:"):
            continue
        return resolve_url(base_url, value)
    return None


def _first_link(element: Tag) -> Optional[str]:
    if element.name == "a" and element.get("href"):
        return element["href"]
    link = element.find("a", href=True)
    return link["href"] if link else None


@dataclass(frozen=True)
class ElementStrategy:
    name: str
    applies: Callable[[Tag], bool]
    extract: Callable[[Tag, int, str], Optional[VehicleRecord]]


def _has_spotlight_layout(element: Tag) -> bool:
    return element.select_one(SPOTLIGHT_YEAR_MAKE_SELECTOR) is not None


def _extract_spotlight(element: Tag, index: int, base_url: str) -> Optional[VehicleRecord]:
    year_make_text = element_text(element.select_one(SPOTLIGHT_YEAR_MAKE_SELECTOR))
    model_trim_text = element_text(element.select_one(SPOTLIGHT_MODEL_TRIM_SELECTOR))
    price_text = element_text(element.select_one(SPOTLIGHT_PRICE_SELECTOR))

    year = extract_year(year_make_text)
    if not year:
        return None
    make = collapse_whitespace(year_make_text.replace(year, "", 1)) or UNKNOWN

    model_parts = model_trim_text.split(None, 1)
    model = model_parts[0] if model_parts else UNKNOWN
    trim = model_parts[1] if len(model_parts) > 1 else None

    # Lazy-load attributes carry the real image; src is usually an inline SVG.
    image_url = _image_url(element, base_url, LAZY_IMAGE_ATTRS + EAGER_IMAGE_ATTRS)

    link = element.select_one(SPOTLIGHT_DETAIL_LINK_SELECTOR)
    detail_url = resolve_url(base_url, link.get("href")) if link else None

    vin = extract_vin(detail_url)
    vdp_match = VDP_ID_RE.search(detail_url or "")
    stock_number = vdp_match.group(1) if vdp_match else None

    return VehicleRecord(
        id=vin or stock_number or placeholder_id(index),
        year=year,
        make=make,
        model=model,
        trim=trim,
        price=extract_price(price_text),
        image_url=image_url,
        detail_url=detail_url,
        vin=vin,
        stock_number=stock_number,
    )


def _extract_generic(element: Tag, index: int, base_url: str) -> Optional[VehicleRecord]:
    full_text = element_text(element)
    year = extract_year(full_text)
    if not year:
        return None

    title_text = element_text(element.select_one(TITLE_SELECTOR))
    parsed = parse_make_model(title_text or full_text, year)

    vin = extract_vin(full_text)
    stock_number = extract_stock_number(full_text)

    return VehicleRecord(
        id=vin or stock_number or placeholder_id(index),
        year=year,
        make=parsed.make,
        model=parsed.model,
        trim=parsed.trim or None,
        price=extract_price(full_text),
        mileage=extract_mileage(full_text),
        image_url=_image_url(element, base_url, EAGER_IMAGE_ATTRS + LAZY_IMAGE_ATTRS),
        detail_url=resolve_url(base_url, _first_link(element)),
        vin=vin,
        stock_number=stock_number,
    )


ELEMENT_STRATEGIES: Tuple[ElementStrategy, ...] = (
    ElementStrategy("dealer_car_search", _has_spotlight_layout, _extract_spotlight),
    ElementStrategy("generic_text", lambda element: True, _extract_generic),
)


def extract_vehicle(
    element: Tag,
    index: int,
    base_url: str,
    strategies: Sequence[ElementStrategy] = ELEMENT_STRATEGIES,
) -> Optional[VehicleRecord]:
    for strategy in strategies:
        if strategy.applies(element):
            return strategy.extract(element, index, base_url)
    return None


__all__ = [
    "ELEMENT_STRATEGIES",
    "ElementStrategy",
    "element_text",
    "extract_vehicle",
    "placeholder_id",
]
