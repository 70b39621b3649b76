"""Dealership display-name detection."""

from __future__ import annotations

import re
from typing import Callable, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ._inventory_common import collapse_whitespace

FALLBACK_NAME = "Dealership"

BUSINESS_NAME_RE = re.compile(
    r"([A-Z][a-z']+(?:\s+[A-Z][a-z']+)*\s+(?:Auto\s+Sales|Motors|Automotive|Auto))"
)

GENERIC_NAME_PATTERNS = (
    re.compile(r"large inventory", re.IGNORECASE),
    re.compile(r"used cars for sale", re.IGNORECASE),
    re.compile(r"reliable used cars", re.IGNORECASE),
    re.compile(r"buy here pay here", re.IGNORECASE),
)

DOMAIN_EXPANSIONS = (
    (re.compile(r"autosales", re.IGNORECASE), " Auto Sales"),
    (re.compile(r"motors", re.IGNORECASE), " Motors"),
    (re.compile(r"auto$", re.IGNORECASE), " Auto"),
)
CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")

NameSource = Callable[[BeautifulSoup], Optional[str]]


def _meta_content(soup: BeautifulSoup, selector: str) -> Optional[str]:
    tag = soup.select_one(selector)
    return tag.get("content") if tag else None


def _business_name(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = BUSINESS_NAME_RE.search(text)
    return match.group(1) if match else None


def _first_text(soup: BeautifulSoup, selector: str) -> Optional[str]:
    tag = soup.select_one(selector)
    return tag.get_text(" ") if tag else None


def _logo_alt(soup: BeautifulSoup) -> Optional[str]:
    tag = soup.select_one('img[alt*="Auto"], img[alt*="Motors"], img[alt*="Dealer"]')
    return tag.get("alt") if tag else None


def _title_segment(soup: BeautifulSoup) -> Optional[str]:
    title = soup.find("title")
    if title is None:
        return None
    return title.get_text().split("|")[0].split("-")[0]


# Title tags are frequently generic SEO copy, so they are consulted last.
NAME_SOURCES: Tuple[Tuple[str, NameSource], ...] = (
    ("og_site_name", lambda soup: _meta_content(soup, 'meta[property="og:site_name"]')),
    ("author", lambda soup: _meta_content(soup, 'meta[name="author"]')),
    ("description", lambda soup: _business_name(_meta_content(soup, 'meta[name="description"]'))),
    ("keywords", lambda soup: _business_name(_meta_content(soup, 'meta[name="keywords"]'))),
    ("logo_alt", _logo_alt),
    ("dealer_name_class", lambda soup: _first_text(soup, '.dealer-name, .dealership-name, [class*="dealer-name"]')),
    ("header_heading", lambda soup: _first_text(soup, "header h1, header .logo-text")),
    ("title", _title_segment),
)


def is_acceptable_name(name: Optional[str]) -> bool:
    if not name or not (2 < len(name) < 100):
        return False
    return not any(pattern.search(name) for pattern in GENERIC_NAME_PATTERNS)


def name_from_url(url: str) -> str:
    """Derive a readable name from the site's first DNS label.

    ``johnsautosales.com`` becomes ``Johns Auto Sales``.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return FALLBACK_NAME
    if not hostname:
        return FALLBACK_NAME

    label = hostname.removeprefix("www.").split(".")[0]
    readable = label
    for pattern, replacement in DOMAIN_EXPANSIONS:
        readable = pattern.sub(replacement, readable, count=1)
    readable = CAMEL_BOUNDARY_RE.sub(r"\1 \2", readable).strip()
    if not readable:
        return FALLBACK_NAME
    return readable[0].upper() + readable[1:]


def extract_dealership_name(soup: BeautifulSoup, url: str) -> str:
    for _, source in NAME_SOURCES:
        candidate = collapse_whitespace(source(soup))
        if is_acceptable_name(candidate):
            return candidate
    return name_from_url(url)


__all__ = ["FALLBACK_NAME", "NAME_SOURCES", "extract_dealership_name", "is_acceptable_name", "name_from_url"]
