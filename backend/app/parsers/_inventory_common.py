"""Common text normalizers for parsing dealer inventory pages.

Every helper here is "first match wins": the earliest match in the text is
returned as-is (or lightly normalized) and a miss yields ``None``.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
PRICE_RE = re.compile(r"\$(?:\d{1,3}(?:,\d{3})+|\d+)")
MILEAGE_RE = re.compile(r"\b(\d[\d,]*)\s*(k\s*miles|miles|mi)\b", re.IGNORECASE)
VIN_RE = re.compile(r"\b[A-HJ-NPR-Z0-9]{17}\b")
STOCK_RE = re.compile(
    r"\b(?:stock|stk)(?:\s*(?:number|no\.?))?[#:\s]*([A-Z0-9-]*\d[A-Z0-9-]*)",
    re.IGNORECASE,
)
WHITESPACE_RE = re.compile(r"\s+")

ABSOLUTE_SCHEMES = ("http", "https")


def collapse_whitespace(text: Optional[str]) -> str:
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def extract_year(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = YEAR_RE.search(text)
    return match.group(0) if match else None


def extract_price(text: Optional[str]) -> Optional[str]:
    """Return the first ``$12,345``-style token, without trailing text."""
    if not text:
        return None
    match = PRICE_RE.search(text)
    return match.group(0) if match else None


def extract_mileage(text: Optional[str]) -> Optional[str]:
    """Return ``"<number> miles"`` for the first odometer-looking token.

    ``45k miles`` is expanded to ``45,000 miles`` so the output is always a
    plain number followed by the unit.
    """
    if not text:
        return None
    match = MILEAGE_RE.search(text)
    if not match:
        return None
    number, unit = match.group(1).rstrip(","), match.group(2).lower()
    if unit.startswith("k"):
        digits = number.replace(",", "")
        if not digits:
            return None
        number = f"{int(digits) * 1000:,}"
    return f"{number} miles"


def extract_vin(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = VIN_RE.search(text)
    return match.group(0) if match else None


def extract_stock_number(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = STOCK_RE.search(text)
    if not match:
        return None
    return match.group(1).strip("-") or None


def resolve_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolve ``href`` against ``base_url``.

    Returns ``None`` for empty or malformed references and for anything that
    does not end up as an absolute http(s) URL (``javascript:``, ``mailto:``,
    inline ``data:`` payloads).
    """
    if not href:
        return None
    candidate = href.strip()
    if not candidate:
        return None
    try:
        resolved = urljoin(base_url, candidate)
        parsed = urlparse(resolved)
    except ValueError:
        return None
    if parsed.scheme.lower() not in ABSOLUTE_SCHEMES or not parsed.netloc:
        return None
    return resolved


__all__ = [
    "YEAR_RE",
    "PRICE_RE",
    "MILEAGE_RE",
    "VIN_RE",
    "STOCK_RE",
    "collapse_whitespace",
    "extract_year",
    "extract_price",
    "extract_mileage",
    "extract_vin",
    "extract_stock_number",
    "resolve_url",
]
