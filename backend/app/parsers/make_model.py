"""Make/model/trim splitting driven by an ordered manufacturer catalog."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple

from ._inventory_common import collapse_whitespace
from .records import UNKNOWN


@dataclass(frozen=True)
class MakeEntry:
    name: str
    canonical: str
    pattern: Pattern[str]


def _entry(name: str, canonical: Optional[str] = None) -> MakeEntry:
    return MakeEntry(
        name=name,
        canonical=canonical or name,
        pattern=re.compile(rf"\b{re.escape(name)}\b", re.IGNORECASE),
    )


# Precedence is declaration order: the first entry found anywhere in the text
# wins, so "Mercedes-Benz" must stay ahead of "Mercedes" and a model name that
# collides with a make (e.g. "Genesis") resolves to whichever appears first.
MAKE_CATALOG: Tuple[MakeEntry, ...] = (
    _entry("Acura"),
    _entry("Alfa Romeo"),
    _entry("Audi"),
    _entry("BMW"),
    _entry("Buick"),
    _entry("Cadillac"),
    _entry("Chevrolet"),
    _entry("Chevy", "Chevrolet"),
    _entry("Chrysler"),
    _entry("Dodge"),
    _entry("Ferrari"),
    _entry("Fiat"),
    _entry("Ford"),
    _entry("Genesis"),
    _entry("GMC"),
    _entry("Honda"),
    _entry("Hyundai"),
    _entry("Infiniti"),
    _entry("Jaguar"),
    _entry("Jeep"),
    _entry("Kia"),
    _entry("Lamborghini"),
    _entry("Land Rover"),
    _entry("Lexus"),
    _entry("Lincoln"),
    _entry("Maserati"),
    _entry("Mazda"),
    _entry("McLaren"),
    _entry("Mercedes-Benz"),
    _entry("Mercedes", "Mercedes-Benz"),
    _entry("Mini"),
    _entry("Mitsubishi"),
    _entry("Nissan"),
    _entry("Porsche"),
    _entry("Ram"),
    _entry("Rolls-Royce"),
    _entry("Subaru"),
    _entry("Tesla"),
    _entry("Toyota"),
    _entry("Volkswagen"),
    _entry("VW", "Volkswagen"),
    _entry("Volvo"),
)


@dataclass(frozen=True)
class MakeModel:
    make: str
    model: str
    trim: str


def match_make(text: str, catalog: Sequence[MakeEntry] = MAKE_CATALOG) -> Optional[Tuple[MakeEntry, re.Match[str]]]:
    for entry in catalog:
        match = entry.pattern.search(text)
        if match:
            return entry, match
    return None


def parse_make_model(
    text: Optional[str],
    year: Optional[str],
    catalog: Sequence[MakeEntry] = MAKE_CATALOG,
) -> MakeModel:
    """Split listing text into make, model and trim.

    The year token is dropped first, then the first catalog entry (in
    declaration order) with a whole-word match is taken as the make and cut
    out. Of what remains, the first word is the model and the rest is the
    trim. Unmatched parts fall back to ``"Unknown"`` (make/model) or ``""``
    (trim).
    """
    remaining = text or ""
    if year:
        remaining = re.sub(rf"\b{re.escape(year)}\b", " ", remaining, count=1)
    remaining = collapse_whitespace(remaining)

    make = UNKNOWN
    found = match_make(remaining, catalog)
    if found:
        entry, match = found
        make = entry.canonical
        remaining = collapse_whitespace(remaining[: match.start()] + " " + remaining[match.end() :])

    parts = remaining.split()
    model = parts[0] if parts else UNKNOWN
    trim = " ".join(parts[1:])
    return MakeModel(make=make, model=model, trim=trim)


__all__ = ["MAKE_CATALOG", "MakeEntry", "MakeModel", "match_make", "parse_make_model"]
