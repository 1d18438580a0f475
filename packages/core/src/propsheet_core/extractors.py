"""Field extractors for property lines.

Each extractor takes one property-data line and returns the field value or
None; none of them raise on a non-match. The canonical extractors are
property id, size, bedrooms and floors. Status, contacts, price, property
type and broker notes only feed the legacy fields.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from .models import (
    FloorType,
    PropertySize,
    PropertyStatus,
    PropertyType,
    SizeUnit,
)


UNIT_ALTERNATION = r"SQ\.?\s?FT|SQFT|SFT|YARDS?|YDS?|GAJ|GJ|FT"

PROPERTY_ID_PATTERN = re.compile(
    r"^([A-Z]-?\d+[A-Z]?|\d+[A-Z]?)"
    r"(?=[\s,;:/.)\-]|$)"
    r"(?!\s*(?:" + UNIT_ALTERNATION + r"|BR|BHK)\b)",
    re.IGNORECASE,
)

SIZE_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*(" + UNIT_ALTERNATION + r")",
    re.IGNORECASE,
)

BEDROOM_PATTERN = re.compile(r"(\d+)\s*(?:BHK|BR)", re.IGNORECASE)

FLOOR_PATTERNS: dict[FloorType, re.Pattern[str]] = {
    FloorType.BASEMENT: re.compile(r"\bBMT\b|\bBASEMENT\b", re.IGNORECASE),
    FloorType.GROUND: re.compile(r"\bGF\b|\bGROUND\b", re.IGNORECASE),
    FloorType.FIRST: re.compile(r"\bFF\b|\bFIRST\b", re.IGNORECASE),
    FloorType.SECOND: re.compile(r"\bSF\b|\bSECOND\b", re.IGNORECASE),
    FloorType.THIRD: re.compile(r"\bTF\b|\bTHIRD\b", re.IGNORECASE),
    FloorType.TERRACE: re.compile(r"\bTERR\b|\bTERRACE\b", re.IGNORECASE),
    FloorType.STILT: re.compile(r"\bSTILT\b", re.IGNORECASE),
}

# Checked in order; the first status found wins
STATUS_PATTERNS: list[tuple[PropertyStatus, re.Pattern[str]]] = [
    (PropertyStatus.READY, re.compile(r"\bREADY\b", re.IGNORECASE)),
    (PropertyStatus.UNDER_CONSTRUCTION, re.compile(r"\bU/[CR]\b", re.IGNORECASE)),
    (PropertyStatus.BOOKING, re.compile(r"\bBOOKING\b", re.IGNORECASE)),
]

CONTACT_PATTERN = re.compile(
    r"(?<![\d+])(?:\+?91[-\s]?)?(\d{5}[-\s]\d{5}|\d{8,11})(?!\d)"
)

PRICE_PATTERN = re.compile(
    r"(?:₹|\bRS\.?|@)\s*(\d+(?:\.\d+)?)\s*(CRORES?|CR|LAKHS?|LACS?|L)?\b",
    re.IGNORECASE,
)

LAKH = Decimal("100000")
CRORE = Decimal("10000000")

PLOT_PATTERN = re.compile(r"\bPLOTS?\b", re.IGNORECASE)
FLAT_PATTERN = re.compile(r"\b(?:FLATS?|APARTMENTS?)\b", re.IGNORECASE)
NOTES_PATTERN = re.compile(r"\b(?:NOTE|REMARK)S?\b", re.IGNORECASE)


def size_unit_for(token: str) -> SizeUnit:
    """Map a printed unit token to its unit.

    Tokens containing G are gaj, then tokens containing Y are yards, and
    everything else is square feet.
    """
    token = token.upper()
    if "G" in token:
        return SizeUnit.GAJ
    if "Y" in token:
        return SizeUnit.YD
    return SizeUnit.SQFT


def extract_property_id(line: str) -> Optional[str]:
    """Return the plot/flat number at the start of a line (e.g. A-12, 12B)."""
    match = PROPERTY_ID_PATTERN.match(line.strip())
    return match.group(1) if match else None


def extract_size(line: str) -> Optional[PropertySize]:
    """Return the first size quoted in a line."""
    match = SIZE_PATTERN.search(line)
    if not match:
        return None
    return PropertySize(value=float(match.group(1)), unit=size_unit_for(match.group(2)))


def extract_bedrooms(line: str) -> Optional[int]:
    """Return the bedroom count from a BR/BHK token."""
    match = BEDROOM_PATTERN.search(line)
    return int(match.group(1)) if match else None


def extract_floors(line: str) -> list[FloorType]:
    """Return every floor named in a line, defaulting to ground."""
    floors = [floor for floor, pattern in FLOOR_PATTERNS.items() if pattern.search(line)]
    return floors or [FloorType.GROUND]


def extract_status(line: str) -> Optional[PropertyStatus]:
    """Return the construction status, if the line states one."""
    for status, pattern in STATUS_PATTERNS:
        if pattern.search(line):
            return status
    return None


def extract_contacts(line: str) -> Optional[str]:
    """Return contact numbers in a line as a comma-joined string.

    Numbers are reduced to their digits; the +91 prefix is dropped.
    """
    numbers = [re.sub(r"\D", "", match.group(1)) for match in CONTACT_PATTERN.finditer(line)]
    return ", ".join(numbers) if numbers else None


def extract_price(line: str) -> Optional[Decimal]:
    """Return the asking price in rupees.

    Sheets quote prices in lakhs after a rupee sign, "Rs." or "@"; an
    explicit CR/CRORE suffix switches the multiplier to crores.
    """
    match = PRICE_PATTERN.search(line)
    if not match:
        return None
    try:
        amount = Decimal(match.group(1))
    except InvalidOperation:
        return None
    suffix = (match.group(2) or "").upper()
    multiplier = CRORE if suffix.startswith("CR") else LAKH
    return amount * multiplier


def extract_property_type(line: str) -> Optional[PropertyType]:
    """Return plot or flat when the line says so."""
    if PLOT_PATTERN.search(line):
        return PropertyType.PLOT
    if FLAT_PATTERN.search(line):
        return PropertyType.FLAT
    return None


def mentions_notes(line: str) -> bool:
    """Check whether a line carries a broker note or remark."""
    return bool(NOTES_PATTERN.search(line))


__all__ = [
    "extract_bedrooms",
    "extract_contacts",
    "extract_floors",
    "extract_price",
    "extract_property_id",
    "extract_property_type",
    "extract_size",
    "extract_status",
    "mentions_notes",
    "size_unit_for",
]
