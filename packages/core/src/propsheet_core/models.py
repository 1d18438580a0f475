"""Data models for listing-sheet extraction.

This module provides the structures exchanged between the parsing stages
and the persistence layer:
- Enumerations for size units, floors, listing status and property type
- ExtractedProperty, the unit emitted by the listing parser
- StoredProperty, an ExtractedProperty with storage identity
- LineContext and ParseReport, the per-parse working state and its result
- IngestionResult, the counts returned to an upload caller
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


DEFAULT_CITY = "south delhi"


class SizeUnit(str, Enum):
    """Area units quoted on listing sheets."""

    GAJ = "gaj"
    SQFT = "sqft"
    YD = "yd"


# 1 gaj = 1 yd = 9 sqft, the usual Indian real-estate approximation
SQFT_PER_UNIT: dict[SizeUnit, int] = {
    SizeUnit.GAJ: 9,
    SizeUnit.YD: 9,
    SizeUnit.SQFT: 1,
}


def to_sqft(value: float, unit: Union[SizeUnit, str]) -> float:
    """Convert a size to square feet, the canonical comparison unit."""
    return value * SQFT_PER_UNIT[SizeUnit(unit)]


class FloorType(str, Enum):
    """Floors a listing can be offered on, in building order."""

    BASEMENT = "basement"
    GROUND = "ground"
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    TERRACE = "terrace"
    STILT = "stilt"


class PropertyStatus(str, Enum):
    """Construction status quoted on older sheets."""

    READY = "ready"
    UNDER_CONSTRUCTION = "under_construction"
    BOOKING = "booking"


class PropertyType(str, Enum):
    """Listing type quoted on older sheets."""

    PLOT = "plot"
    FLAT = "flat"


class LineKind(str, Enum):
    """Classification of a single sheet line."""

    CITY_MARKER = "city_marker"
    NOISE = "noise"
    AREA_HEADING = "area_heading"
    PROPERTY_DATA = "property_data"
    UNCLASSIFIED = "unclassified"


class Location(BaseModel):
    """City and locality a listing belongs to."""

    city: str = Field(description="City name, lowercase")
    area: str = Field(description="Locality taken from the nearest area heading, lowercase")

    @field_validator("city", "area")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Lowercase and trim, rejecting blank names."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Location names cannot be empty")
        return v


class PropertySize(BaseModel):
    """A plot or built-up size with its unit."""

    value: float = Field(ge=0, description="Numeric size as printed on the sheet")
    unit: SizeUnit = Field(description="Unit the size was quoted in")

    def to_sqft(self) -> float:
        """Return the size in square feet."""
        return to_sqft(self.value, self.unit)


class ExtractedProperty(BaseModel):
    """A property record produced from one listing line.

    The canonical contract is location, property_id, size, floors, bedrooms,
    detail and raw_detail. The remaining fields are only filled when the
    parser runs with legacy fields enabled.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "location": {"city": "south delhi", "area": "vasant vihar"},
                    "property_id": "A-12",
                    "size": {"value": 200, "unit": "yd"},
                    "floors": ["ground"],
                    "bedrooms": 3,
                    "detail": "A-12 200 YD 3BR GF",
                    "raw_detail": "A-12 200 YD 3BR GF",
                }
            ]
        }
    }

    location: Location = Field(description="City and area the listing sits under")
    property_id: Optional[str] = Field(
        default=None,
        description="Plot or flat number found at the start of the line",
    )
    size: Optional[PropertySize] = Field(default=None, description="Plot or built-up size")
    floors: list[FloorType] = Field(
        default_factory=lambda: [FloorType.GROUND],
        description="Floors on offer; ground when the line names none",
    )
    bedrooms: Optional[int] = Field(default=None, ge=0, description="Bedroom count")
    detail: Optional[str] = Field(
        default=None,
        description="Source line with contacts and builder names removed",
    )
    raw_detail: Optional[str] = Field(
        default=None,
        description="Unfiltered source line, admin only",
    )

    # Legacy fields
    status: Optional[PropertyStatus] = Field(default=None, description="Construction status")
    contact: Optional[str] = Field(
        default=None,
        description="Comma-joined contact numbers, admin only",
    )
    price: Optional[Decimal] = Field(default=None, ge=0, description="Asking price in rupees")
    property_type: Optional[PropertyType] = Field(default=None, description="Plot or flat")
    broker_notes: Optional[str] = Field(default=None, description="Broker remark line")

    @field_validator("floors")
    @classmethod
    def validate_floors(cls, v: list[FloorType]) -> list[FloorType]:
        """Require at least one floor and keep them in building order."""
        if not v:
            raise ValueError("floors cannot be empty")
        present = set(v)
        return [floor for floor in FloorType if floor in present]

    @property
    def size_sqft(self) -> Optional[float]:
        """Size in square feet, if a size was extracted."""
        return self.size.to_sqft() if self.size else None


class StoredProperty(ExtractedProperty):
    """An extracted property after the store has assigned identity."""

    id: str = Field(description="Storage-assigned identifier")
    source_pdf: Optional[str] = Field(default=None, description="Name of the uploaded sheet")
    uploaded_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the sheet was ingested",
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IngestionResult(BaseModel):
    """Aggregate outcome of ingesting one document."""

    saved: int = Field(default=0, ge=0, description="Records persisted")
    errors: int = Field(default=0, ge=0, description="Records that failed to persist")
    source_name: Optional[str] = Field(default=None, description="Display name of the document")
    total_extracted: int = Field(default=0, ge=0, description="Records produced by the parser")
    export_written: bool = Field(default=False, description="Whether the export was regenerated")

    @property
    def is_partial(self) -> bool:
        """Check whether some, but not all, records were persisted."""
        return self.saved > 0 and self.errors > 0


@dataclass
class LineContext:
    """Mutable city/area context for one parsing pass.

    One instance belongs to exactly one parse; it is never shared between
    documents.
    """

    city: str = DEFAULT_CITY
    area: str = ""

    @property
    def has_area(self) -> bool:
        """Check whether an area heading has been seen."""
        return bool(self.area)


@dataclass
class ParseReport:
    """Result of parsing one document's text."""

    records: list[ExtractedProperty] = field(default_factory=list)
    dropped_lines: list[str] = field(default_factory=list)
    line_count: int = 0

    @property
    def cities(self) -> list[str]:
        """Distinct cities seen in emitted records, in first-seen order."""
        seen: dict[str, None] = {}
        for record in self.records:
            seen.setdefault(record.location.city, None)
        return list(seen)

    @property
    def areas(self) -> list[str]:
        """Distinct areas seen in emitted records, in first-seen order."""
        seen: dict[str, None] = {}
        for record in self.records:
            seen.setdefault(record.location.area, None)
        return list(seen)
