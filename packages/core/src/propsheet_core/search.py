"""Property search and role-based presentation.

Search filters are all optional and forgiving: a record with no bedroom
count, floors, size, status or price is never excluded by the filter for
that field. Property type is the exception and must match exactly.
Results are ranked by a relevance score and paginated.
"""

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from .models import (
    ExtractedProperty,
    FloorType,
    PropertyStatus,
    PropertyType,
    SizeUnit,
    to_sqft,
)


BASE_SCORE = 100
EXACT_CITY_BONUS = 20
EXACT_AREA_BONUS = 20
CLOSE_SIZE_BONUS = 10
NEAR_SIZE_BONUS = 5
PROPERTY_TYPE_BONUS = 15
CLOSE_PRICE_BONUS = 15
NEAR_PRICE_BONUS = 10

CLOSE_RATIO = 0.10
NEAR_RATIO = 0.15


class Role(str, Enum):
    """Who is looking at the listings."""

    BROKER = "broker"
    ADMIN = "admin"


class SearchCriteria(BaseModel):
    """Optional filters for a property search."""

    city: Optional[str] = Field(default=None, description="Case-insensitive partial city match")
    area: Optional[str] = Field(default=None, description="Case-insensitive partial area match")
    size_min: Optional[float] = Field(default=None, ge=0, description="Smallest size wanted")
    size_max: Optional[float] = Field(default=None, ge=0, description="Largest size wanted")
    size_unit: SizeUnit = Field(default=SizeUnit.SQFT, description="Unit of size_min/size_max")
    bedrooms: Optional[int] = Field(default=None, ge=0, description="Minimum bedrooms")
    floors: list[FloorType] = Field(default_factory=list, description="Any of these floors")
    property_type: Optional[PropertyType] = Field(default=None, description="Exact property type")
    status: Optional[PropertyStatus] = Field(default=None, description="Construction status")
    budget_min: Optional[Decimal] = Field(default=None, ge=0, description="Lowest price in rupees")
    budget_max: Optional[Decimal] = Field(default=None, ge=0, description="Highest price in rupees")
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=500)

    @field_validator("city", "area")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank location filters as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("floors", mode="before")
    @classmethod
    def split_floors(cls, v: Any) -> Any:
        """Accept a comma-separated string of floor names."""
        if isinstance(v, str):
            return [part.strip().lower() for part in v.split(",") if part.strip()]
        return v


class SearchPage(BaseModel):
    """One page of search results."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20
    pages: int = 0


def _contains(value: str, needle: Optional[str]) -> bool:
    if needle is None:
        return True
    return re.search(re.escape(needle), value, re.IGNORECASE) is not None


def _proximity_bonus(value: float, target: float, close: int, near: int) -> int:
    if target <= 0:
        return 0
    diff = abs(value - target) / target
    if diff <= CLOSE_RATIO:
        return close
    if diff <= NEAR_RATIO:
        return near
    return 0


def matches_criteria(record: ExtractedProperty, criteria: SearchCriteria) -> bool:
    """Check a record against every filter in the criteria."""
    if not _contains(record.location.city, criteria.city):
        return False
    if not _contains(record.location.area, criteria.area):
        return False

    if criteria.property_type is not None and record.property_type != criteria.property_type:
        return False

    if criteria.status is not None and record.status is not None:
        if record.status != criteria.status:
            return False

    if (criteria.budget_min is not None or criteria.budget_max is not None) and record.price is not None:
        if criteria.budget_min is not None and record.price < criteria.budget_min:
            return False
        if criteria.budget_max is not None and record.price > criteria.budget_max:
            return False

    if criteria.bedrooms is not None and record.bedrooms is not None:
        if record.bedrooms < criteria.bedrooms:
            return False

    if criteria.floors and record.floors:
        if not set(criteria.floors) & set(record.floors):
            return False

    if (criteria.size_min is not None or criteria.size_max is not None) and record.size:
        min_sqft = to_sqft(criteria.size_min, criteria.size_unit) if criteria.size_min is not None else 0.0
        max_sqft = to_sqft(criteria.size_max, criteria.size_unit) if criteria.size_max is not None else math.inf
        if not min_sqft <= record.size.to_sqft() <= max_sqft:
            return False

    return True


def relevance_score(record: ExtractedProperty, criteria: SearchCriteria) -> int:
    """Score a matching record; higher is more relevant."""
    score = BASE_SCORE

    if criteria.city and record.location.city == criteria.city.lower():
        score += EXACT_CITY_BONUS
    if criteria.area and record.location.area == criteria.area.lower():
        score += EXACT_AREA_BONUS
    if criteria.property_type is not None and record.property_type == criteria.property_type:
        score += PROPERTY_TYPE_BONUS

    if criteria.budget_min is not None and criteria.budget_max is not None and record.price:
        target = float((criteria.budget_min + criteria.budget_max) / 2)
        score += _proximity_bonus(float(record.price), target, CLOSE_PRICE_BONUS, NEAR_PRICE_BONUS)

    if criteria.size_min is not None and criteria.size_max is not None and record.size:
        target = to_sqft((criteria.size_min + criteria.size_max) / 2, criteria.size_unit)
        score += _proximity_bonus(record.size.to_sqft(), target, CLOSE_SIZE_BONUS, NEAR_SIZE_BONUS)

    return score


def present_property(record: ExtractedProperty, role: Role = Role.BROKER) -> dict[str, Any]:
    """
    Serialize a record for the given audience.

    Brokers get the redacted detail only. Admins get the raw line in
    place of detail, along with the raw detail and contacts.
    """
    data = record.model_dump(mode="json")
    if role is Role.ADMIN:
        data["detail"] = record.raw_detail or record.detail
        return data

    data.pop("raw_detail", None)
    data.pop("contact", None)
    return data


def search_properties(
    records: Sequence[ExtractedProperty],
    criteria: Optional[SearchCriteria] = None,
    *,
    role: Role = Role.BROKER,
) -> SearchPage:
    """
    Filter, rank and paginate records.

    Args:
        records: Candidate records, newest first
        criteria: Filters; None returns everything
        role: Audience the results are presented to

    Returns:
        SearchPage of presented records
    """
    criteria = criteria or SearchCriteria()

    scored = [
        (relevance_score(record, criteria), record)
        for record in records
        if matches_criteria(record, criteria)
    ]
    scored.sort(key=lambda item: item[0], reverse=True)

    total = len(scored)
    start = (criteria.page - 1) * criteria.limit
    window = scored[start:start + criteria.limit]

    return SearchPage(
        items=[present_property(record, role) for _, record in window],
        total=total,
        page=criteria.page,
        limit=criteria.limit,
        pages=math.ceil(total / criteria.limit) if total else 0,
    )


__all__ = [
    "Role",
    "SearchCriteria",
    "SearchPage",
    "matches_criteria",
    "present_property",
    "relevance_score",
    "search_properties",
]
