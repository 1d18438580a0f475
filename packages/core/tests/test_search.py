"""Tests for property search and presentation."""

from decimal import Decimal
from typing import Optional

import pytest
from pydantic import ValidationError

from propsheet_core.models import (
    ExtractedProperty,
    FloorType,
    Location,
    PropertySize,
    PropertyStatus,
    PropertyType,
    SizeUnit,
)
from propsheet_core.search import (
    Role,
    SearchCriteria,
    matches_criteria,
    present_property,
    relevance_score,
    search_properties,
)


def make_property(
    area: str = "vasant vihar",
    city: str = "south delhi",
    size: Optional[float] = 200,
    unit: SizeUnit = SizeUnit.YD,
    bedrooms: Optional[int] = 3,
    floors: Optional[list[FloorType]] = None,
    property_id: str = "A-1",
    **extra,
) -> ExtractedProperty:
    return ExtractedProperty(
        location=Location(city=city, area=area),
        property_id=property_id,
        size=PropertySize(value=size, unit=unit) if size is not None else None,
        floors=floors or [FloorType.GROUND],
        bedrooms=bedrooms,
        detail=f"{property_id} {size} YD",
        raw_detail=f"{property_id} {size} YD call 9876543210",
        contact="9876543210",
        **extra,
    )


class TestSearchCriteria:
    """Tests for criteria validation."""

    def test_floors_from_comma_string(self):
        criteria = SearchCriteria(floors="Ground, first")
        assert criteria.floors == [FloorType.GROUND, FloorType.FIRST]

    def test_blank_location_filters(self):
        criteria = SearchCriteria(city="  ", area="")
        assert criteria.city is None
        assert criteria.area is None

    @pytest.mark.parametrize("field,value", [("page", 0), ("limit", 0), ("limit", 501), ("size_min", -1)])
    def test_invalid_values(self, field: str, value: int):
        with pytest.raises(ValidationError):
            SearchCriteria(**{field: value})

    def test_unknown_floor(self):
        with pytest.raises(ValidationError):
            SearchCriteria(floors="mezzanine")


class TestMatching:
    """Tests for individual filters."""

    def test_partial_case_insensitive_location(self):
        record = make_property(area="greater kailash")
        assert matches_criteria(record, SearchCriteria(area="KAILASH"))
        assert matches_criteria(record, SearchCriteria(city="Delhi"))
        assert not matches_criteria(record, SearchCriteria(area="vihar"))

    def test_bedrooms_is_a_minimum(self):
        record = make_property(bedrooms=3)
        assert matches_criteria(record, SearchCriteria(bedrooms=3))
        assert not matches_criteria(record, SearchCriteria(bedrooms=4))

    def test_missing_bedrooms_not_excluded(self):
        assert matches_criteria(make_property(bedrooms=None), SearchCriteria(bedrooms=4))

    def test_floors_any_of(self):
        record = make_property(floors=[FloorType.FIRST, FloorType.SECOND])
        assert matches_criteria(record, SearchCriteria(floors=[FloorType.GROUND, FloorType.SECOND]))
        assert not matches_criteria(record, SearchCriteria(floors=[FloorType.BASEMENT]))

    def test_size_range_across_units(self):
        """200 yd is 1800 sqft and 200 gaj."""
        record = make_property(size=200, unit=SizeUnit.YD)
        assert matches_criteria(record, SearchCriteria(size_min=1500, size_max=2000))
        assert matches_criteria(record, SearchCriteria(size_min=200, size_max=200, size_unit=SizeUnit.GAJ))
        assert not matches_criteria(record, SearchCriteria(size_min=250, size_unit=SizeUnit.YD))
        assert not matches_criteria(record, SearchCriteria(size_max=1000))

    def test_missing_size_not_excluded(self):
        assert matches_criteria(make_property(size=None), SearchCriteria(size_min=5000))

    def test_property_type_is_exact(self):
        flat = make_property(property_type=PropertyType.FLAT)
        assert matches_criteria(flat, SearchCriteria(property_type="flat"))
        assert not matches_criteria(flat, SearchCriteria(property_type=PropertyType.PLOT))
        assert not matches_criteria(make_property(), SearchCriteria(property_type=PropertyType.FLAT))

    def test_status_missing_not_excluded(self):
        ready = make_property(status=PropertyStatus.READY)
        assert matches_criteria(ready, SearchCriteria(status="ready"))
        assert not matches_criteria(ready, SearchCriteria(status=PropertyStatus.BOOKING))
        assert matches_criteria(make_property(), SearchCriteria(status=PropertyStatus.BOOKING))

    def test_budget_range(self):
        record = make_property(price=Decimal("4500000"))
        assert matches_criteria(record, SearchCriteria(budget_min=4000000, budget_max=5000000))
        assert matches_criteria(record, SearchCriteria(budget_max=4500000))
        assert not matches_criteria(record, SearchCriteria(budget_min=5000000))
        assert not matches_criteria(record, SearchCriteria(budget_max=4000000))

    def test_missing_price_not_excluded(self):
        assert matches_criteria(make_property(), SearchCriteria(budget_min=1, budget_max=2))


class TestRelevance:
    """Tests for relevance scoring."""

    def test_base_score(self):
        assert relevance_score(make_property(), SearchCriteria()) == 100

    def test_exact_location_bonus(self):
        record = make_property()
        assert relevance_score(record, SearchCriteria(area="Vasant Vihar")) == 120
        assert relevance_score(record, SearchCriteria(area="vasant")) == 100
        assert relevance_score(record, SearchCriteria(city="south delhi", area="vasant vihar")) == 140

    def test_size_bonus(self):
        criteria = SearchCriteria(size_min=180, size_max=220, size_unit=SizeUnit.YD)
        assert relevance_score(make_property(size=205), criteria) == 110
        assert relevance_score(make_property(size=228), criteria) == 105
        assert relevance_score(make_property(size=240), criteria) == 100

    def test_property_type_bonus(self):
        record = make_property(property_type=PropertyType.PLOT)
        assert relevance_score(record, SearchCriteria(property_type=PropertyType.PLOT)) == 115

    def test_price_bonus(self):
        criteria = SearchCriteria(budget_min=4000000, budget_max=6000000)
        assert relevance_score(make_property(price=Decimal("5200000")), criteria) == 115
        assert relevance_score(make_property(price=Decimal("5700000")), criteria) == 110
        assert relevance_score(make_property(price=Decimal("6000000")), criteria) == 100
        assert relevance_score(make_property(), criteria) == 100


class TestPresentation:
    """Tests for role-based views."""

    def test_broker_view_hides_raw_data(self):
        data = present_property(make_property(), Role.BROKER)
        assert "raw_detail" not in data
        assert "contact" not in data
        assert "9876543210" not in str(data)
        assert data["detail"] == "A-1 200 YD"

    def test_admin_view_shows_raw_line(self):
        data = present_property(make_property(), Role.ADMIN)
        assert data["detail"] == "A-1 200 YD call 9876543210"
        assert data["raw_detail"] == data["detail"]
        assert data["contact"] == "9876543210"


class TestSearchProperties:
    """Tests for ranking and pagination."""

    def test_ranked_by_relevance(self):
        records = [
            make_property(area="vasant vihar extension", property_id="A-1"),
            make_property(area="vasant vihar", property_id="A-2"),
        ]
        page = search_properties(records, SearchCriteria(area="vasant vihar"))
        assert [item["property_id"] for item in page.items] == ["A-2", "A-1"]

    def test_ties_keep_input_order(self):
        records = [make_property(property_id=f"A-{i}") for i in range(3)]
        page = search_properties(records)
        assert [item["property_id"] for item in page.items] == ["A-0", "A-1", "A-2"]

    def test_pagination(self):
        records = [make_property(property_id=f"A-{i}") for i in range(5)]
        page = search_properties(records, SearchCriteria(page=2, limit=2))

        assert page.total == 5
        assert page.pages == 3
        assert [item["property_id"] for item in page.items] == ["A-2", "A-3"]

    def test_past_last_page(self):
        page = search_properties([make_property()], SearchCriteria(page=3))
        assert page.items == []
        assert page.total == 1

    def test_no_records(self):
        page = search_properties([])
        assert page.total == 0
        assert page.pages == 0
