"""Tests for data models and exceptions."""

import pytest
from pydantic import ValidationError

from propsheet_core.exceptions import (
    DocumentRejectedError,
    ExtractionError,
    ExtractionTimeoutError,
    NoRecordsExtractedError,
    PersistenceError,
    PropsheetError,
)
from propsheet_core.models import (
    ExtractedProperty,
    FloorType,
    IngestionResult,
    LineContext,
    Location,
    ParseReport,
    PropertySize,
    SizeUnit,
    to_sqft,
)


class TestSizeConversion:
    @pytest.mark.parametrize(
        "value,unit,expected",
        [(200, SizeUnit.YD, 1800), (200, SizeUnit.GAJ, 1800), (150, SizeUnit.SQFT, 150), (10, "yd", 90)],
    )
    def test_to_sqft(self, value, unit, expected):
        assert to_sqft(value, unit) == expected

    def test_property_size(self):
        assert PropertySize(value=2.5, unit=SizeUnit.GAJ).to_sqft() == 22.5

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            PropertySize(value=-1, unit=SizeUnit.YD)


class TestExtractedProperty:
    def test_location_is_lowercased(self):
        location = Location(city=" South Delhi ", area="VASANT VIHAR")
        assert location.city == "south delhi"
        assert location.area == "vasant vihar"

    def test_blank_area_rejected(self):
        with pytest.raises(ValidationError):
            Location(city="south delhi", area="  ")

    def test_floors_default_to_ground(self):
        record = ExtractedProperty(location=Location(city="south delhi", area="hauz khas"))
        assert record.floors == [FloorType.GROUND]
        assert record.size_sqft is None

    def test_floors_are_ordered_and_unique(self):
        record = ExtractedProperty(
            location=Location(city="south delhi", area="hauz khas"),
            floors=["first", "basement", "first"],
        )
        assert record.floors == [FloorType.BASEMENT, FloorType.FIRST]

    def test_empty_floors_rejected(self):
        with pytest.raises(ValidationError):
            ExtractedProperty(location=Location(city="south delhi", area="hauz khas"), floors=[])

    def test_size_sqft(self):
        record = ExtractedProperty(
            location=Location(city="south delhi", area="hauz khas"),
            size=PropertySize(value=300, unit=SizeUnit.YD),
        )
        assert record.size_sqft == 2700


class TestWorkingState:
    def test_line_context(self):
        context = LineContext()
        assert context.city == "south delhi"
        assert not context.has_area
        context.area = "hauz khas"
        assert context.has_area

    def test_contexts_are_independent(self):
        first, second = LineContext(), LineContext()
        first.area = "hauz khas"
        assert second.area == ""

    def test_parse_report_defaults(self):
        report = ParseReport()
        assert report.records == []
        assert report.areas == []

    def test_ingestion_result_partial(self):
        assert IngestionResult(saved=9, errors=1).is_partial
        assert not IngestionResult(saved=9).is_partial
        assert not IngestionResult(errors=3).is_partial


class TestExceptions:
    def test_hierarchy(self):
        for error_class in (ExtractionError, NoRecordsExtractedError, PersistenceError, DocumentRejectedError):
            assert issubclass(error_class, PropsheetError)
        assert issubclass(ExtractionTimeoutError, ExtractionError)

    def test_details_and_repr(self):
        error = NoRecordsExtractedError("No properties", source="sheet.pdf", line_count=12)
        assert str(error) == "No properties"
        assert error.details == {"source": "sheet.pdf", "line_count": 12}
        assert not error.recoverable
        assert "NoRecordsExtractedError" in repr(error)

    def test_persistence_error_is_recoverable(self):
        error = PersistenceError("write failed", record_index=3)
        assert error.recoverable
        assert error.details["record_index"] == 3

    def test_timeout_details(self):
        error = ExtractionTimeoutError("too slow", timeout=30, source="sheet.pdf")
        assert error.details == {"source": "sheet.pdf", "timeout": 30}
