"""Tests for line classification."""

import pytest

from propsheet_core.classifier import (
    LineClassifier,
    city_marker_pattern,
    has_property_tokens,
    is_area_heading,
    is_noise,
)
from propsheet_core.models import LineContext, LineKind
from propsheet_core.text import normalize_area, split_lines


class TestTextNormalizer:
    """Tests for line splitting and area normalization."""

    def test_split_lines_trims_and_drops_empty(self):
        """Lines are trimmed and blank lines removed."""
        text = "  SOUTH DELHI \r\n\n   \nVASANT VIHAR\nA-12 200 YD  "
        assert split_lines(text) == ["SOUTH DELHI", "VASANT VIHAR", "A-12 200 YD"]

    def test_split_lines_empty_text(self):
        """Empty text yields no lines."""
        assert split_lines("") == []

    def test_normalize_area(self):
        """Area headings are lowercased with punctuation replaced."""
        assert normalize_area("  Vasant-Vihar. ") == "vasant vihar"
        assert normalize_area("GREATER   KAILASH") == "greater kailash"

    @pytest.mark.parametrize("heading", ["Vasant-Vihar.", "DEFENCE  COLONY", "S.D. Area"])
    def test_normalize_area_is_idempotent(self, heading: str):
        """Normalizing a normalized area changes nothing."""
        once = normalize_area(heading)
        assert normalize_area(once) == once


class TestNoise:
    """Tests for header/footer detection."""

    @pytest.mark.parametrize(
        "line",
        [
            "SEPTEMBER 2025",
            "Page 3",
            "12",
            "RESIDENTIAL PROPERTIES FOR SALE",
            "October Listing",
        ],
    )
    def test_noise_lines(self, line: str):
        """Titles, month names and page numbers are noise."""
        assert is_noise(line)

    @pytest.mark.parametrize("line", ["VASANT VIHAR", "A-12 200 YD 3BR GF", "WHOLESALERS"])
    def test_non_noise_lines(self, line: str):
        """Ordinary headings and property lines are not noise."""
        assert not is_noise(line)


class TestAreaHeading:
    """Tests for area heading detection."""

    @pytest.mark.parametrize(
        "line",
        ["VASANT VIHAR", "Greater Kailash-II", "SAFDARJUNG ENCLAVE", "Anand Lok"],
    )
    def test_area_headings(self, line: str):
        """Letter-only locality names are headings."""
        assert is_area_heading(line)

    @pytest.mark.parametrize(
        "line",
        [
            "GK",
            "SHIVALIK 2",
            "PLOT NO",
            "FLATS AVAILABLE",
            "READY TO MOVE",
            "GF AND FF",
            "A" * 51,
            "Hauz Khas, Main",
        ],
    )
    def test_not_area_headings(self, line: str):
        """Short, long, numeric, reserved-word or punctuated lines are not headings."""
        assert not is_area_heading(line)


class TestPropertyTokens:
    """Tests for the property-data trigger."""

    @pytest.mark.parametrize("line", ["A-12 200 YD", "3BR", "12 GF", "4 BHK", "150 SQ.FT", "M-2 300 YARDS"])
    def test_property_lines(self, line: str):
        """Lines with a digit and a unit/bedroom/floor token are property data."""
        assert has_property_tokens(line)

    def test_requires_a_digit(self):
        """A line without digits is never property data."""
        assert not has_property_tokens("YD GF BHK")

    def test_strict_floor_matching(self):
        """Floor codes inside other words only count in loose mode."""
        assert not has_property_tokens("TOFFEE 2", strict_floor_matching=True)
        assert has_property_tokens("TOFFEE 2", strict_floor_matching=False)


class TestLineClassifier:
    """Tests for ordered classification with context updates."""

    def test_city_marker_updates_context(self):
        """A short line naming a city sets the current city."""
        classifier = LineClassifier()
        context = LineContext()

        assert classifier.classify("NEW DELHI", context) == LineKind.CITY_MARKER
        assert context.city == "new delhi"
        assert context.area == ""

    def test_long_city_line_is_not_a_marker(self):
        """City lines must be shorter than 30 characters."""
        classifier = LineClassifier()
        context = LineContext()

        kind = classifier.classify("DELHI PROPERTY LISTINGS FOR THE MONTH", context)
        assert kind != LineKind.CITY_MARKER
        assert context.city == "south delhi"

    def test_area_heading_updates_context(self):
        """Area headings set the normalized current area."""
        classifier = LineClassifier()
        context = LineContext()

        assert classifier.classify("Vasant-Vihar", context) == LineKind.AREA_HEADING
        assert context.area == "vasant vihar"
        assert context.has_area

    def test_property_line_before_area_is_unclassified(self):
        """Property lines are ignored until an area heading is seen."""
        classifier = LineClassifier()
        context = LineContext()

        assert classifier.classify("A-12 200 YD 3BR GF", context) == LineKind.UNCLASSIFIED

    def test_property_line_after_area(self):
        """Property lines under an area are property data."""
        classifier = LineClassifier()
        context = LineContext(area="vasant vihar")

        assert classifier.classify("A-12 200 YD 3BR GF", context) == LineKind.PROPERTY_DATA

    def test_noise_wins_over_property_data(self):
        """Noise is checked before area headings and property data."""
        classifier = LineClassifier()
        context = LineContext(area="vasant vihar")

        assert classifier.classify("A-12 200 YD FOR SALE", context) == LineKind.NOISE

    def test_city_wins_over_noise(self):
        """A short city line is a marker even when it holds noise words."""
        classifier = LineClassifier()
        context = LineContext()

        assert classifier.classify("DELHI RESIDENTIAL", context) == LineKind.CITY_MARKER
        assert context.city == "delhi residential"

    def test_custom_city_tokens(self):
        """City tokens are configurable."""
        classifier = LineClassifier(["gurgaon", "noida"])
        context = LineContext()

        assert classifier.classify("GURGAON", context) == LineKind.CITY_MARKER
        assert context.city == "gurgaon"
        assert classifier.classify("SOUTH DELHI", context) == LineKind.AREA_HEADING

    def test_rules_are_ordered(self):
        """The rule table runs city, noise, area, property in that order."""
        kinds = [rule.kind for rule in LineClassifier().rules]
        assert kinds == [
            LineKind.CITY_MARKER,
            LineKind.NOISE,
            LineKind.AREA_HEADING,
            LineKind.PROPERTY_DATA,
        ]

    def test_city_marker_pattern_requires_tokens(self):
        """An empty token list is rejected."""
        with pytest.raises(ValueError):
            city_marker_pattern(["", "  "])
