"""Listing-sheet parser.

Turns the text layer of a monthly listing sheet into ExtractedProperty
records. Sheets look like this:

    SOUTH DELHI
    VASANT VIHAR
    A-12  200 YD 3BR GF  READY  CALL 9876543210
    B-4   500 YD BMT+GF+FF
    GREATER KAILASH
    ...

City lines and area headings set the context that every following property
line inherits. A property line becomes a record only when a size can be
read from it; other property lines are reported as dropped.
"""

from typing import Iterable, Optional, Sequence

import structlog

from .classifier import DEFAULT_CITY_TOKENS, LineClassifier
from .extractors import (
    extract_bedrooms,
    extract_contacts,
    extract_floors,
    extract_price,
    extract_property_id,
    extract_property_type,
    extract_size,
    extract_status,
    mentions_notes,
)
from .models import (
    DEFAULT_CITY,
    ExtractedProperty,
    LineContext,
    LineKind,
    Location,
    ParseReport,
)
from .privacy import filter_sensitive_info
from .text import split_lines

logger = structlog.get_logger()


class ListingSheetParser:
    """
    Single-pass parser for free-text listing sheets.

    The parser itself holds only configuration. Each call to parse() or
    parse_report() creates a fresh LineContext, so one parser instance can
    serve concurrent ingestions.
    """

    def __init__(
        self,
        *,
        default_city: str = DEFAULT_CITY,
        city_tokens: Sequence[str] = DEFAULT_CITY_TOKENS,
        include_legacy_fields: bool = False,
        strict_floor_matching: bool = True,
    ):
        """
        Initialize the parser.

        Args:
            default_city: City assumed until the sheet names one.
            city_tokens: Words that identify a city line.
            include_legacy_fields: Also fill status, contact, price,
                property type and broker notes.
            strict_floor_matching: Require whole-word floor codes when
                deciding whether a line holds property data.
        """
        self.default_city = default_city.strip().lower()
        self.include_legacy_fields = include_legacy_fields
        self._classifier = LineClassifier(
            city_tokens, strict_floor_matching=strict_floor_matching
        )

    def new_context(self) -> LineContext:
        """Create the context for one parsing pass."""
        return LineContext(city=self.default_city)

    def parse(self, text: str) -> list[ExtractedProperty]:
        """Parse document text into property records."""
        return self.parse_report(text).records

    def parse_report(self, text: str) -> ParseReport:
        """Parse document text, keeping the lines that were dropped."""
        return self.parse_lines(split_lines(text))

    def parse_lines(self, lines: Iterable[str]) -> ParseReport:
        """
        Parse pre-split, trimmed lines in document order.

        Args:
            lines: Non-empty trimmed lines

        Returns:
            ParseReport with the emitted records and dropped property lines
        """
        context = self.new_context()
        report = ParseReport()

        for line in lines:
            report.line_count += 1
            kind = self._classifier.classify(line, context)
            if kind is not LineKind.PROPERTY_DATA:
                continue

            record = self.build_record(line, context)
            if record is None:
                report.dropped_lines.append(line)
                logger.debug("property_line_dropped", reason="no_size", line=line[:80])
                continue
            report.records.append(record)

        logger.info(
            "listing_sheet_parsed",
            lines=report.line_count,
            records=len(report.records),
            dropped=len(report.dropped_lines),
            areas=len(report.areas),
        )
        return report

    def build_record(self, line: str, context: LineContext) -> Optional[ExtractedProperty]:
        """
        Build a record from one property line under the current context.

        Returns None when no size can be read from the line.
        """
        size = extract_size(line)
        if size is None:
            return None

        detail = filter_sensitive_info(line)
        record = ExtractedProperty(
            location=Location(city=context.city, area=context.area),
            property_id=extract_property_id(line),
            size=size,
            floors=extract_floors(line),
            bedrooms=extract_bedrooms(line),
            detail=detail,
            raw_detail=line,
        )

        if self.include_legacy_fields:
            record.status = extract_status(line)
            record.contact = extract_contacts(line)
            record.price = extract_price(line)
            record.property_type = extract_property_type(line)
            if mentions_notes(line):
                record.broker_notes = detail or None

        return record


def parse_listing_sheet(text: str, **options) -> list[ExtractedProperty]:
    """Parse listing-sheet text with a one-off parser."""
    return ListingSheetParser(**options).parse(text)


__all__ = ["ListingSheetParser", "parse_listing_sheet"]
