"""Propsheet Core - listing-sheet parsing, redaction, search and export."""

__version__ = "0.1.0"

from .listing_parser import ListingSheetParser, parse_listing_sheet
from .models import ExtractedProperty, IngestionResult, StoredProperty
from .privacy import filter_sensitive_info

__all__ = [
    "ListingSheetParser",
    "parse_listing_sheet",
    "ExtractedProperty",
    "IngestionResult",
    "StoredProperty",
    "filter_sensitive_info",
]
