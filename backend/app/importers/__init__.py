"""Itinerary importers for JSON, text, CSV, spreadsheet and PDF files."""

from .base import ImportParseError, ImportParser, PartialActivity, PartialTrip, UnsupportedFormatError
from .registry import SUPPORTED_EXTENSIONS, get_parser
from .service import ImportSummary, import_activities, import_trip

__all__ = [
    "ImportParseError",
    "ImportParser",
    "ImportSummary",
    "PartialActivity",
    "PartialTrip",
    "SUPPORTED_EXTENSIONS",
    "UnsupportedFormatError",
    "get_parser",
    "import_activities",
    "import_trip",
]
