"""Itinerary exporters.

Every formatter is a pure function of a ``TripV1`` graph.
"""

from .common import download_filename
from .ics import export_ics
from .json_export import export_json
from .links import LinkResult, google_calendar_url, maps_route_url
from .markdown import export_markdown
from .pdf import export_pdf
from .spreadsheet import export_xlsx
from .text import export_text

__all__ = [
    "LinkResult",
    "download_filename",
    "export_ics",
    "export_json",
    "export_markdown",
    "export_pdf",
    "export_text",
    "export_xlsx",
    "google_calendar_url",
    "maps_route_url",
]
