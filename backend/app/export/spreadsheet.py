"""Excel (xlsx) itinerary export built with openpyxl."""

from __future__ import annotations

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from backend.app.export.common import (
    cost_label,
    day_number,
    days_with_activities,
    format_time,
    maps_search_url,
)
from backend.app.models.itinerary import TripV1

SHEET_TITLE = "Itinerary"

# (header, column width in characters)
COLUMNS = [
    ("Date", 12),
    ("Day", 8),
    ("Time", 8),
    ("Type", 10),
    ("Activity", 25),
    ("Description", 30),
    ("Location", 25),
    ("Maps Link", 50),
    ("Cost", 12),
]


def itinerary_rows(trip: TripV1) -> list[list[str]]:
    """One row per activity of every non-empty day, in column order."""
    rows = []
    for day in days_with_activities(trip):
        for activity in day.activities:
            rows.append(
                [
                    day.date.isoformat(),
                    f"Day {day_number(day)}",
                    format_time(activity.start_time),
                    activity.type,
                    activity.title,
                    activity.description or "",
                    activity.location or "",
                    maps_search_url(activity.location) if activity.location else "",
                    cost_label(activity, trip) or "",
                ]
            )
    return rows


def export_xlsx(trip: TripV1) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append([header for header, _ in COLUMNS])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in itinerary_rows(trip):
        ws.append(row)

    for idx, (_, width) in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width

    output = BytesIO()
    wb.save(output)
    return output.getvalue()
