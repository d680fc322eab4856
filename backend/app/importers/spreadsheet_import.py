"""Excel (xlsx) importer reading the first worksheet with openpyxl.

Column names are matched case-sensitively against a small set of variants,
which covers the spreadsheet export (Date, Day, Time, Type, Activity,
Description, Location, Maps Link, Cost) as well as hand-made sheets.
"""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import PurePath
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from backend.app.importers.base import (
    ImportParseError,
    PartialActivity,
    PartialTrip,
    clean_str,
    parse_amount,
    parse_clock,
    parse_date,
    parse_day_label,
)

logger = logging.getLogger(__name__)

TITLE_KEYS = ("Title", "title", "Trip Title")
ACTIVITY_KEYS = ("Activity", "activity", "Title")
TYPE_KEYS = ("Type", "type")
DESCRIPTION_KEYS = ("Description", "description", "Details")
LOCATION_KEYS = ("Location", "location")
COST_KEYS = ("Cost", "cost")
TIME_KEYS = ("Time", "time")


def _first(row: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return value
    return None


def title_from_filename(filename: str | None) -> str | None:
    """``My_Trip.xlsx`` -> ``My Trip``."""
    if not filename:
        return None
    return clean_str(PurePath(filename).stem.replace("_", " "))


def read_rows(raw: bytes) -> list[dict[str, Any]]:
    """First-sheet rows keyed by the header row."""
    try:
        wb = load_workbook(BytesIO(raw), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ImportParseError(f"Invalid spreadsheet: {e}") from e
    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = [str(h).strip() if h is not None else "" for h in header_row]
        records = []
        for values in rows:
            if values is None or all(v in (None, "") for v in values):
                continue
            records.append({h: v for h, v in zip(headers, values, strict=False) if h})
        return records
    finally:
        wb.close()


class SpreadsheetImportParser:
    extensions = (".xlsx",)

    def parse(self, raw: bytes, *, filename: str | None = None) -> PartialTrip:
        rows = read_rows(raw)
        if not rows:
            return PartialTrip(title=title_from_filename(filename))

        first, last = rows[0], rows[-1]
        has_activities = _first(first, ("Activity", "activity")) is not None or "Time" in first

        activities: list[PartialActivity] = []
        skipped = 0
        if has_activities:
            for row in rows:
                activity = self._activity(row)
                if activity is None:
                    skipped += 1
                else:
                    activities.append(activity)

        budget, budget_currency = parse_amount(_first(first, ("Budget", "budget")))
        return PartialTrip(
            title=clean_str(_first(first, TITLE_KEYS)) or title_from_filename(filename),
            destination=clean_str(_first(first, ("Destination", "destination"))),
            start_date=parse_date(first.get("Date")),
            end_date=parse_date(last.get("Date")),
            budget=budget,
            currency=clean_str(_first(first, ("Currency", "currency"))) or budget_currency,
            activities=activities,
            skipped_rows=skipped,
        )

    def _activity(self, row: dict[str, Any]) -> PartialActivity | None:
        title = clean_str(_first(row, ACTIVITY_KEYS))
        if not title:
            return None
        start_time, time_of_day = parse_clock(_first(row, TIME_KEYS))
        cost, currency = parse_amount(_first(row, COST_KEYS))
        return PartialActivity(
            title=title,
            type=clean_str(_first(row, TYPE_KEYS)),
            description=clean_str(_first(row, DESCRIPTION_KEYS)),
            location=clean_str(_first(row, LOCATION_KEYS)),
            start_time=start_time,
            time_of_day=time_of_day,
            cost=cost,
            currency=currency,
            day_date=parse_date(row.get("Date")),
            day_index=parse_day_label(row.get("Day")),
        )
