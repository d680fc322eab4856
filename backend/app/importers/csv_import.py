"""CSV importer using header-substring sniffing.

Trip fields come from the first data row; activity fields from every row.
Header matching is case-insensitive and substring based, so ``Trip Title``,
``Start Date`` or ``Activity Name`` are all understood.
"""

from __future__ import annotations

import csv
import io
import logging

from backend.app.importers.base import (
    ImportParseError,
    PartialActivity,
    PartialTrip,
    clean_str,
    decode_text,
    parse_amount,
    parse_clock,
    parse_date,
    parse_day_label,
)

logger = logging.getLogger(__name__)


def trip_field(header: str) -> str | None:
    """Trip attribute a lower-cased header maps to."""
    if "title" in header and "activity" not in header:
        return "title"
    if "destination" in header:
        return "destination"
    if "start" in header and "date" in header:
        return "start_date"
    if "end" in header and "date" in header:
        return "end_date"
    if "budget" in header:
        return "budget"
    return None


def activity_field(header: str) -> str | None:
    """Activity attribute a lower-cased header maps to."""
    if "type" in header:
        return "type"
    if "currency" in header:
        return "currency"
    if "cost" in header or "price" in header:
        return "cost"
    if "time" in header:
        return "time"
    if "location" in header:
        return "location"
    if any(key in header for key in ("description", "details", "note")):
        return "description"
    if "activity" in header:
        return "title"
    if header == "date":
        return "date"
    if header == "day":
        return "day"
    return None


class CsvImportParser:
    extensions = (".csv",)

    def parse(self, raw: bytes, *, filename: str | None = None) -> PartialTrip:
        try:
            rows = [row for row in csv.reader(io.StringIO(decode_text(raw))) if any(c.strip() for c in row)]
        except csv.Error as e:
            raise ImportParseError(f"Invalid CSV: {e}") from e
        if not rows:
            raise ImportParseError("CSV file is empty")

        headers = [h.strip().lower() for h in rows[0]]
        data_rows = rows[1:]

        trip_values: dict[str, str | None] = {}
        trip_currency: str | None = None
        if data_rows:
            first = data_rows[0]
            for idx, header in enumerate(headers):
                value = clean_str(first[idx]) if idx < len(first) else None
                name = trip_field(header)
                if name and trip_values.get(name) is None:
                    trip_values[name] = value
                if header == "currency":
                    trip_currency = value

        activity_columns = {idx: activity_field(h) for idx, h in enumerate(headers)}
        title_column = next((i for i, f in activity_columns.items() if f == "title"), None)
        if title_column is None and not set(trip_values) - {"title"}:
            # A plain activity list titled by a "title"/"name" column
            title_column = next((i for i, h in enumerate(headers) if h in ("title", "name")), None)

        activities: list[PartialActivity] = []
        skipped = 0
        if title_column is not None:
            for row in data_rows:
                activity = self._activity(row, activity_columns, title_column)
                if activity is None:
                    skipped += 1
                else:
                    activities.append(activity)

        budget, budget_currency = parse_amount(trip_values.get("budget"))
        logger.debug("csv_parsed", extra={"activities": len(activities), "skipped": skipped})
        return PartialTrip(
            title=trip_values.get("title"),
            destination=trip_values.get("destination"),
            start_date=parse_date(trip_values.get("start_date")),
            end_date=parse_date(trip_values.get("end_date")),
            budget=budget,
            currency=trip_currency or budget_currency,
            activities=activities,
            skipped_rows=skipped,
        )

    def _activity(
        self, row: list[str], columns: dict[int, str | None], title_column: int
    ) -> PartialActivity | None:
        def cell(idx: int) -> str | None:
            return clean_str(row[idx]) if idx < len(row) else None

        title = cell(title_column)
        if not title:
            return None

        values: dict[str, str | None] = {}
        for idx, name in columns.items():
            if name and name != "title" and values.get(name) is None:
                values[name] = cell(idx)

        start_time, time_of_day = parse_clock(values.get("time"))
        cost, cost_currency = parse_amount(values.get("cost"))
        return PartialActivity(
            title=title,
            type=values.get("type"),
            description=values.get("description"),
            location=values.get("location"),
            start_time=start_time,
            time_of_day=time_of_day,
            cost=cost,
            currency=values.get("currency") or cost_currency,
            day_date=parse_date(values.get("date")),
            day_index=parse_day_label(values.get("day")),
        )
