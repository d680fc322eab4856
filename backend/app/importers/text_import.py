"""Plain-text importer, the reader for the text export layout.

Recognised lines::

    SUMMER IN LISBON                      <- title (first non-separator line)
    Destination: Lisbon
    Dates: 2024-03-01 - 2024-03-03        <- ISO or DD/MM/YYYY
    Budget: 1000 EUR
    ## DAY 1 - Friday, 1 March 2024
      1. [09:00] Breakfast (food)         <- [??:??] for untimed
         Location: Cafe
         Note: ...
         Cost: 25 EUR

``Location:``, ``Note:`` and ``Cost:`` apply to the most recent activity.
"""

from __future__ import annotations

import re

from backend.app.importers.base import (
    PartialActivity,
    PartialTrip,
    clean_str,
    decode_text,
    parse_amount,
    parse_clock,
    parse_date,
)

_DATE_TOKEN = r"(\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{4})"
DATE_RANGE = re.compile(_DATE_TOKEN + r"\s*-\s*" + _DATE_TOKEN)
ACTIVITY_LINE = re.compile(
    r"^\s*\d+\.\s*\[(\d{1,2}:\d{2}|\?\?:\?\?)\]\s*(.+?)(?:\s*\(([^()]+)\))?\s*$"
)
DAY_HEADING = re.compile(r"^\s*#*\s*DAY\s+(\d+)\s*(?:-\s*(.+?))?\s*$", re.IGNORECASE)
_SEPARATOR_CHARS = set("=─-_*# ")


def is_separator(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and set(stripped) <= _SEPARATOR_CHARS


def marker_value(line: str, marker: str) -> str | None:
    """Text after ``marker`` if the line carries it."""
    if marker not in line:
        return None
    return clean_str(line.split(marker, 1)[1])


class TextImportParser:
    extensions = (".txt",)

    def parse(self, raw: bytes, *, filename: str | None = None) -> PartialTrip:
        title: str | None = None
        destination: str | None = None
        start_date = end_date = None
        budget: float | None = None
        currency: str | None = None

        activities: list[PartialActivity] = []
        current: PartialActivity | None = None
        day_index: int | None = None
        day_date = None

        for line in decode_text(raw).splitlines():
            if not line.strip() or is_separator(line):
                continue

            heading = DAY_HEADING.match(line)
            if heading:
                day_index = int(heading.group(1)) - 1
                day_date = parse_date(heading.group(2))
                current = None
                continue

            match = ACTIVITY_LINE.match(line)
            if match:
                start_time, time_of_day = parse_clock(match.group(1))
                current = PartialActivity(
                    title=match.group(2).strip(),
                    type=clean_str(match.group(3)),
                    start_time=start_time,
                    time_of_day=time_of_day,
                    day_date=day_date,
                    day_index=day_index,
                )
                activities.append(current)
                continue

            if current is not None:
                location = marker_value(line, "Location:")
                if location:
                    current.location = location
                note = marker_value(line, "Note:")
                if note:
                    current.description = note
                cost_text = marker_value(line, "Cost:")
                if cost_text:
                    current.cost, cost_currency = parse_amount(cost_text)
                    current.currency = cost_currency or current.currency
                continue

            if "Destination:" in line:
                destination = marker_value(line, "Destination:")
            elif "Dates:" in line:
                dates = DATE_RANGE.search(line)
                if dates:
                    start_date, end_date = parse_date(dates.group(1)), parse_date(dates.group(2))
            elif "Budget:" in line:
                budget, currency = parse_amount(marker_value(line, "Budget:"))
            elif title is None:
                title = line.strip()

        return PartialTrip(
            title=title,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            budget=budget,
            currency=currency,
            activities=activities,
        )
