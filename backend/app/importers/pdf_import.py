"""PDF importer: loose line heuristics over the extracted text layer.

Handles both the PDF export (time badge and title on separate lines,
``> Place (View on Maps)`` locations, bare ``25 EUR`` cost lines) and free-form
itineraries using ``[HH:MM] Title`` / ``HH:MM - Title`` lines with
``Location:``/``📍`` and ``Cost:``/``💰`` markers.
"""

from __future__ import annotations

import datetime as dt
import re

from backend.app.importers.base import (
    ImportParseError,
    PartialActivity,
    PartialTrip,
    clean_str,
    parse_amount,
    parse_clock,
    parse_date,
)
from backend.app.importers.text_import import DATE_RANGE
from backend.app.utils.pdf_parser import PDFParsingError, extract_pages

TIMED_LINE = re.compile(r"^\[?(\d{1,2}:\d{2})\]?\s*[-–]?\s*(.+)$")
BARE_TIME = re.compile(r"^\[?(\d{1,2}:\d{2})\]?$")
DAY_HEADER = re.compile(r"^Day\s+(\d+)\s*[-–]", re.IGNORECASE)
MAPS_LOCATION = re.compile(r"^>\s*(.+?)\s*\(View on Maps\)$")
COST_ONLY = re.compile(r"^\d+(?:\.\d+)?\s+[A-Z]{3}$")
MAX_TITLE_LENGTH = 100


class PdfImportParser:
    extensions = (".pdf",)

    def parse(self, raw: bytes, *, filename: str | None = None) -> PartialTrip:
        try:
            pages = extract_pages(raw)
        except (PDFParsingError, ValueError) as e:
            raise ImportParseError(str(e)) from e

        lines = [line.strip() for page in pages for line in page.splitlines() if line.strip()]

        title: str | None = None
        destination: str | None = None
        start_date = end_date = None
        budget: float | None = None
        currency: str | None = None
        activities: list[PartialActivity] = []
        current: PartialActivity | None = None
        day_index: int | None = None
        pending_time: tuple[dt.datetime | None, dt.time | None] | None = None

        for line in lines:
            if "Destination:" in line:
                destination = clean_str(line.split("Destination:", 1)[1])
                continue
            # The date range and budget may share one extracted line
            summary_line = False
            dates = DATE_RANGE.search(line)
            if dates and start_date is None:
                start_date, end_date = parse_date(dates.group(1)), parse_date(dates.group(2))
                summary_line = True
            if "Budget:" in line and current is None:
                budget, currency = parse_amount(line.split("Budget:", 1)[1])
                summary_line = True
            if summary_line:
                continue

            header = DAY_HEADER.match(line)
            if header:
                day_index = int(header.group(1)) - 1
                current = None
                continue

            bare = BARE_TIME.match(line)
            if bare:
                pending_time = parse_clock(bare.group(1))
                continue

            timed = TIMED_LINE.match(line)
            if timed and len(timed.group(2)) > 2:
                current = self._new_activity(timed.group(2), parse_clock(timed.group(1)), day_index)
                activities.append(current)
                pending_time = None
                continue

            if pending_time is not None:
                current = self._new_activity(line, pending_time, day_index)
                activities.append(current)
                pending_time = None
                continue

            if current is not None:
                location = MAPS_LOCATION.match(line)
                if location:
                    current.location = location.group(1)
                elif "Location:" in line or "📍" in line:
                    current.location = clean_str(line.replace("Location:", "").replace("📍", ""))
                elif "Cost:" in line or "💰" in line or COST_ONLY.match(line):
                    current.cost, cost_currency = parse_amount(line)
                    current.currency = cost_currency or current.currency
                continue

            if title is None and len(line) > 3 and ":" not in line and "=" not in line:
                title = line[:MAX_TITLE_LENGTH]

        return PartialTrip(
            title=title,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            budget=budget,
            currency=currency,
            activities=activities,
        )

    def _new_activity(
        self,
        title: str,
        clock: tuple[dt.datetime | None, dt.time | None],
        day_index: int | None,
    ) -> PartialActivity:
        start_time, time_of_day = clock
        return PartialActivity(
            title=title.strip()[:MAX_TITLE_LENGTH],
            type="activity",
            start_time=start_time,
            time_of_day=time_of_day,
            day_index=day_index,
        )
