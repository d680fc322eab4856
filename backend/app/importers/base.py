"""Shared types and value parsing for itinerary importers.

Every importer turns raw file bytes into a ``PartialTrip``: whatever trip fields
and activities the file carried, plus the names of the trip fields it did not
supply. Nothing is defaulted at this stage; ``importers.service`` decides what
to do with missing values.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any, Protocol

from pydantic import BaseModel, Field, model_validator

TRIP_FIELDS = ("title", "destination", "start_date", "end_date", "budget", "currency")


class ImportParseError(Exception):
    """The file could not be turned into a trip or activity list."""


class UnsupportedFormatError(Exception):
    """No importer handles the file's extension."""

    def __init__(self, filename: str | None) -> None:
        self.filename = filename
        super().__init__(f"Unsupported file type: {filename or '<unnamed>'}")


class PartialActivity(BaseModel):
    """An activity as read from a file, before it is attached to a day."""

    title: str
    type: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: dt.datetime | None = Field(default=None, description="Full timestamp, if given")
    end_time: dt.datetime | None = None
    time_of_day: dt.time | None = Field(default=None, description="Bare HH:MM, if only that")
    cost: float | None = None
    currency: str | None = None
    day_date: dt.date | None = Field(default=None, description="Calendar date of the source day")
    day_index: int | None = Field(default=None, description="0-based source day position")


class PartialTrip(BaseModel):
    """Trip fields and activities recovered from an import file."""

    title: str | None = None
    destination: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    budget: float | None = None
    currency: str | None = None
    activities: list[PartialActivity] = Field(default_factory=list)
    missing_fields: list[str] = Field(default_factory=list)
    skipped_rows: int = 0

    @model_validator(mode="after")
    def _collect_missing(self) -> PartialTrip:
        self.missing_fields = [name for name in TRIP_FIELDS if getattr(self, name) in (None, "")]
        return self


class ImportParser(Protocol):
    """Strategy turning one file format into a PartialTrip."""

    extensions: tuple[str, ...]

    def parse(self, raw: bytes, *, filename: str | None = None) -> PartialTrip:
        """Parse file content.

        Raises:
            ImportParseError: If the content is not readable as this format.
        """
        ...


# --- value parsing -----------------------------------------------------------

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DMY_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_AMOUNT = re.compile(r"(\d+(?:\.\d+)?)\s*([A-Za-z]{3})?")
_LONG_DATE_FORMATS = ("%A, %d %B %Y", "%d %B %Y", "%B %d, %Y")
_DAY_LABEL = re.compile(r"^\s*day\s+(\d+)\b", re.IGNORECASE)


def decode_text(raw: bytes) -> str:
    """Decode text files, tolerating a UTF-8 BOM and legacy latin-1 files."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def clean_str(value: Any) -> str | None:
    """Stripped string, or None for blanks."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_date(value: Any) -> dt.date | None:
    """Calendar date from a date/datetime, ISO text or ``DD/MM/YYYY`` text."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if _ISO_DATE.match(text):
        try:
            return dt.date.fromisoformat(text[:10])
        except ValueError:
            return None
    match = _DMY_DATE.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return dt.date(year, month, day)
        except ValueError:
            return None
    for fmt in _LONG_DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_clock(value: Any) -> tuple[dt.datetime | None, dt.time | None]:
    """Split a time-ish value into (full timestamp, bare time of day).

    ``"14:30"`` gives a time of day, ISO timestamps give a datetime; anything
    unreadable gives ``(None, None)``.
    """
    if value is None:
        return None, None
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None), None
    if isinstance(value, dt.time):
        return None, value.replace(tzinfo=None)
    text = str(value).strip()
    if not text:
        return None, None
    match = _CLOCK.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour < 24 and minute < 60:
            return None, dt.time(hour, minute)
        return None, None
    try:
        parsed = dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None, None
    return parsed.replace(tzinfo=None), None


def parse_amount(value: Any) -> tuple[float | None, str | None]:
    """Amount and optional trailing currency code (``"25.5 EUR"``)."""
    if value is None or isinstance(value, bool):
        return None, None
    if isinstance(value, int | float):
        return float(value), None
    match = _AMOUNT.search(str(value))
    if not match:
        return None, None
    currency = match.group(2).upper() if match.group(2) else None
    return float(match.group(1)), currency


def parse_day_label(value: Any) -> int | None:
    """0-based index from a ``Day N`` label."""
    if value is None:
        return None
    match = _DAY_LABEL.match(str(value))
    if not match:
        return None
    return max(int(match.group(1)) - 1, 0)
