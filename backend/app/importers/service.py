"""Apply parsed import files through the ordinary store operations.

Imports never write rows directly: the trip is created with ``create_trip``
(so its days are generated) and every activity goes through
``create_activity`` (so the start-time assignment rule applies). Callers
commit once after a successful import and roll back on any error.
"""

from __future__ import annotations

import datetime as dt
import logging
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from backend.app.db.models.day import Day
from backend.app.db.trips import NotFoundError, create_activity, get_day, get_trip
from backend.app.db.trips import create_trip as store_create_trip
from backend.app.importers.base import ImportParseError, PartialActivity, PartialTrip
from backend.app.importers.registry import get_parser
from backend.app.models.itinerary import ActivityCreate, TripCreate
from backend.app.planning.days import find_day_for_date

logger = logging.getLogger(__name__)

DEFAULT_TRIP_LENGTH = dt.timedelta(days=7)
DEFAULT_DESTINATION = "Unknown"
NO_TITLE_MESSAGE = (
    "Could not parse trip data from file. Please check the format. "
    "Supported formats: JSON, TXT, CSV, XLSX, PDF."
)


class ImportSummary(BaseModel):
    """Outcome of an import."""

    trip_id: UUID
    title: str
    activities_imported: int = 0
    skipped_rows: int = 0
    missing_fields: list[str] = Field(default_factory=list)


def parse_file(raw: bytes, filename: str | None) -> PartialTrip:
    """Parse an uploaded file with the importer matching its extension."""
    parser = get_parser(filename)
    partial = parser.parse(raw, filename=filename)
    logger.info(
        "import_parsed",
        extra={
            "import_filename": filename,
            "activities": len(partial.activities),
            "skipped_rows": partial.skipped_rows,
            "missing_fields": partial.missing_fields,
        },
    )
    return partial


def resolve_trip_dates(
    start: dt.date | None, end: dt.date | None, today: dt.date
) -> tuple[dt.date, dt.date]:
    """Fill missing import dates: start defaults to today, end to start + 7 days."""
    if start is None:
        start = end if end is not None and end < today else today
    if end is None:
        end = start + DEFAULT_TRIP_LENGTH
    return start, end


def choose_day(days: list[Day], activity: PartialActivity) -> Day | None:
    """Day for an imported activity: by date, then by index, then the first day."""
    if not days:
        return None
    if activity.day_date is not None:
        match = find_day_for_date(days, activity.day_date)
        if match is not None:
            return match
    if activity.day_index is not None and 0 <= activity.day_index < len(days):
        return days[activity.day_index]
    return days[0]


def _activity_create(activity: PartialActivity, day: Day) -> ActivityCreate:
    start_time = activity.start_time
    if start_time is None and activity.time_of_day is not None:
        start_time = dt.datetime.combine(day.date, activity.time_of_day)
    return ActivityCreate(
        day_id=day.day_id,
        title=activity.title,
        type=activity.type,
        description=activity.description,
        location=activity.location,
        start_time=start_time,
        end_time=activity.end_time,
        cost=activity.cost if activity.cost and activity.cost > 0 else None,
        currency=activity.currency,
    )


def import_trip(
    session: Session,
    raw: bytes,
    filename: str | None,
    default_currency: str = "EUR",
    today: dt.date | None = None,
) -> ImportSummary:
    """Create a new trip (and its activities) from an uploaded file.

    Raises:
        UnsupportedFormatError: Unknown file extension.
        ImportParseError: Unreadable file, or no trip title found.
    """
    partial = parse_file(raw, filename)
    if not partial.title:
        raise ImportParseError(NO_TITLE_MESSAGE)

    start, end = resolve_trip_dates(partial.start_date, partial.end_date, today or dt.date.today())
    trip = store_create_trip(
        session,
        TripCreate(
            title=partial.title,
            destination=partial.destination or DEFAULT_DESTINATION,
            start_date=start,
            end_date=end,
            budget=partial.budget if partial.budget and partial.budget > 0 else None,
            currency=partial.currency,
        ),
        default_currency=default_currency,
    )

    days = sorted(trip.days, key=lambda d: d.date)
    imported, skipped = 0, partial.skipped_rows
    for activity in partial.activities:
        day = choose_day(days, activity)
        if day is None:
            skipped += 1
            continue
        create_activity(session, _activity_create(activity, day))
        imported += 1

    logger.info(
        "trip_imported",
        extra={"trip_id": str(trip.trip_id), "activities": imported, "skipped_rows": skipped},
    )
    return ImportSummary(
        trip_id=trip.trip_id,
        title=trip.title,
        activities_imported=imported,
        skipped_rows=skipped,
        missing_fields=partial.missing_fields,
    )


def import_activities(
    session: Session,
    trip_id: UUID,
    raw: bytes,
    filename: str | None,
    day_id: UUID | None = None,
) -> ImportSummary:
    """Add the activities of an uploaded file to an existing trip.

    Activities go to ``day_id`` when given, otherwise to the trip's first day;
    the start-time assignment rule may still move them.

    Raises:
        NotFoundError: Unknown trip, or a day that is not part of the trip.
        UnsupportedFormatError: Unknown file extension.
        ImportParseError: Unreadable file.
    """
    trip = get_trip(session, trip_id)
    partial = parse_file(raw, filename)

    if day_id is not None:
        target = get_day(session, day_id)
        if target.trip_id != trip.trip_id:
            raise NotFoundError("day", day_id)
    else:
        days = sorted(trip.days, key=lambda d: d.date)
        target = days[0] if days else None

    imported, skipped = 0, partial.skipped_rows
    for activity in partial.activities:
        if target is None:
            skipped += 1
            continue
        create_activity(session, _activity_create(activity, target))
        imported += 1

    logger.info(
        "activities_imported",
        extra={"trip_id": str(trip_id), "activities": imported, "skipped_rows": skipped},
    )
    return ImportSummary(
        trip_id=trip.trip_id,
        title=trip.title,
        activities_imported=imported,
        skipped_rows=skipped,
        missing_fields=partial.missing_fields,
    )
