"""Trip, day and activity persistence operations.

Functions here flush but never commit: the caller (one HTTP request, or one
import) owns the transaction and commits once, so multi-step operations such as
day reconciliation or a file import are all-or-nothing.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from backend.app.db.models.activity import Activity
from backend.app.db.models.day import Day
from backend.app.db.models.trip import Trip
from backend.app.models.common import normalize_activity_type, normalize_currency
from backend.app.models.itinerary import (
    ActivityCreate,
    ActivityUpdate,
    TripCreate,
    TripUpdate,
    TripV1,
)
from backend.app.planning.assignment import resolve_day_for_start_time
from backend.app.planning.days import apply_reconciliation, build_days, plan_reconciliation

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a trip, day or activity does not exist."""

    def __init__(self, entity: str, entity_id: UUID | str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found")


# --- Trips -------------------------------------------------------------------


def create_trip(session: Session, data: TripCreate, default_currency: str = "EUR") -> Trip:
    """Create a trip together with one day per date of its range."""
    trip = Trip(
        title=data.title,
        destination=data.destination,
        start_date=data.start_date,
        end_date=data.end_date,
        budget=data.budget,
        currency=normalize_currency(data.currency, default_currency),
        cover_image=data.cover_image,
    )
    trip.days = build_days(data.start_date, data.end_date)
    session.add(trip)
    session.flush()
    logger.info(
        "trip_created",
        extra={"trip_id": str(trip.trip_id), "days": len(trip.days)},
    )
    return trip


def get_trip(session: Session, trip_id: UUID) -> Trip:
    """Load a trip with its days and activities."""
    stmt = (
        select(Trip)
        .where(Trip.trip_id == trip_id)
        .options(selectinload(Trip.days).selectinload(Day.activities))
    )
    trip = session.execute(stmt).scalar_one_or_none()
    if trip is None:
        raise NotFoundError("trip", trip_id)
    return trip


def list_trips(session: Session) -> list[tuple[Trip, int]]:
    """All trips ordered by start date, each with its day count."""
    stmt = (
        select(Trip, func.count(Day.day_id))
        .outerjoin(Day, Day.trip_id == Trip.trip_id)
        .group_by(Trip.trip_id)
        .order_by(Trip.start_date.asc(), Trip.created_at.asc())
    )
    return [(trip, count) for trip, count in session.execute(stmt).all()]


def update_trip(session: Session, trip_id: UUID, data: TripUpdate) -> Trip:
    """Apply a partial update; a changed date range reconciles the trip's days.

    Blank titles are ignored. Dates count as changed only when the supplied
    value differs from the stored one.
    """
    trip = get_trip(session, trip_id)
    fields = data.model_dump(exclude_unset=True)

    if fields.get("title"):
        trip.title = fields["title"]
    if "destination" in fields:
        trip.destination = fields["destination"]
    if "budget" in fields:
        trip.budget = fields["budget"]
    if fields.get("currency"):
        trip.currency = normalize_currency(fields["currency"], trip.currency)
    if "cover_image" in fields:
        trip.cover_image = fields["cover_image"]

    new_start = fields.get("start_date") or trip.start_date
    new_end = fields.get("end_date") or trip.end_date
    dates_changed = new_start != trip.start_date or new_end != trip.end_date

    if dates_changed:
        trip.start_date = new_start
        trip.end_date = new_end
        plan = plan_reconciliation(list(trip.days), new_start, new_end)
        apply_reconciliation(session, trip, plan)

    session.flush()
    return trip


def delete_trip(session: Session, trip_id: UUID) -> None:
    """Delete a trip, its days and their activities."""
    trip = get_trip(session, trip_id)
    for day in list(trip.days):
        _delete_day_rows(session, day)
    session.delete(trip)
    session.flush()
    logger.info("trip_deleted", extra={"trip_id": str(trip_id)})


# --- Days --------------------------------------------------------------------


def get_day(session: Session, day_id: UUID) -> Day:
    day = session.get(Day, day_id)
    if day is None:
        raise NotFoundError("day", day_id)
    return day


def update_day_note(session: Session, trip_id: UUID, day_id: UUID, note: str | None) -> Day:
    """Set or clear the note of one of the trip's days."""
    day = get_day(session, day_id)
    if day.trip_id != trip_id:
        raise NotFoundError("day", day_id)
    day.note = note
    session.flush()
    return day


def delete_day(session: Session, day_id: UUID) -> None:
    """Delete a day and its activities."""
    day = get_day(session, day_id)
    _delete_day_rows(session, day)
    session.flush()


def _delete_day_rows(session: Session, day: Day) -> None:
    for activity in list(day.activities):
        session.delete(activity)
    session.delete(day)


# --- Activities --------------------------------------------------------------


def get_activity(session: Session, activity_id: UUID) -> Activity:
    activity = session.get(Activity, activity_id)
    if activity is None:
        raise NotFoundError("activity", activity_id)
    return activity


def _next_position(day: Day) -> int:
    return max((a.position for a in day.activities), default=-1) + 1


def _place(session: Session, activity: Activity, day: Day) -> None:
    """Attach ``activity`` at the end of ``day``.

    Autoflush is held off until the activity has its new parent; otherwise
    loading ``day.activities`` would flush it as a delete-orphan.
    """
    if activity.day is day:
        return
    with session.no_autoflush:
        position = _next_position(day)
        activity.day = day
        activity.position = position


def create_activity(session: Session, data: ActivityCreate) -> Activity:
    """Create an activity, applying the start-time day-assignment rule.

    The currency defaults to the owning trip's currency.
    """
    requested = get_day(session, data.day_id)
    trip = requested.trip
    day = resolve_day_for_start_time(requested, trip.days, data.start_time)

    activity = Activity(
        type=normalize_activity_type(data.type),
        title=data.title,
        description=data.description,
        location=data.location,
        start_time=data.start_time,
        end_time=data.end_time,
        cost=data.cost,
        currency=normalize_currency(data.currency, trip.currency),
        images=list(data.images),
        position=_next_position(day),
    )
    day.activities.append(activity)
    session.flush()

    if day is not requested:
        logger.info(
            "activity_reassigned",
            extra={
                "activity_id": str(activity.activity_id),
                "requested_day": str(requested.day_id),
                "day_id": str(day.day_id),
            },
        )
    return activity


def update_activity(
    session: Session,
    activity_id: UUID,
    data: ActivityUpdate,
    reassign_on_update: bool = True,
) -> Activity:
    """Apply a partial update to an activity.

    A supplied ``day_id`` moves the activity. A supplied non-null
    ``start_time`` re-runs the assignment rule against the (possibly new) day
    when ``reassign_on_update`` is enabled; a move alone never does.
    """
    activity = get_activity(session, activity_id)
    fields = data.model_dump(exclude_unset=True)

    for name in ("title", "description", "location", "start_time", "end_time", "cost"):
        if name in fields:
            if name == "title" and not fields[name]:
                continue
            setattr(activity, name, fields[name])
    if "type" in fields:
        activity.type = normalize_activity_type(fields["type"])
    if "currency" in fields:
        activity.currency = normalize_currency(fields["currency"], activity.day.trip.currency)
    if "images" in fields:
        activity.images = list(fields["images"] or [])

    target = activity.day
    if fields.get("day_id") is not None:
        target = get_day(session, fields["day_id"])

    if reassign_on_update and fields.get("start_time") is not None:
        target = resolve_day_for_start_time(target, target.trip.days, fields["start_time"])

    _place(session, activity, target)
    session.flush()
    return activity


def move_activity(session: Session, activity_id: UUID, day_id: UUID) -> Activity:
    """Relocate an activity to another day (drag-and-drop)."""
    activity = get_activity(session, activity_id)
    day = get_day(session, day_id)
    _place(session, activity, day)
    session.flush()
    logger.info(
        "activity_moved",
        extra={"activity_id": str(activity_id), "day_id": str(day_id)},
    )
    return activity


def delete_activity(session: Session, activity_id: UUID) -> None:
    activity = get_activity(session, activity_id)
    activity.day.activities.remove(activity)
    session.delete(activity)
    session.flush()


# --- Conversion --------------------------------------------------------------


def to_trip_v1(trip: Trip) -> TripV1:
    """Snapshot a trip graph as an exchange model.

    Days are ordered by date, activities by their position in the day.
    """
    positions = {a.activity_id: a.position for day in trip.days for a in day.activities}
    snapshot = TripV1.model_validate(trip)
    snapshot.days.sort(key=lambda d: d.date)
    for day in snapshot.days:
        day.activities.sort(key=lambda a: positions.get(a.activity_id, 0))
    return snapshot
