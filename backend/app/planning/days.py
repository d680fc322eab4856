"""Day generation and reconciliation for a trip's date range.

A trip owns exactly one Day per calendar date of its inclusive
``[start_date, end_date]`` range. When the range changes, existing days are
matched to the new range by calendar date (never by identity):

* a day whose date is still in range is kept with its activities and only
  receives its new ``index``;
* a date with no existing day gets a freshly created day;
* a day whose date falls outside the new range is deleted together with its
  activities.

``plan_reconciliation`` is pure and works on anything exposing ``date``;
``apply_reconciliation`` performs the plan against a SQLAlchemy session inside
the caller's transaction so the whole day set changes atomically.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Generic, Protocol, TypeVar

from sqlalchemy.orm import Session

from backend.app.db.models.day import Day
from backend.app.db.models.trip import Trip

logger = logging.getLogger(__name__)


class HasDate(Protocol):
    date: date


DayT = TypeVar("DayT", bound=HasDate)


def as_calendar_date(value: date | datetime) -> date:
    """Truncate a timestamp to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def enumerate_dates(start: date | datetime, end: date | datetime) -> list[date]:
    """Every calendar date from ``start`` to ``end`` inclusive.

    Returns an empty list when ``start`` is after ``end``.
    """
    current = as_calendar_date(start)
    last = as_calendar_date(end)
    dates: list[date] = []
    while current <= last:
        dates.append(current)
        current += timedelta(days=1)
    return dates


@dataclass
class ReconciliationPlan(Generic[DayT]):
    """Outcome of matching an existing day set against a new date range."""

    keep: list[tuple[DayT, int]] = field(default_factory=list)  # (day, new index)
    create: list[tuple[date, int]] = field(default_factory=list)  # (date, index)
    delete: list[DayT] = field(default_factory=list)


def plan_reconciliation(
    existing_days: Iterable[DayT], start: date | datetime, end: date | datetime
) -> ReconciliationPlan[DayT]:
    """Compute which days to keep, create and delete for ``[start, end]``.

    Args:
        existing_days: The trip's current days.
        start: New first date (inclusive); time components are ignored.
        end: New last date (inclusive); time components are ignored.

    Returns:
        ReconciliationPlan. If ``start > end`` every existing day is deleted
        and nothing is created; callers validate ordering upstream.
    """
    by_date: dict[date, DayT] = {}
    duplicates: list[DayT] = []
    for day in existing_days:
        key = as_calendar_date(day.date)
        if key in by_date:
            duplicates.append(day)
        else:
            by_date[key] = day

    plan: ReconciliationPlan[DayT] = ReconciliationPlan()
    wanted = enumerate_dates(start, end)
    for index, current in enumerate(wanted):
        existing = by_date.pop(current, None)
        if existing is not None:
            plan.keep.append((existing, index))
        else:
            plan.create.append((current, index))

    # Whatever was not matched lies outside the new window
    plan.delete.extend(by_date.values())
    plan.delete.extend(duplicates)
    return plan


def apply_reconciliation(
    session: Session, trip: Trip, plan: ReconciliationPlan[Day]
) -> list[Day]:
    """Apply a plan to ``trip`` inside the current transaction.

    Deletions are flushed before creations so a unique ``(trip_id, date)``
    constraint never sees two rows for one date.

    Returns:
        The trip's resulting days ordered by date.
    """
    for day in plan.delete:
        # Explicit child deletion; does not rely on the FK cascade alone.
        for activity in list(day.activities):
            session.delete(activity)
        trip.days.remove(day)
        session.delete(day)
    session.flush()

    for day, index in plan.keep:
        day.index = index

    for day_date, index in plan.create:
        trip.days.append(Day(date=day_date, index=index))
    session.flush()

    trip.days.sort(key=lambda d: d.date)
    logger.info(
        "days_reconciled",
        extra={
            "trip_id": str(trip.trip_id),
            "kept": len(plan.keep),
            "created": len(plan.create),
            "deleted": len(plan.delete),
        },
    )
    return list(trip.days)


def build_days(start: date | datetime, end: date | datetime) -> list[Day]:
    """Fresh Day rows for a new trip's range."""
    return [Day(date=d, index=i) for i, d in enumerate(enumerate_dates(start, end))]


def find_day_for_date(days: Sequence[DayT], target: date | datetime) -> DayT | None:
    """The first day whose calendar date equals ``target``."""
    wanted = as_calendar_date(target)
    for day in days:
        if as_calendar_date(day.date) == wanted:
            return day
    return None
