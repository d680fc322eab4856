"""Activity day-assignment rule.

An activity whose start time falls on a different calendar date than the day
it is being attached to is redirected to the trip's day for that date. If the
trip has no such day the requested day is used unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from backend.app.planning.days import DayT, as_calendar_date, find_day_for_date

logger = logging.getLogger(__name__)


def resolve_day_for_start_time(
    target_day: DayT, trip_days: Sequence[DayT], start_time: datetime | None
) -> DayT:
    """Pick the day an activity should live on.

    Args:
        target_day: Day the caller asked for.
        trip_days: Every day of the owning trip.
        start_time: The activity's start time, if any.

    Returns:
        ``target_day`` when there is no start time, when the dates already
        agree, or when no day of the trip matches; otherwise the matching day.
    """
    if start_time is None:
        return target_day

    activity_date = as_calendar_date(start_time)
    if as_calendar_date(target_day.date) == activity_date:
        return target_day

    match = find_day_for_date(trip_days, activity_date)
    if match is None:
        logger.debug(
            "no day matches activity start time, keeping requested day",
            extra={"activity_date": activity_date.isoformat()},
        )
        return target_day
    return match
