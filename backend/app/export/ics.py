"""iCalendar (ICS) export: one event per activity.

Activity times are naive local wall-clock values and are written as floating
times. Timed activities last one hour; untimed ones are placed 09:00-10:00 on
their day.
"""

from __future__ import annotations

import datetime as dt
from uuid import uuid4

from icalendar import Calendar, Event

from backend.app.export.common import BRAND, cost_label, days_with_activities
from backend.app.models.itinerary import ActivityV1, DayV1, TripV1

DEFAULT_DURATION = dt.timedelta(hours=1)
UNTIMED_START = dt.time(9, 0)


def event_window(activity: ActivityV1, day: DayV1) -> tuple[dt.datetime, dt.datetime]:
    """Start and end of the calendar event for an activity."""
    if activity.start_time is not None:
        return activity.start_time, activity.start_time + DEFAULT_DURATION
    start = dt.datetime.combine(day.date, UNTIMED_START)
    return start, start + DEFAULT_DURATION


def _event(activity: ActivityV1, day: DayV1, trip: TripV1, stamp: dt.datetime) -> Event:
    start, end = event_window(activity, day)
    description = activity.description or ""
    cost = cost_label(activity, trip)
    if cost:
        description += f"\nCost: {cost}"

    event = Event()
    event.add("uid", f"{activity.activity_id or uuid4()}@travel-planner")
    event.add("dtstamp", stamp)
    event.add("dtstart", start)
    event.add("dtend", end)
    event.add("summary", activity.title)
    event.add("description", description)
    event.add("location", activity.location or trip.destination or "")
    event.add("categories", [activity.type.upper()])
    event.add("status", "CONFIRMED")
    return event


def export_ics(trip: TripV1, now: dt.datetime | None = None) -> bytes:
    """Render a trip as an iCalendar document."""
    stamp = now or dt.datetime.now(dt.UTC)
    cal = Calendar()
    cal.add("prodid", f"-//{BRAND}//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", trip.title)

    for day in days_with_activities(trip):
        for activity in day.activities:
            cal.add_component(_event(activity, day, trip, stamp))

    return cal.to_ical()
