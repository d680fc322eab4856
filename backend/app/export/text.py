"""Plain-text itinerary export.

The layout is what the text importer reads back: a ``## DAY N`` heading per
day and ``  i. [HH:MM] Title (type)`` activity lines followed by indented
``Location:``/``Maps:``/``Note:``/``Cost:`` lines.
"""

from __future__ import annotations

import datetime as dt

from backend.app.export.common import (
    BRAND,
    NO_ACTIVITIES_TEXT,
    budget_label,
    cost_label,
    date_range_label,
    day_number,
    days_with_activities,
    format_long_date,
    format_time,
    maps_search_url,
)
from backend.app.models.itinerary import TripV1

BANNER = "=" * 60
RULE = "─" * 60
DAY_RULE = "─" * 40
UNTIMED = "??:??"
DETAIL_INDENT = " " * 5


def export_text(trip: TripV1, generated_on: dt.date | None = None) -> str:
    generated_on = generated_on or dt.date.today()
    out = [BANNER, trip.title.upper(), BANNER, ""]
    out.append(f"Destination: {trip.destination or ''}")
    out.append(f"Dates: {date_range_label(trip)}")
    budget = budget_label(trip)
    if budget:
        out.append(f"Budget: {budget}")
    out += ["", RULE, ""]

    days = days_with_activities(trip)
    if not days:
        out.append(NO_ACTIVITIES_TEXT)

    for day in days:
        out += ["", f"## DAY {day_number(day)} - {format_long_date(day.date)}", DAY_RULE, ""]
        for i, activity in enumerate(day.activities, start=1):
            time_str = format_time(activity.start_time, placeholder=UNTIMED)
            out.append(f"  {i}. [{time_str}] {activity.title} ({activity.type})")
            if activity.location:
                out.append(f"{DETAIL_INDENT}Location: {activity.location}")
                out.append(f"{DETAIL_INDENT}Maps: {maps_search_url(activity.location)}")
            if activity.description:
                out.append(f"{DETAIL_INDENT}Note: {activity.description}")
            cost = cost_label(activity, trip)
            if cost:
                out.append(f"{DETAIL_INDENT}Cost: {cost}")
            out.append("")

    out += ["", BANNER, f"Generated by {BRAND} - {generated_on.isoformat()}", ""]
    return "\n".join(out)
