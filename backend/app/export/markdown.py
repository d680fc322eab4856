"""Markdown itinerary export."""

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


def export_markdown(trip: TripV1, generated_on: dt.date | None = None) -> str:
    """Render a trip as Markdown.

    Args:
        trip: Trip graph to render.
        generated_on: Date printed in the footer (default: today).
    """
    generated_on = generated_on or dt.date.today()
    lines = [f"# {trip.title}", ""]
    lines.append(f"> **Destination:** {trip.destination or ''}")
    lines.append(f"> **Dates:** {date_range_label(trip)}")
    budget = budget_label(trip)
    if budget:
        lines.append(f"> **Budget:** {budget}")
    lines += ["", "---", ""]

    days = days_with_activities(trip)
    if not days:
        lines.append(f"*{NO_ACTIVITIES_TEXT}*")

    for day in days:
        lines += [f"## Day {day_number(day)} - {format_long_date(day.date)}", ""]
        if day.note:
            lines += [f"_{day.note}_", ""]
        for i, activity in enumerate(day.activities, start=1):
            lines += [f"### {i}. {activity.title}", ""]
            lines.append(f"- **Type:** {activity.type}")
            time_str = format_time(activity.start_time)
            if time_str:
                lines.append(f"- **Time:** {time_str}")
            if activity.location:
                lines.append(
                    f"- **Location:** [{activity.location}]({maps_search_url(activity.location)})"
                )
            cost = cost_label(activity, trip)
            if cost:
                lines.append(f"- **Cost:** {cost}")
            if activity.description:
                lines += ["", activity.description]
            lines.append("")
        lines += ["---", ""]

    lines += ["", f"*Generated by {BRAND} - {generated_on.isoformat()}*", ""]
    return "\n".join(lines)
