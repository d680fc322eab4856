"""Shared preprocessing and formatting helpers for itinerary exports."""

from __future__ import annotations

import datetime as dt
import re
from urllib.parse import quote

from backend.app.models.common import format_amount
from backend.app.models.itinerary import ActivityV1, DayV1, TripV1

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="
NO_ACTIVITIES_TEXT = "No activities planned yet."
BRAND = "Travel Planner"

# Characters JavaScript's encodeURIComponent leaves unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def maps_search_url(location: str) -> str:
    """Google Maps search link for a free-text location."""
    return MAPS_SEARCH_URL + encode_uri_component(location)


def sort_activities(activities: list[ActivityV1]) -> list[ActivityV1]:
    """Order by start time; untimed activities last.

    The sort is stable, so equal times and untimed activities keep their
    original order.
    """
    timed = [a for a in activities if a.start_time is not None]
    untimed = [a for a in activities if a.start_time is None]
    return sorted(timed, key=lambda a: a.start_time) + untimed


def days_with_activities(trip: TripV1) -> list[DayV1]:
    """Days that have at least one activity, each with sorted activities."""
    return [
        day.model_copy(update={"activities": sort_activities(day.activities)})
        for day in sorted(trip.days, key=lambda d: d.date)
        if day.activities
    ]


def route_activities(trip: TripV1) -> list[ActivityV1]:
    """Every activity across the trip in day order, time-sorted within each day."""
    return [activity for day in days_with_activities(trip) for activity in day.activities]


def activity_currency(activity: ActivityV1, trip: TripV1) -> str:
    return activity.currency or trip.currency or "EUR"


def cost_label(activity: ActivityV1, trip: TripV1) -> str | None:
    """``"<cost> <currency>"`` or None for activities without a cost."""
    if not activity.cost:
        return None
    return f"{format_amount(activity.cost)} {activity_currency(activity, trip)}"


def budget_label(trip: TripV1) -> str | None:
    if not trip.budget:
        return None
    return f"{format_amount(trip.budget)} {trip.currency or 'EUR'}"


def format_time(value: dt.datetime | None, placeholder: str = "") -> str:
    """``HH:MM`` of a timestamp, or ``placeholder`` when untimed."""
    if value is None:
        return placeholder
    return value.strftime("%H:%M")


def format_long_date(value: dt.date) -> str:
    """``Friday, 1 March 2024``."""
    return f"{value.strftime('%A')}, {value.day} {value.strftime('%B %Y')}"


def format_short_date(value: dt.date) -> str:
    """``Friday, 1 March``."""
    return f"{value.strftime('%A')}, {value.day} {value.strftime('%B')}"


def date_range_label(trip: TripV1) -> str:
    return f"{trip.start_date.isoformat()} - {trip.end_date.isoformat()}"


def day_number(day: DayV1) -> int:
    """1-based day number shown to readers."""
    return day.index + 1


def file_stem(title: str) -> str:
    """Title with whitespace runs replaced by underscores."""
    return re.sub(r"\s+", "_", title.strip()) or "trip"


DOWNLOAD_NAME_TEMPLATES = {
    "pdf": "{stem}_itinerary.pdf",
    "text": "{stem}_itinerary.txt",
    "markdown": "{stem}_itinerary.md",
    "json": "{stem}_trip.json",
    "xlsx": "{stem}.xlsx",
    "ics": "{stem}.ics",
}


def download_filename(title: str, fmt: str) -> str:
    """File name offered to clients for an export format."""
    return DOWNLOAD_NAME_TEMPLATES[fmt].format(stem=file_stem(title))
