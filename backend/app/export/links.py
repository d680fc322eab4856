"""Deep links into Google Maps and Google Calendar."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel

from backend.app.export.common import encode_uri_component, route_activities
from backend.app.models.common import format_amount
from backend.app.models.itinerary import TripV1

MAPS_DIR_URL = "https://www.google.com/maps/dir/"
GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render?action=TEMPLATE"
NO_LOCATIONS_NOTICE = "No locations found in activities!"


class LinkResult(BaseModel):
    """A generated link, or a notice when none can be built."""

    url: str | None = None
    notice: str | None = None


def route_locations(trip: TripV1) -> list[str]:
    """Activity locations across all days in time-sorted order."""
    return [a.location for a in route_activities(trip) if a.location]


def maps_route_url(trip: TripV1) -> LinkResult:
    """Directions URL: first location is the origin, last the destination."""
    waypoints = route_locations(trip)
    if not waypoints:
        return LinkResult(notice=NO_LOCATIONS_NOTICE)

    segments = [encode_uri_component(w) for w in waypoints]
    return LinkResult(url=MAPS_DIR_URL + "/".join(segments))


def _compact(value: dt.date) -> str:
    return value.strftime("%Y%m%d")


def google_calendar_url(trip: TripV1) -> LinkResult:
    """All-day event template covering the trip (end date is exclusive)."""
    budget = format_amount(trip.budget) if trip.budget else "Not set"
    details = f"Trip to {trip.destination or ''}\n\nBudget: {budget} {trip.currency or 'EUR'}"
    dates = f"{_compact(trip.start_date)}/{_compact(trip.end_date + dt.timedelta(days=1))}"
    url = (
        f"{GOOGLE_CALENDAR_URL}"
        f"&text={encode_uri_component(trip.title)}"
        f"&dates={dates}"
        f"&details={encode_uri_component(details)}"
        f"&location={encode_uri_component(trip.destination or '')}"
    )
    return LinkResult(url=url)
