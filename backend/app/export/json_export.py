"""JSON itinerary export, readable back by the JSON importer."""

from __future__ import annotations

import datetime as dt
import json
from typing import Any

from backend.app.export.common import days_with_activities
from backend.app.models.itinerary import ActivityV1, TripV1


def _iso(value: dt.date | dt.datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _activity_payload(activity: ActivityV1) -> dict[str, Any]:
    return {
        "title": activity.title,
        "type": activity.type,
        "description": activity.description,
        "location": activity.location,
        "startTime": _iso(activity.start_time),
        "endTime": _iso(activity.end_time),
        "cost": activity.cost,
        "currency": activity.currency,
    }


def trip_to_dict(trip: TripV1) -> dict[str, Any]:
    """Export payload: trip fields plus every non-empty day."""
    return {
        "title": trip.title,
        "destination": trip.destination,
        "startDate": _iso(trip.start_date),
        "endDate": _iso(trip.end_date),
        "budget": trip.budget,
        "currency": trip.currency,
        "days": [
            {
                "date": _iso(day.date),
                "dayIndex": day.index,
                "note": day.note,
                "activities": [_activity_payload(a) for a in day.activities],
            }
            for day in days_with_activities(trip)
        ],
    }


def export_json(trip: TripV1) -> str:
    return json.dumps(trip_to_dict(trip), indent=2, ensure_ascii=False)
