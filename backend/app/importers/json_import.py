"""JSON importer.

Accepted shapes:

* the JSON export: trip fields plus ``days[].activities[]``;
* trip fields plus a flat ``activities[]`` list;
* a bare array of activities.

Both camelCase and snake_case keys are read.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from backend.app.importers.base import (
    ImportParseError,
    PartialActivity,
    PartialTrip,
    clean_str,
    decode_text,
    parse_amount,
    parse_clock,
    parse_date,
)

logger = logging.getLogger(__name__)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) not in (None, ""):
            return data[key]
    return None


def activity_from_mapping(
    data: dict[str, Any],
    day_date: Any = None,
    day_index: int | None = None,
) -> PartialActivity | None:
    """Build a PartialActivity from a loosely keyed mapping; None without a title."""
    title = clean_str(_pick(data, "title", "Title", "activity", "Activity", "name"))
    if not title:
        return None
    start_time, time_of_day = parse_clock(_pick(data, "startTime", "start_time", "time", "Time"))
    end_time, _ = parse_clock(_pick(data, "endTime", "end_time"))
    cost, cost_currency = parse_amount(_pick(data, "cost", "Cost"))
    return PartialActivity(
        title=title,
        type=clean_str(_pick(data, "type", "Type")),
        description=clean_str(_pick(data, "description", "Description", "details", "Details")),
        location=clean_str(_pick(data, "location", "Location")),
        start_time=start_time,
        end_time=end_time,
        time_of_day=time_of_day,
        cost=cost,
        currency=clean_str(_pick(data, "currency", "Currency")) or cost_currency,
        day_date=parse_date(day_date),
        day_index=day_index,
    )


class JsonImportParser:
    extensions = (".json",)

    def parse(self, raw: bytes, *, filename: str | None = None) -> PartialTrip:
        try:
            data = json.loads(decode_text(raw))
        except json.JSONDecodeError as e:
            raise ImportParseError(f"Invalid JSON: {e.msg}") from e

        activities: list[PartialActivity] = []
        skipped = 0

        def collect(items: Any, day_date: Any = None, day_index: int | None = None) -> None:
            nonlocal skipped
            if not isinstance(items, list):
                return
            for item in items:
                activity = activity_from_mapping(item, day_date, day_index) if isinstance(item, dict) else None
                if activity is None:
                    skipped += 1
                else:
                    activities.append(activity)

        if isinstance(data, list):
            collect(data)
            return PartialTrip(activities=activities, skipped_rows=skipped)

        if not isinstance(data, dict):
            raise ImportParseError("JSON document must be an object or an array")

        days = data.get("days")
        if isinstance(days, list):
            for position, day in enumerate(days):
                if not isinstance(day, dict):
                    continue
                index = _pick(day, "dayIndex", "day_index", "index")
                collect(
                    day.get("activities"),
                    day_date=day.get("date"),
                    day_index=int(index) if isinstance(index, int) else position,
                )
        else:
            collect(data.get("activities"))

        budget, budget_currency = parse_amount(data.get("budget"))
        trip = PartialTrip(
            title=clean_str(data.get("title")),
            destination=clean_str(data.get("destination")),
            start_date=parse_date(_pick(data, "startDate", "start_date")),
            end_date=parse_date(_pick(data, "endDate", "end_date")),
            budget=budget,
            currency=clean_str(data.get("currency")) or budget_currency,
            activities=activities,
            skipped_rows=skipped,
        )
        logger.debug("json_parsed", extra={"activities": len(activities), "skipped": skipped})
        return trip
