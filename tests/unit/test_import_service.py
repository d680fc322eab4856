"""Tests for applying parsed import files to the database."""

import datetime as dt
import json
from uuid import uuid4

import pytest

from backend.app.db import trips as store
from backend.app.importers import ImportParseError, UnsupportedFormatError, import_activities, import_trip
from backend.app.importers.base import PartialActivity
from backend.app.importers.service import choose_day, resolve_trip_dates

TODAY = dt.date(2024, 6, 1)


def json_file(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


class TestResolveTripDates:
    def test_both_present(self):
        assert resolve_trip_dates(dt.date(2024, 3, 1), dt.date(2024, 3, 3), TODAY) == (
            dt.date(2024, 3, 1),
            dt.date(2024, 3, 3),
        )

    def test_missing_start_defaults_to_today(self):
        assert resolve_trip_dates(None, dt.date(2024, 6, 5), TODAY) == (TODAY, dt.date(2024, 6, 5))

    def test_missing_start_with_past_end_uses_end(self):
        assert resolve_trip_dates(None, dt.date(2024, 5, 1), TODAY) == (
            dt.date(2024, 5, 1),
            dt.date(2024, 5, 1),
        )

    def test_missing_end_is_a_week_after_start(self):
        assert resolve_trip_dates(dt.date(2024, 3, 1), None, TODAY) == (
            dt.date(2024, 3, 1),
            dt.date(2024, 3, 8),
        )


def test_choose_day_prefers_date_then_index(test_session, sample_trip):
    days = sorted(sample_trip.days, key=lambda d: d.date)

    assert choose_day(days, PartialActivity(title="a", day_date=dt.date(2024, 3, 3), day_index=0)) is days[2]
    assert choose_day(days, PartialActivity(title="b", day_index=1)) is days[1]
    assert choose_day(days, PartialActivity(title="c", day_index=9)) is days[0]
    assert choose_day([], PartialActivity(title="d")) is None


class TestImportTrip:
    def test_creates_trip_days_and_activities(self, test_session):
        raw = json_file(
            {
                "title": "Rome Getaway",
                "destination": "Rome",
                "startDate": "2024-05-10",
                "endDate": "2024-05-12",
                "budget": 800,
                "currency": "eur",
                "days": [
                    {"date": "2024-05-10", "activities": [{"title": "Colosseum", "startTime": "09:30"}]},
                    {
                        "date": "2024-05-12",
                        "activities": [{"title": "Vatican", "cost": 25, "currency": "EUR"}],
                    },
                ],
            }
        )

        summary = import_trip(test_session, raw, "rome.json", today=TODAY)
        test_session.commit()

        assert summary.activities_imported == 2
        assert summary.missing_fields == []
        trip = store.get_trip(test_session, summary.trip_id)
        assert trip.title == "Rome Getaway"
        assert trip.currency == "EUR"
        assert len(trip.days) == 3
        first, _, last = sorted(trip.days, key=lambda d: d.date)
        assert [a.title for a in first.activities] == ["Colosseum"]
        assert first.activities[0].start_time == dt.datetime(2024, 5, 10, 9, 30)
        assert [a.title for a in last.activities] == ["Vatican"]

    def test_missing_fields_get_defaults(self, test_session):
        summary = import_trip(
            test_session, json_file({"title": "Somewhere"}), "t.json", default_currency="USD", today=TODAY
        )

        trip = store.get_trip(test_session, summary.trip_id)
        assert trip.destination == "Unknown"
        assert trip.start_date == TODAY
        assert trip.end_date == dt.date(2024, 6, 8)
        assert trip.currency == "USD"
        assert trip.budget is None
        assert summary.missing_fields == ["destination", "start_date", "end_date", "budget", "currency"]

    def test_start_time_on_other_date_is_reassigned(self, test_session):
        raw = json_file(
            {
                "title": "Trip",
                "startDate": "2024-05-10",
                "endDate": "2024-05-11",
                "activities": [{"title": "Late train", "startTime": "2024-05-11T21:00:00"}],
            }
        )

        summary = import_trip(test_session, raw, "t.json", today=TODAY)

        trip = store.get_trip(test_session, summary.trip_id)
        second = sorted(trip.days, key=lambda d: d.date)[1]
        assert [a.title for a in second.activities] == ["Late train"]

    def test_zero_cost_is_dropped(self, test_session):
        raw = json_file({"title": "Trip", "startDate": "2024-05-10", "activities": [{"title": "Park", "cost": 0}]})

        summary = import_trip(test_session, raw, "t.json", today=TODAY)

        activity = store.get_trip(test_session, summary.trip_id).days[0].activities[0]
        assert activity.cost is None

    def test_no_title_is_rejected(self, test_session):
        with pytest.raises(ImportParseError, match="Could not parse trip data"):
            import_trip(test_session, json_file([{"title": "Walk"}]), "a.json", today=TODAY)

    def test_unsupported_extension(self, test_session):
        with pytest.raises(UnsupportedFormatError):
            import_trip(test_session, b"x", "trip.docx", today=TODAY)


class TestImportActivities:
    def test_adds_to_first_day_by_default(self, test_session, sample_trip):
        raw = b"title,location\nTram,Martim Moniz\nMuseum,MAAT\n"

        summary = import_activities(test_session, sample_trip.trip_id, raw, "list.csv")
        test_session.commit()

        assert summary.activities_imported == 2
        first = sorted(sample_trip.days, key=lambda d: d.date)[0]
        assert [a.title for a in first.activities] == ["Tram", "Museum"]

    def test_adds_to_requested_day(self, test_session, sample_trip):
        target = sorted(sample_trip.days, key=lambda d: d.date)[1]

        import_activities(
            test_session, sample_trip.trip_id, json_file([{"title": "Fado"}]), "a.json", day_id=target.day_id
        )

        assert [a.title for a in target.activities] == ["Fado"]

    def test_day_of_other_trip_is_not_found(self, test_session, sample_trip):
        with pytest.raises(store.NotFoundError):
            import_activities(test_session, sample_trip.trip_id, b"[]", "a.json", day_id=uuid4())

    def test_unknown_trip(self, test_session):
        with pytest.raises(store.NotFoundError, match="Trip not found"):
            import_activities(test_session, uuid4(), b"[]", "a.json")
