"""Tests for itinerary exporters and deep links."""

import datetime as dt
import json
from io import BytesIO
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import fitz
import pytest
from icalendar import Calendar
from openpyxl import load_workbook

from backend.app.export import (
    download_filename,
    export_ics,
    export_json,
    export_markdown,
    export_pdf,
    export_text,
    export_xlsx,
    google_calendar_url,
    maps_route_url,
)
from backend.app.export.common import encode_uri_component, sort_activities
from backend.app.export.ics import event_window
from backend.app.export.json_export import trip_to_dict
from backend.app.export.spreadsheet import itinerary_rows
from backend.app.models.itinerary import ActivityV1, DayV1, TripV1

GENERATED_ON = dt.date(2024, 2, 1)


@pytest.fixture
def trip() -> TripV1:
    day1 = DayV1(
        date=dt.date(2024, 3, 1),
        index=0,
        note="Arrival day",
        activities=[
            ActivityV1(
                activity_id=uuid4(),
                title="Tram 28",
                type="travel",
                location="Praça Martim Moniz",
                start_time=dt.datetime(2024, 3, 1, 14, 0),
            ),
            ActivityV1(
                activity_id=uuid4(),
                title="Breakfast",
                type="food",
                location="Café A Brasileira",
                description="Pastéis de nata",
                start_time=dt.datetime(2024, 3, 1, 9, 0),
                cost=12.5,
            ),
            ActivityV1(activity_id=uuid4(), title="Wander", type="activity"),
        ],
    )
    day2 = DayV1(date=dt.date(2024, 3, 2), index=1, activities=[])
    day3 = DayV1(
        date=dt.date(2024, 3, 3),
        index=2,
        activities=[
            ActivityV1(
                activity_id=uuid4(),
                title="Belém Tower",
                type="activity",
                location="Torre de Belém",
                start_time=dt.datetime(2024, 3, 3, 10, 30),
                cost=10,
                currency="USD",
            )
        ],
    )
    return TripV1(
        trip_id=uuid4(),
        title="Summer in Lisbon",
        destination="Lisbon",
        start_date=dt.date(2024, 3, 1),
        end_date=dt.date(2024, 3, 3),
        budget=1000,
        currency="EUR",
        days=[day3, day1, day2],
    )


@pytest.fixture
def empty_trip() -> TripV1:
    return TripV1(
        title="Empty",
        destination="Nowhere",
        start_date=dt.date(2024, 3, 1),
        end_date=dt.date(2024, 3, 2),
        days=[DayV1(date=dt.date(2024, 3, 1), index=0), DayV1(date=dt.date(2024, 3, 2), index=1)],
    )


class TestCommon:
    def test_sort_activities_puts_untimed_last(self, trip):
        day1 = next(d for d in trip.days if d.index == 0)
        assert [a.title for a in sort_activities(day1.activities)] == [
            "Breakfast",
            "Tram 28",
            "Wander",
        ]

    def test_encode_uri_component_matches_javascript(self):
        assert encode_uri_component("Café & Bar (old)!") == "Caf%C3%A9%20%26%20Bar%20(old)!"

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("pdf", "Summer_in_Lisbon_itinerary.pdf"),
            ("text", "Summer_in_Lisbon_itinerary.txt"),
            ("markdown", "Summer_in_Lisbon_itinerary.md"),
            ("json", "Summer_in_Lisbon_trip.json"),
            ("xlsx", "Summer_in_Lisbon.xlsx"),
            ("ics", "Summer_in_Lisbon.ics"),
        ],
    )
    def test_download_filename(self, fmt, expected):
        assert download_filename("Summer  in Lisbon", fmt) == expected


class TestJsonExport:
    def test_only_days_with_activities_are_written(self, trip):
        data = trip_to_dict(trip)

        assert data["title"] == "Summer in Lisbon"
        assert data["startDate"] == "2024-03-01"
        assert [d["date"] for d in data["days"]] == ["2024-03-01", "2024-03-03"]
        assert data["days"][0]["note"] == "Arrival day"
        assert [a["title"] for a in data["days"][0]["activities"]] == [
            "Breakfast",
            "Tram 28",
            "Wander",
        ]
        assert data["days"][0]["activities"][0]["startTime"] == "2024-03-01T09:00:00"

    def test_output_is_valid_utf8_json(self, trip):
        text = export_json(trip)
        assert "Pastéis de nata" in text
        assert json.loads(text)["currency"] == "EUR"


class TestMarkdownExport:
    def test_layout(self, trip):
        md = export_markdown(trip, generated_on=GENERATED_ON)

        assert md.startswith("# Summer in Lisbon\n")
        assert "> **Destination:** Lisbon" in md
        assert "> **Dates:** 2024-03-01 - 2024-03-03" in md
        assert "> **Budget:** 1000 EUR" in md
        assert "## Day 1 - Friday, 1 March 2024" in md
        assert "## Day 3 - Sunday, 3 March 2024" in md
        assert "## Day 2" not in md
        assert "### 1. Breakfast" in md
        assert "- **Time:** 09:00" in md
        assert "- **Cost:** 12.5 EUR" in md
        assert "- **Cost:** 10 USD" in md
        assert (
            "- **Location:** [Torre de Belém]"
            "(https://www.google.com/maps/search/?api=1&query=Torre%20de%20Bel%C3%A9m)"
        ) in md
        assert md.rstrip().endswith("*Generated by Travel Planner - 2024-02-01*")

    def test_untimed_activity_has_no_time_line(self, trip):
        md = export_markdown(trip, generated_on=GENERATED_ON)
        wander = md.split("### 3. Wander", 1)[1].split("###", 1)[0]
        assert "**Time:**" not in wander

    def test_empty_trip_placeholder(self, empty_trip):
        md = export_markdown(empty_trip, generated_on=GENERATED_ON)
        assert "*No activities planned yet.*" in md
        assert "**Budget:**" not in md


class TestTextExport:
    def test_layout(self, trip):
        text = export_text(trip, generated_on=GENERATED_ON)
        lines = text.splitlines()

        assert lines[:3] == ["=" * 60, "SUMMER IN LISBON", "=" * 60]
        assert "## DAY 1 - Friday, 1 March 2024" in lines
        assert "  1. [09:00] Breakfast (food)" in lines
        assert "  3. [??:??] Wander (activity)" in lines
        assert "     Location: Café A Brasileira" in lines
        assert "     Note: Pastéis de nata" in lines
        assert "     Cost: 12.5 EUR" in lines
        assert "Generated by Travel Planner - 2024-02-01" in lines

    def test_empty_trip_placeholder(self, empty_trip):
        assert "No activities planned yet." in export_text(empty_trip, generated_on=GENERATED_ON)


class TestSpreadsheetExport:
    def test_rows(self, trip):
        rows = itinerary_rows(trip)

        assert len(rows) == 4
        assert rows[0][:5] == ["2024-03-01", "Day 1", "09:00", "food", "Breakfast"]
        assert rows[2][2] == ""
        assert rows[3][0] == "2024-03-03"
        assert rows[3][8] == "10 USD"

    def test_workbook(self, trip):
        wb = load_workbook(BytesIO(export_xlsx(trip)))
        ws = wb["Itinerary"]

        header = [c.value for c in ws[1]]
        assert header == [
            "Date",
            "Day",
            "Time",
            "Type",
            "Activity",
            "Description",
            "Location",
            "Maps Link",
            "Cost",
        ]
        assert ws[1][0].font.bold
        assert ws.max_row == 5
        assert ws.column_dimensions["H"].width == 50


class TestIcsExport:
    def test_one_event_per_activity(self, trip):
        cal = Calendar.from_ical(export_ics(trip, now=dt.datetime(2024, 2, 1, tzinfo=dt.UTC)))
        events = cal.walk("VEVENT")

        assert str(cal["X-WR-CALNAME"]) == "Summer in Lisbon"
        assert len(events) == 4
        by_title = {str(e["SUMMARY"]): e for e in events}
        breakfast = by_title["Breakfast"]
        assert breakfast.decoded("DTSTART") == dt.datetime(2024, 3, 1, 9, 0)
        assert breakfast.decoded("DTEND") == dt.datetime(2024, 3, 1, 10, 0)
        assert "Cost: 12.5 EUR" in str(breakfast["DESCRIPTION"])
        assert str(breakfast["UID"]).endswith("@travel-planner")

    def test_untimed_event_window(self, trip):
        day1 = next(d for d in trip.days if d.index == 0)
        wander = next(a for a in day1.activities if a.title == "Wander")
        assert event_window(wander, day1) == (
            dt.datetime(2024, 3, 1, 9, 0),
            dt.datetime(2024, 3, 1, 10, 0),
        )

    def test_event_location_defaults_to_destination(self, trip):
        cal = Calendar.from_ical(export_ics(trip))
        wander = next(e for e in cal.walk("VEVENT") if str(e["SUMMARY"]) == "Wander")
        assert str(wander["LOCATION"]) == "Lisbon"


    def test_text_values_are_escaped(self):
        day = DayV1(
            date=dt.date(2024, 3, 1),
            index=0,
            activities=[
                ActivityV1(
                    title="a;b,c\\d",
                    description="l1\nl2",
                    location="Rua Augusta, 24; Lisboa",
                    start_time=dt.datetime(2024, 3, 1, 9, 0),
                )
            ],
        )
        escaped_trip = TripV1(
            title="Escapes",
            start_date=dt.date(2024, 3, 1),
            end_date=dt.date(2024, 3, 1),
            days=[day],
        )

        raw = export_ics(escaped_trip, now=dt.datetime(2024, 2, 1, tzinfo=dt.UTC)).decode()
        lines = raw.split("\r\n")

        assert "SUMMARY:a\\;b\\,c\\\\d" in lines
        assert "DESCRIPTION:l1\\nl2" in lines
        assert "LOCATION:Rua Augusta\\, 24\\; Lisboa" in lines
        event = Calendar.from_ical(raw).walk("VEVENT")[0]
        assert str(event["SUMMARY"]) == "a;b,c\\d"
        assert str(event["DESCRIPTION"]) == "l1\nl2"


class TestPdfExport:
    def test_renders_text_layer(self, trip):
        data = export_pdf(trip)

        assert data.startswith(b"%PDF")
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = "\n".join(page.get_text() for page in doc)
        assert "Summer in Lisbon" in text
        assert "Day 1 - Friday, 1 March" in text
        assert "Breakfast" in text
        assert "Torre de Belém (View on Maps)" in text
        assert "Travel Planner" in text
        assert "Page 1/1" in text
        assert "{nb}" not in text

    def test_empty_trip(self, empty_trip):
        with fitz.open(stream=export_pdf(empty_trip, brand="Acme Trips"), filetype="pdf") as doc:
            text = doc[0].get_text()
        assert "No activities planned yet." in text
        assert "Acme Trips" in text

    def test_long_itinerary_breaks_pages_with_page_totals(self):
        start = dt.date(2024, 3, 1)
        days = [
            DayV1(
                date=start + dt.timedelta(days=offset),
                index=offset,
                activities=[
                    ActivityV1(
                        title=f"Stop {offset}-{n}",
                        location="Lisbon",
                        start_time=dt.datetime.combine(
                            start + dt.timedelta(days=offset), dt.time(9 + n, 0)
                        ),
                        cost=10,
                    )
                    for n in range(3)
                ],
            )
            for offset in range(8)
        ]
        long_trip = TripV1(
            title="Long Lisbon",
            destination="Lisbon",
            start_date=start,
            end_date=start + dt.timedelta(days=7),
            days=days,
        )

        with fitz.open(stream=export_pdf(long_trip), filetype="pdf") as doc:
            pages = [page.get_text() for page in doc]

        assert len(pages) > 1
        for number, text in enumerate(pages, start=1):
            assert f"Page {number}/{len(pages)}" in text
        joined = "\n".join(pages)
        assert all(f"Stop {offset}-{n}" in joined for offset in range(8) for n in range(3))

    def test_long_description_continues_on_next_page(self):
        notes = "\n".join(f"Note {n:03d}" for n in range(90))
        day = DayV1(
            date=dt.date(2024, 3, 1),
            index=0,
            activities=[ActivityV1(title="Walking tour", description=notes)],
        )
        one_day = TripV1(
            title="Notes",
            start_date=dt.date(2024, 3, 1),
            end_date=dt.date(2024, 3, 1),
            days=[day],
        )

        with fitz.open(stream=export_pdf(one_day), filetype="pdf") as doc:
            page_count = doc.page_count
            joined = "\n".join(page.get_text() for page in doc)

        assert page_count >= 2
        assert all(f"Note {n:03d}" in joined for n in range(90))

    def test_undecodable_cover_image_falls_back_to_band(self, trip):
        trip.cover_image = "data:image/png;base64,bm90IGFuIGltYWdl"
        assert export_pdf(trip).startswith(b"%PDF")


class TestLinks:
    def test_maps_route_in_day_and_time_order(self, trip):
        result = maps_route_url(trip)

        assert result.notice is None
        assert result.url == (
            "https://www.google.com/maps/dir/"
            "Caf%C3%A9%20A%20Brasileira/"
            "Pra%C3%A7a%20Martim%20Moniz/"
            "Torre%20de%20Bel%C3%A9m"
        )

    def test_maps_route_without_locations(self, empty_trip):
        result = maps_route_url(empty_trip)
        assert result.url is None
        assert result.notice == "No locations found in activities!"

    def test_google_calendar_url(self, trip):
        result = google_calendar_url(trip)
        query = parse_qs(urlparse(result.url).query)

        assert query["action"] == ["TEMPLATE"]
        assert query["text"] == ["Summer in Lisbon"]
        assert query["dates"] == ["20240301/20240304"]
        assert query["details"] == ["Trip to Lisbon\n\nBudget: 1000 EUR"]
        assert query["location"] == ["Lisbon"]

    def test_google_calendar_without_budget(self, empty_trip):
        query = parse_qs(urlparse(google_calendar_url(empty_trip).url).query)
        assert query["details"] == ["Trip to Nowhere\n\nBudget: Not set EUR"]
