"""Integration tests for the trips API."""

from uuid import uuid4

import pytest

TRIP_PAYLOAD = {
    "title": "Summer in Lisbon",
    "destination": "Lisbon",
    "start_date": "2024-03-01",
    "end_date": "2024-03-03",
    "budget": 1000,
    "currency": "eur",
}


def create_trip(client, **overrides):
    response = client.post("/trips", json={**TRIP_PAYLOAD, **overrides})
    assert response.status_code == 201
    return response.json()


def add_activity(client, day_id, **fields):
    response = client.post("/activities", json={"day_id": day_id, "title": "Activity", **fields})
    assert response.status_code == 201
    return response.json()


class TestTripsAPI:
    def test_create_trip_generates_days(self, client):
        trip = create_trip(client)

        assert trip["title"] == "Summer in Lisbon"
        assert trip["currency"] == "EUR"
        assert [(d["date"], d["index"]) for d in trip["days"]] == [
            ("2024-03-01", 0),
            ("2024-03-02", 1),
            ("2024-03-03", 2),
        ]

    def test_create_trip_missing_fields_is_400(self, client):
        response = client.post("/trips", json={"destination": "Lisbon"})

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Missing required fields"
        assert set(body["fields"]) == {"title", "start_date", "end_date"}

    def test_blank_title_is_400(self, client):
        response = client.post("/trips", json={**TRIP_PAYLOAD, "title": ""})
        assert response.status_code == 400
        assert response.json()["fields"] == ["title"]

    def test_malformed_date_is_422(self, client):
        response = client.post("/trips", json={**TRIP_PAYLOAD, "start_date": "next week"})
        assert response.status_code == 422

    def test_list_trips(self, client):
        create_trip(client)
        create_trip(client, title="Winter", start_date="2024-01-10", end_date="2024-01-10")

        response = client.get("/trips")

        assert response.status_code == 200
        assert [(t["title"], t["day_count"]) for t in response.json()] == [
            ("Winter", 1),
            ("Summer in Lisbon", 3),
        ]

    def test_get_unknown_trip_is_404(self, client):
        response = client.get(f"/trips/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Trip not found"

    def test_patch_dates_keeps_activities_on_surviving_days(self, client):
        trip = create_trip(client)
        day2 = trip["days"][1]
        add_activity(client, day2["day_id"], title="Museum")
        add_activity(client, trip["days"][2]["day_id"], title="Dropped")

        response = client.patch(
            f"/trips/{trip['trip_id']}",
            json={"start_date": "2024-02-29", "end_date": "2024-03-02"},
        )

        assert response.status_code == 200
        days = response.json()["days"]
        assert [d["date"] for d in days] == ["2024-02-29", "2024-03-01", "2024-03-02"]
        assert days[2]["day_id"] == day2["day_id"]
        assert days[2]["index"] == 2
        assert [a["title"] for a in days[2]["activities"]] == ["Museum"]
        titles = [a["title"] for d in days for a in d["activities"]]
        assert "Dropped" not in titles

    def test_patch_budget_only(self, client):
        trip = create_trip(client)

        response = client.patch(f"/trips/{trip['trip_id']}", json={"budget": 250})

        assert response.json()["budget"] == 250
        assert [d["day_id"] for d in response.json()["days"]] == [d["day_id"] for d in trip["days"]]

    def test_delete_trip(self, client):
        trip = create_trip(client)

        assert client.delete(f"/trips/{trip['trip_id']}").status_code == 204
        assert client.get(f"/trips/{trip['trip_id']}").status_code == 404
        assert client.delete(f"/trips/{trip['trip_id']}").status_code == 404

    def test_day_note(self, client):
        trip = create_trip(client)
        day = trip["days"][0]

        response = client.patch(
            f"/trips/{trip['trip_id']}/days/{day['day_id']}", json={"note": "Check-in at 15:00"}
        )

        assert response.status_code == 200
        assert response.json()["note"] == "Check-in at 15:00"
        fetched = client.get(f"/trips/{trip['trip_id']}").json()
        assert fetched["days"][0]["note"] == "Check-in at 15:00"

    def test_day_note_for_unknown_day_is_404(self, client):
        trip = create_trip(client)
        response = client.patch(f"/trips/{trip['trip_id']}/days/{uuid4()}", json={"note": "x"})
        assert response.status_code == 404


class TestBudgetAPI:
    def test_budget_status_converts_costs(self, client):
        trip = create_trip(client, budget=100)
        day_id = trip["days"][0]["day_id"]
        add_activity(client, day_id, title="Dinner", cost=50)
        add_activity(client, day_id, title="Tour", cost=33, currency="USD")

        response = client.get(f"/trips/{trip['trip_id']}/budget")

        assert response.status_code == 200
        status = response.json()
        assert status["currency"] == "EUR"
        assert status["spent"] == pytest.approx(80.0)
        assert status["status"] == "warning"
        assert status["remaining"] == pytest.approx(20.0)

    def test_budget_not_set(self, client):
        trip = create_trip(client, budget=None)
        status = client.get(f"/trips/{trip['trip_id']}/budget").json()
        assert status["status"] == "not_set"
