"""Integration tests for the activities API."""

from uuid import uuid4

import pytest


@pytest.fixture
def trip(client):
    response = client.post(
        "/trips",
        json={
            "title": "Kyoto",
            "destination": "Kyoto",
            "start_date": "2024-04-01",
            "end_date": "2024-04-03",
            "currency": "JPY",
        },
    )
    return response.json()


def day_activities(client, trip_id):
    days = client.get(f"/trips/{trip_id}").json()["days"]
    return {d["date"]: [a["title"] for a in d["activities"]] for d in days}


class TestActivitiesAPI:
    def test_create_activity(self, client, trip):
        day = trip["days"][0]

        response = client.post(
            "/activities",
            json={
                "day_id": day["day_id"],
                "title": "Fushimi Inari",
                "type": "activity",
                "location": "Fushimi Inari Taisha",
                "start_time": "2024-04-01T08:00:00",
                "cost": 0,
            },
        )

        assert response.status_code == 201
        activity = response.json()
        assert activity["day_id"] == day["day_id"]
        assert activity["currency"] == "JPY"
        assert activity["images"] == []

    def test_start_time_on_other_date_reassigns_day(self, client, trip):
        response = client.post(
            "/activities",
            json={
                "day_id": trip["days"][0]["day_id"],
                "title": "Tea ceremony",
                "start_time": "2024-04-03T15:00:00",
            },
        )

        assert response.json()["day_id"] == trip["days"][2]["day_id"]
        assert day_activities(client, trip["trip_id"])["2024-04-03"] == ["Tea ceremony"]

    def test_missing_title_is_400(self, client, trip):
        response = client.post("/activities", json={"day_id": trip["days"][0]["day_id"]})
        assert response.status_code == 400
        assert response.json()["fields"] == ["title"]

    def test_negative_cost_is_422(self, client, trip):
        response = client.post(
            "/activities",
            json={"day_id": trip["days"][0]["day_id"], "title": "Refund", "cost": -5},
        )
        assert response.status_code == 422

    def test_unknown_day_is_404(self, client):
        response = client.post("/activities", json={"day_id": str(uuid4()), "title": "Lost"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Day not found"

    def test_patch_activity(self, client, trip):
        created = client.post(
            "/activities", json={"day_id": trip["days"][0]["day_id"], "title": "Ramen"}
        ).json()

        response = client.patch(
            f"/activities/{created['activity_id']}",
            json={"type": "food", "cost": 1200, "start_time": "2024-04-02T12:00:00"},
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "Ramen"
        assert updated["type"] == "food"
        assert updated["cost"] == 1200
        assert updated["day_id"] == trip["days"][1]["day_id"]

    def test_move_activity(self, client, trip):
        created = client.post(
            "/activities", json={"day_id": trip["days"][0]["day_id"], "title": "Gion walk"}
        ).json()

        response = client.post(
            f"/activities/{created['activity_id']}/move",
            json={"day_id": trip["days"][1]["day_id"]},
        )

        assert response.status_code == 200
        assert day_activities(client, trip["trip_id"]) == {
            "2024-04-01": [],
            "2024-04-02": ["Gion walk"],
            "2024-04-03": [],
        }

    def test_move_to_unknown_day_is_404(self, client, trip):
        created = client.post(
            "/activities", json={"day_id": trip["days"][0]["day_id"], "title": "Gion walk"}
        ).json()
        response = client.post(
            f"/activities/{created['activity_id']}/move", json={"day_id": str(uuid4())}
        )
        assert response.status_code == 404

    def test_delete_activity(self, client, trip):
        created = client.post(
            "/activities", json={"day_id": trip["days"][0]["day_id"], "title": "Nishiki market"}
        ).json()

        assert client.delete(f"/activities/{created['activity_id']}").status_code == 204
        assert client.delete(f"/activities/{created['activity_id']}").status_code == 404
        assert day_activities(client, trip["trip_id"])["2024-04-01"] == []
