"""Tests for the booking HTTP API (in-memory stores behind TestClient)."""

import pytest
from fastapi.testclient import TestClient

from venuebook.api.factory import build_engine, create_app
from venuebook.infra.settings import EngineSettings
from venuebook.observability.correlation import CORRELATION_ID_HEADER

from .helpers import MONDAY, at, make_reservation

MARCH_10 = MONDAY.replace(day=10)


@pytest.fixture
def client(zones, store):
    engine = build_engine(zones, store, EngineSettings(max_instances=10))
    return TestClient(create_app(engine=engine))


def _series_body(**pattern):
    return {
        "base": {
            "id": "weekly-1",
            "zone_id": "B",
            "facility_id": "fac-1",
            "start": "2025-03-03T09:00:00Z",
            "end": "2025-03-03T10:00:00Z",
            "status": "confirmed",
        },
        "pattern": {"type": "weekly", "end_date": "2025-03-24T23:00:00Z", **pattern},
    }


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={CORRELATION_ID_HEADER: "cid-1"})

        assert response.headers[CORRELATION_ID_HEADER] == "cid-1"

    def test_correlation_id_generated(self, client):
        response = client.get("/health")

        assert response.headers[CORRELATION_ID_HEADER]


class TestCheckConflicts:
    def test_conflict_reported_as_200(self, client, store):
        store.insert(make_reservation("whole-hall", "A", at(MONDAY, 9), at(MONDAY, 12)))

        response = client.post(
            "/conflicts/check",
            json={"zone_id": "A1", "start": "2025-03-03T10:00:00Z", "end": "2025-03-03T11:00:00Z"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["has_conflict"] is True
        assert [r["id"] for r in body["conflicting"]] == ["whole-hall"]
        assert [z["id"] for z in body["alternatives"]] == ["B"]

    def test_exclude_id(self, client, store):
        store.insert(make_reservation("r1", "B", at(MONDAY, 9), at(MONDAY, 10)))

        response = client.post(
            "/conflicts/check",
            json={
                "zone_id": "B",
                "start": "2025-03-03T09:00:00Z",
                "end": "2025-03-03T10:00:00Z",
                "exclude_id": "r1",
            },
        )

        assert response.json() == {"has_conflict": False, "conflicting": [], "alternatives": []}

    def test_unknown_zone_404(self, client):
        response = client.post(
            "/conflicts/check",
            json={"zone_id": "nope", "start": "2025-03-03T09:00:00Z", "end": "2025-03-03T10:00:00Z"},
        )

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOT_FOUND"

    def test_inverted_range_422(self, client):
        response = client.post(
            "/conflicts/check",
            json={"zone_id": "B", "start": "2025-03-03T10:00:00Z", "end": "2025-03-03T09:00:00Z"},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION"

    def test_naive_datetime_rejected(self, client):
        response = client.post(
            "/conflicts/check",
            json={"zone_id": "B", "start": "2025-03-03T09:00:00", "end": "2025-03-03T10:00:00"},
        )

        assert response.status_code == 422


class TestCreateReservation:
    def test_created_then_conflict(self, client, store):
        body = {
            "id": "r1",
            "zone_id": "A",
            "facility_id": "fac-1",
            "start": "2025-03-03T09:00:00Z",
            "end": "2025-03-03T12:00:00Z",
        }

        first = client.post("/reservations", json=body)
        second = client.post(
            "/reservations",
            json={**body, "id": "r2", "zone_id": "A1", "start": "2025-03-03T10:00:00Z"},
        )

        assert first.status_code == 201
        assert first.json()["status"] == "pending_approval"
        assert first.json()["start"] == "2025-03-03T09:00:00+00:00"
        assert second.status_code == 409
        assert second.json()["detail"] == {
            "code": "CONFLICT",
            "conflicting_reservation_ids": ["r1"],
            "alternative_zone_ids": ["B"],
        }
        assert [r.id for r in store.all()] == ["r1"]

    def test_id_generated_when_missing(self, client):
        response = client.post(
            "/reservations",
            json={
                "zone_id": "B",
                "facility_id": "fac-1",
                "start": "2025-03-03T09:00:00Z",
                "end": "2025-03-03T10:00:00Z",
            },
        )

        assert response.status_code == 201
        assert response.json()["id"]


class TestRecurring:
    def test_series_created_skipping_conflicts(self, client, store):
        store.insert(make_reservation("blocker", "B", at(MARCH_10, 9, 30), at(MARCH_10, 10, 30)))

        response = client.post("/reservations/recurring", json=_series_body())

        assert response.status_code == 201
        created = response.json()["created"]
        assert [r["id"] for r in created] == [
            "weekly-1-20250303T090000",
            "weekly-1-20250317T090000",
            "weekly-1-20250324T090000",
        ]
        assert {r["recurrence_group_id"] for r in created} == {"weekly-1"}

    def test_missing_end_date_422(self, client, store):
        body = _series_body()
        del body["pattern"]["end_date"]

        response = client.post("/reservations/recurring", json=body)

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION"
        assert store.all() == []

    def test_limit_exceeded_422(self, client, store):
        response = client.post(
            "/reservations/recurring",
            json=_series_body(type="daily", end_date="2025-04-30T23:00:00Z"),
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "LIMIT_EXCEEDED"
        assert store.all() == []

    def test_series_keeps_local_time_across_dst(self, client):
        body = {
            "base": {
                "id": "oslo",
                "zone_id": "B",
                "facility_id": "fac-1",
                "start": "2025-03-24T09:00:00+01:00",
                "end": "2025-03-24T10:00:00+01:00",
            },
            "pattern": {"type": "weekly", "end_date": "2025-04-08T00:00:00+02:00"},
            "tz": "Europe/Oslo",
        }

        response = client.post("/reservations/recurring", json=body)

        assert response.status_code == 201
        assert [r["start"] for r in response.json()["created"]] == [
            "2025-03-24T09:00:00+01:00",
            "2025-03-31T09:00:00+02:00",
            "2025-04-07T09:00:00+02:00",
        ]

    def test_unknown_timezone_422(self, client, store):
        response = client.post("/reservations/recurring", json={**_series_body(), "tz": "Mars/Olympus"})

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION"
        assert store.all() == []

    def test_empty_days_of_week_creates_nothing(self, client, store):
        response = client.post("/reservations/recurring", json=_series_body(days_of_week=[]))

        assert response.status_code == 201
        assert response.json() == {"created": []}
        assert store.all() == []

    def test_preview_inserts_nothing(self, client, store):
        store.insert(make_reservation("blocker", "B", at(MARCH_10, 9, 30), at(MARCH_10, 10, 30)))

        response = client.post(
            "/reservations/recurring/preview",
            json=_series_body(exceptions=["2025-03-17"]),
        )

        assert response.status_code == 200
        occurrences = response.json()["occurrences"]
        assert [o["status"] for o in occurrences] == ["available", "conflict", "exception", "available"]
        assert occurrences[1]["conflicting_reservation_ids"] == ["blocker"]
        assert [r.id for r in store.all()] == ["blocker"]


class TestAvailability:
    def test_slots(self, client, store):
        store.insert(make_reservation("r1", "B", at(MONDAY, 9), at(MONDAY, 10)))

        response = client.get(
            "/zones/B/availability",
            params=[("date", "2025-03-03"), ("slots", "09:00-10:00"), ("slots", "10:00-11:00")],
        )

        assert response.status_code == 200
        assert response.json() == {
            "zone_id": "B",
            "date": "2025-03-03",
            "tz": "UTC",
            "slots": {"09:00-10:00": False, "10:00-11:00": True},
        }

    def test_bad_slot_422(self, client):
        response = client.get(
            "/zones/B/availability", params={"date": "2025-03-03", "slots": "9-10"}
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION"

    def test_unknown_timezone_422(self, client):
        response = client.get(
            "/zones/B/availability",
            params={"date": "2025-03-03", "slots": "09:00-10:00", "tz": "Mars/Olympus"},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION"

    def test_unknown_zone_404(self, client):
        response = client.get(
            "/zones/nope/availability", params={"date": "2025-03-03", "slots": "09:00-10:00"}
        )

        assert response.status_code == 404
