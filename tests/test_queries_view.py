from __future__ import annotations

import csv
import io

import pytest
from django.test import Client

from backend.core.errors import StoreError, UpstreamError

pytestmark = pytest.mark.django_db

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def _create(client: Client, location="New York", start="2024-01-01", end="2024-01-05"):
    return client.post(
        "/api/queries",
        {"location": location, "startDate": start, "endDate": end},
        content_type="application/json",
    )


def test_create_returns_full_record(service) -> None:
    client = Client()
    response = _create(client)

    assert response.status_code == 201
    payload = response.json()
    assert payload["location"] == "New York"
    assert payload["resolvedLocation"] == {
        "latitude": 40.7128,
        "longitude": -74.006,
        "cityName": "New York",
        "countryCode": "US",
    }
    assert payload["dateRange"] == {"startDate": "2024-01-01", "endDate": "2024-01-05"}
    assert [sample["date"] for sample in payload["samples"]] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert payload["createdAt"].endswith("Z")


def test_create_then_get_round_trips(service) -> None:
    client = Client()
    created = _create(client).json()

    fetched = client.get(f"/api/queries/{created['id']}")

    assert fetched.status_code == 200
    body = fetched.json()
    for key in ("location", "dateRange", "samples"):
        assert body[key] == created[key]


@pytest.mark.parametrize(
    "body",
    [
        {"startDate": "2024-01-01", "endDate": "2024-01-02"},
        {"location": "New York", "endDate": "2024-01-02"},
        {"location": "New York", "startDate": "2024-01-01"},
        {"location": "", "startDate": "2024-01-01", "endDate": "2024-01-02"},
    ],
)
def test_create_rejects_missing_fields(service, body) -> None:
    response = Client().post("/api/queries", body, content_type="application/json")

    assert response.status_code == 400
    assert response.json() == {"error": "Location and date range required"}


@pytest.mark.parametrize(("start", "end"), [("2024-01-05", "2024-01-01"), ("yesterday", "2024-01-01")])
def test_create_rejects_invalid_range_without_storing(service, geocoder, start, end) -> None:
    client = Client()
    response = _create(client, start=start, end=end)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid date range"}
    assert geocoder.calls == []
    assert client.get("/api/queries").json() == []


def test_location_not_found_is_a_500_with_message(service) -> None:
    response = _create(Client(), location="Atlantis")

    assert response.status_code == 500
    assert response.json() == {"error": "Location not found"}


def test_upstream_failure_is_a_500_with_message(service, forecast, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise UpstreamError("Weather data fetch failed")

    monkeypatch.setattr(forecast, "fetch", broken)

    response = _create(Client())

    assert response.status_code == 500
    assert response.json() == {"error": "Weather data fetch failed"}


def test_range_beyond_horizon_stores_partial_samples(service) -> None:
    response = _create(Client(), start="2024-01-02", end="2024-01-10")

    assert response.status_code == 201
    assert [sample["date"] for sample in response.json()["samples"]] == ["2024-01-02", "2024-01-03"]


def test_list_is_newest_first(service) -> None:
    from backend.core.models import SavedQueryRecord
    from datetime import datetime, timedelta, timezone

    client = Client()
    first = _create(client, location="New York").json()
    second = _create(client, location="London").json()
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    SavedQueryRecord.objects.filter(pk=first["id"]).update(created_at=base)
    SavedQueryRecord.objects.filter(pk=second["id"]).update(created_at=base + timedelta(seconds=1))

    response = client.get("/api/queries")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [second["id"], first["id"]]


def test_list_failure_uses_fixed_message(service, monkeypatch) -> None:
    def broken():
        raise StoreError("database is locked")

    monkeypatch.setattr(service, "list", broken)

    response = Client().get("/api/queries")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to get queries"}


@pytest.mark.parametrize("query_id", [MISSING_ID, "not-an-id"])
def test_unknown_id_is_404_everywhere(service, geocoder, query_id) -> None:
    client = Client()
    _create(client)
    body = {"location": "London", "startDate": "2024-01-01", "endDate": "2024-01-02"}

    assert client.get(f"/api/queries/{query_id}").status_code == 404
    assert client.put(f"/api/queries/{query_id}", body, content_type="application/json").status_code == 404
    assert client.delete(f"/api/queries/{query_id}").status_code == 404
    response = client.get(f"/api/queries/{query_id}/export")
    assert response.status_code == 404
    assert response.json() == {"error": "Query not found"}
    assert geocoder.calls == ["New York"]
    assert len(client.get("/api/queries").json()) == 1


def test_update_replaces_record(service) -> None:
    client = Client()
    created = _create(client).json()

    response = client.put(
        f"/api/queries/{created['id']}",
        {"location": "London", "startDate": "2024-01-03", "endDate": "2024-01-03"},
        content_type="application/json",
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == created["id"]
    assert body["createdAt"] == created["createdAt"]
    assert body["location"] == "London"
    assert body["resolvedLocation"]["countryCode"] == "GB"
    assert [sample["date"] for sample in body["samples"]] == ["2024-01-03"]


def test_update_validates_like_create(service) -> None:
    client = Client()
    created = _create(client).json()

    missing = client.put(f"/api/queries/{created['id']}", {"location": "London"}, content_type="application/json")
    reversed_range = client.put(
        f"/api/queries/{created['id']}",
        {"location": "London", "startDate": "2024-01-03", "endDate": "2024-01-01"},
        content_type="application/json",
    )

    assert missing.status_code == 400
    assert reversed_range.status_code == 400
    assert client.get(f"/api/queries/{created['id']}").json()["location"] == "New York"


def test_delete_then_list(service) -> None:
    client = Client()
    created = _create(client).json()

    response = client.delete(f"/api/queries/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Query deleted successfully"}
    assert created["id"] not in [item["id"] for item in client.get("/api/queries").json()]


def test_export_one_returns_csv_attachment(service) -> None:
    client = Client()
    created = _create(client).json()

    response = client.get(f"/api/queries/{created['id']}/export", HTTP_ACCEPT="text/csv")

    assert response.status_code == 200
    assert response["Content-Type"].startswith("text/csv")
    assert response["Content-Disposition"] == f'attachment; filename="weather_query_{created["id"]}.csv"'
    rows = list(csv.reader(io.StringIO(response.content.decode("utf-8"))))
    assert rows[0] == ["location", "startDate", "endDate", "date", "temp", "description"]
    assert len(rows) == 1 + 3


def test_export_all_includes_every_record(service) -> None:
    client = Client()
    _create(client)
    _create(client, location="London", start="2024-01-01", end="2024-01-01")
    _create(client, location="London", start="2024-02-01", end="2024-02-02")

    response = client.get("/api/queries/export")

    assert response.status_code == 200
    assert response["Content-Disposition"] == 'attachment; filename="weather_data.csv"'
    lines = response.content.decode("utf-8").splitlines()
    assert len(lines) == 1 + 3 + 1


def test_export_all_failure_uses_fixed_message(service, monkeypatch) -> None:
    def broken(query_id=None):
        raise StoreError("disk full")

    monkeypatch.setattr(service, "export", broken)

    response = Client().get("/api/queries/export", HTTP_ACCEPT="text/csv")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to export data"}


def test_numeric_location_is_geocoded_as_text(service, geocoder) -> None:
    geocoder.places["10001"] = geocoder.places["New York"]

    response = Client().post(
        "/api/queries",
        {"location": 10001, "startDate": "2024-01-01", "endDate": "2024-01-02"},
        content_type="application/json",
    )

    assert response.status_code == 201
    assert response.json()["location"] == "10001"
    assert geocoder.calls == ["10001"]


def test_non_text_location_reports_missing_fields(service, geocoder) -> None:
    response = Client().post(
        "/api/queries",
        {"location": {"city": "Paris"}, "startDate": "2024-01-01", "endDate": "2024-01-02"},
        content_type="application/json",
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Location and date range required"}
    assert geocoder.calls == []


def test_raw_location_is_stored_but_geocoded_trimmed(service, geocoder) -> None:
    response = _create(Client(), location="  New York ")

    assert response.status_code == 201
    assert response.json()["location"] == "  New York "
    assert geocoder.calls == ["New York"]


@pytest.mark.parametrize("method", ["post", "put"])
def test_malformed_json_body_uses_error_shape(service, method) -> None:
    client = Client()
    url = "/api/queries" if method == "post" else f"/api/queries/{_create(client).json()['id']}"

    response = getattr(client, method)(url, "{not json", content_type="application/json")

    assert response.status_code == 400
    assert response.json() == {"error": "Location and date range required"}


def test_unsupported_method_uses_error_shape(service) -> None:
    response = Client().patch("/api/queries", {}, content_type="application/json")

    assert response.status_code == 405
    assert set(response.json()) == {"error"}
