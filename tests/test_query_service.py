from __future__ import annotations

from datetime import date

import pytest

from backend.core.abstractions import WeatherSample
from backend.core.errors import LocationNotFound, QueryNotFound, ValidationError
from backend.core.services.query_service import QueryService
from backend.core.store import QueryStore

pytestmark = pytest.mark.django_db


def _payload(location="New York", start="2024-01-01", end="2024-01-05") -> dict:
    return {"location": location, "startDate": start, "endDate": end}


def test_create_resolves_fetches_and_persists(service, geocoder, forecast) -> None:
    query = service.create(_payload())

    assert geocoder.calls == ["New York"]
    assert forecast.calls == [(40.7128, -74.006, date(2024, 1, 1), date(2024, 1, 5))]
    assert query.location == "New York"
    assert query.resolved_location.country_code == "US"
    assert [sample.date for sample in query.samples] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert service.get(query.id).samples == query.samples


def test_create_with_reversed_range_does_not_call_adapters(service, geocoder, forecast) -> None:
    with pytest.raises(ValidationError, match="Invalid date range"):
        service.create(_payload(start="2024-01-05", end="2024-01-01"))

    assert geocoder.calls == []
    assert forecast.calls == []
    assert service.list() == []


@pytest.mark.parametrize("missing", ["location", "startDate", "endDate"])
def test_create_requires_all_fields(service, missing) -> None:
    payload = _payload()
    payload.pop(missing)

    with pytest.raises(ValidationError, match="Location and date range required"):
        service.create(payload)


def test_create_propagates_location_not_found(service) -> None:
    with pytest.raises(LocationNotFound):
        service.create(_payload(location="Atlantis"))

    assert service.list() == []


def test_update_checks_id_before_calling_adapters(service, geocoder) -> None:
    with pytest.raises(QueryNotFound):
        service.update("00000000-0000-0000-0000-000000000000", _payload())

    assert geocoder.calls == []


def test_update_refetches_forecast(service, geocoder, forecast) -> None:
    query = service.create(_payload())
    forecast.temperature = 55.0

    updated = service.update(query.id, _payload(location="London", start="2024-01-02", end="2024-01-02"))

    assert geocoder.calls == ["New York", "London"]
    assert updated.id == query.id
    assert updated.created_at == query.created_at
    assert updated.resolved_location.city_name == "London"
    assert updated.samples == [WeatherSample(date=date(2024, 1, 2), temperature=55.0, description="clear sky")]


def test_samples_outside_range_are_dropped(db, geocoder) -> None:
    class LeakyForecast:
        def fetch(self, latitude, longitude, start_date, end_date):
            return [
                WeatherSample(date=date(2023, 12, 31), temperature=1.0, description="early"),
                WeatherSample(date=date(2024, 1, 1), temperature=2.0, description="inside"),
            ]

    service = QueryService(geocoder=geocoder, forecast=LeakyForecast(), store=QueryStore())

    query = service.create(_payload(end="2024-01-01"))

    assert [sample.description for sample in query.samples] == ["inside"]


def test_export_single_and_all(service) -> None:
    first = service.create(_payload())
    service.create(_payload(location="London", start="2024-01-03", end="2024-01-03"))

    single = service.export(first.id).splitlines()
    everything = service.export().splitlines()

    assert single[0] == "location,startDate,endDate,date,temp,description"
    assert len(single) == 1 + 3
    assert len(everything) == 1 + 3 + 1
