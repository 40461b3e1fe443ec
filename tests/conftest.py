from __future__ import annotations

from datetime import date
from typing import Dict, List

import pytest

from requests_mock import Mocker

from backend.api import views
from backend.core.abstractions import ResolvedLocation, WeatherSample
from backend.core.errors import LocationNotFound
from backend.core.services.query_service import QueryService
from backend.core.store import QueryStore


@pytest.fixture
def requests_mock():
    with Mocker() as mock:
        yield mock


class FakeGeocoder:
    name = "fake-geo"

    def __init__(self, places: Dict[str, ResolvedLocation] | None = None) -> None:
        self.places = places or {
            "New York": ResolvedLocation(latitude=40.7128, longitude=-74.006, city_name="New York", country_code="US"),
            "London": ResolvedLocation(latitude=51.5073, longitude=-0.1276, city_name="London", country_code="GB"),
        }
        self.calls: List[str] = []

    def resolve(self, location: str) -> ResolvedLocation:
        self.calls.append(location)
        try:
            return self.places[location]
        except KeyError:
            raise LocationNotFound() from None


class FakeForecast:
    """Noon samples for a fixed set of days, mimicking the ~5-day horizon."""

    name = "fake-forecast"

    def __init__(self, days: List[date] | None = None, temperature: float = 41.0) -> None:
        self.days = days or [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
        self.temperature = temperature
        self.calls: List[tuple] = []

    def fetch(self, latitude: float, longitude: float, start_date: date, end_date: date) -> List[WeatherSample]:
        self.calls.append((latitude, longitude, start_date, end_date))
        return [
            WeatherSample(date=day, temperature=self.temperature, description="clear sky")
            for day in self.days
            if start_date <= day <= end_date
        ]


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def forecast() -> FakeForecast:
    return FakeForecast()


@pytest.fixture
def service(db, geocoder: FakeGeocoder, forecast: FakeForecast, monkeypatch) -> QueryService:
    query_service = QueryService(geocoder=geocoder, forecast=forecast, store=QueryStore())
    monkeypatch.setattr(views, "get_query_service", lambda: query_service)
    return query_service
