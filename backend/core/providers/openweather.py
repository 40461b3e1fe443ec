"""OpenWeather geocoding and 5 day / 3 hour forecast adapters."""
from __future__ import annotations

from datetime import date
from typing import List

from pydantic import ValidationError as PydanticValidationError

from backend.core.abstractions import ResolvedLocation, WeatherSample
from backend.core.errors import LocationNotFound, UpstreamError
from backend.core.providers.base import OpenWeatherProvider
from backend.core.schemas import ForecastPayload, GeocodeMatch


class OpenWeatherGeocoder(OpenWeatherProvider):
    """Resolve free text through the direct geocoding endpoint.

    City names, postal codes and "lat,lon" pairs all go through the same
    text query; the first match wins.
    """

    name = "openweather-geo"

    def __init__(self, *, base_url: str = "https://api.openweathermap.org/geo/1.0/direct", **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url

    def resolve(self, location: str) -> ResolvedLocation:
        response = self._request("GET", self.base_url, params={"q": location, "limit": 1})
        data = self._json(response)
        if not data:
            self._log.info("No geocoding match for %r", location)
            raise LocationNotFound()
        if not isinstance(data, list):
            raise UpstreamError("Unexpected geocoding response")
        try:
            match = GeocodeMatch.model_validate(data[0])
        except PydanticValidationError as exc:
            raise UpstreamError("Unexpected geocoding response") from exc
        return ResolvedLocation(
            latitude=match.lat,
            longitude=match.lon,
            city_name=match.name,
            country_code=match.country,
        )


class OpenWeatherForecastProvider(OpenWeatherProvider):
    """Reduce the 3-hour forecast feed to the 12:00 slot of each requested day."""

    name = "openweather-forecast"

    def __init__(
        self,
        *,
        base_url: str = "https://api.openweathermap.org/data/2.5/forecast",
        units: str = "imperial",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url
        self.units = units

    def fetch(self, latitude: float, longitude: float, start_date: date, end_date: date) -> List[WeatherSample]:
        params = {"lat": latitude, "lon": longitude, "units": self.units}
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        if not isinstance(data, dict) or "list" not in data:
            raise UpstreamError("Weather data fetch failed")
        try:
            payload = ForecastPayload.model_validate(data)
        except PydanticValidationError as exc:
            raise UpstreamError("Weather data fetch failed") from exc

        # The feed only covers ~5 days; days beyond it are simply absent.
        samples = [
            WeatherSample(date=entry.day, temperature=entry.main.temp, description=entry.description)
            for entry in payload.entries
            if entry.is_noon and start_date <= entry.day <= end_date
        ]
        self._log.debug("Kept %s of %s forecast entries", len(samples), len(payload.entries))
        return samples


__all__ = ["OpenWeatherGeocoder", "OpenWeatherForecastProvider"]
