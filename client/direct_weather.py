"""No-save weather lookups that call OpenWeather directly with the client key.

These never touch the saved-query API, so their results cannot be updated,
deleted or exported.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from client.config import HTTP_TIMEOUT_S, OPENWEATHER_BASE_URL, OPENWEATHER_CLIENT_API_KEY, OPENWEATHER_UNITS


logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key not configured. Please set OPENWEATHER_CLIENT_API_KEY in your environment."

# The forecast feed has 3-hour slots, so every 8th entry is one per day.
# This differs from the backend, which keeps the 12:00 slot of each day.
ENTRIES_PER_DAY = 8
FORECAST_DAYS = 5


class DirectWeatherError(RuntimeError):
    """Raised when a direct OpenWeather lookup fails."""


class DirectWeatherClient:
    def __init__(
        self,
        api_key: str = OPENWEATHER_CLIENT_API_KEY,
        *,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = OPENWEATHER_UNITS,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT_S,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.session = session or requests.Session()
        self.timeout = timeout

    def current_weather(self, location: str, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Return a single display row for the current conditions."""

        data = self._get("weather", location, "Failed to fetch current weather.")
        if data.get("cod") != 200:
            raise DirectWeatherError(data.get("message") or "Failed to fetch current weather.")
        return [_row((today or date.today()).isoformat(), data, "Failed to fetch current weather.")]

    def five_day_forecast(self, location: str) -> List[Dict[str, Any]]:
        """Return one display row per day, taking every 8th forecast entry."""

        data = self._get("forecast", location, "Failed to fetch forecast.")
        # The forecast endpoint reports ``cod`` as a string.
        if data.get("cod") != "200":
            raise DirectWeatherError(data.get("message") or "Failed to fetch forecast.")
        entries = data.get("list") or []
        return [
            _row(str(entry.get("dt_txt", "")).split(" ")[0], entry, "Failed to fetch forecast.")
            for entry in entries[::ENTRIES_PER_DAY][:FORECAST_DAYS]
        ]

    def _get(self, endpoint: str, location: str, fallback: str) -> Dict[str, Any]:
        if not self.api_key:
            raise DirectWeatherError(MISSING_KEY_MESSAGE)
        params = {"q": location, "appid": self.api_key, "units": self.units}
        try:
            response = self.session.get(f"{self.base_url}/{endpoint}", params=params, timeout=self.timeout)
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Direct %s lookup for %r failed: %s", endpoint, location, exc)
            raise DirectWeatherError(fallback) from exc
        if not isinstance(data, dict):
            raise DirectWeatherError(fallback)
        return data


def _row(day: str, entry: Dict[str, Any], fallback: str) -> Dict[str, Any]:
    try:
        return {
            "date": day,
            "temperature": round(entry["main"]["temp"]),
            "description": entry["weather"][0]["description"],
        }
    except (KeyError, IndexError, TypeError) as exc:
        raise DirectWeatherError(fallback) from exc


__all__ = ["DirectWeatherClient", "DirectWeatherError", "MISSING_KEY_MESSAGE"]
