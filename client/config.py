"""Configuration settings for the Streamlit client."""
from __future__ import annotations

import os

BACKEND_URL: str = os.environ.get("WEATHER_BACKEND_URL", "http://localhost:8000/api/queries").rstrip("/")
"""Base URL of the saved-query API."""

OPENWEATHER_CLIENT_API_KEY: str = os.environ.get("OPENWEATHER_CLIENT_API_KEY", "")
"""Key used only by the no-save actions that call OpenWeather directly."""

OPENWEATHER_BASE_URL: str = os.environ.get("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5").rstrip("/")

OPENWEATHER_UNITS: str = os.environ.get("OPENWEATHER_UNITS", "imperial")

HTTP_TIMEOUT_S: float = float(os.environ.get("CLIENT_HTTP_TIMEOUT", "10"))
