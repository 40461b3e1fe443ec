"""Error taxonomy shared by adapters, the query store and the API layer."""
from __future__ import annotations


class WeatherQueryError(RuntimeError):
    """Base error for the weather query domain."""


class ValidationError(WeatherQueryError):
    """Raised when a create/update payload is missing fields or has a bad range."""


class NotFoundError(WeatherQueryError):
    """Raised when a requested entity does not exist."""


class QueryNotFound(NotFoundError):
    """Raised by the query store for unknown or malformed ids."""

    def __init__(self, message: str = "Query not found") -> None:
        super().__init__(message)


class LocationNotFound(NotFoundError):
    """Raised by the geocoder when the upstream source returns no matches."""

    def __init__(self, message: str = "Location not found") -> None:
        super().__init__(message)


class UpstreamError(WeatherQueryError):
    """Raised when the upstream weather API fails or answers with an unexpected shape."""


class StoreError(WeatherQueryError):
    """Raised when the persistence layer fails."""


__all__ = [
    "WeatherQueryError",
    "ValidationError",
    "NotFoundError",
    "QueryNotFound",
    "LocationNotFound",
    "UpstreamError",
    "StoreError",
]
