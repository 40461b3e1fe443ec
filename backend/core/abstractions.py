"""Core abstractions for the weather query domain."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Protocol, Sequence


@dataclass(frozen=True, slots=True)
class WeatherSample:
    """One representative reading for a single calendar day."""

    date: date
    temperature: float
    description: str


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    """Best geocoding match for a free-text location."""

    latitude: float
    longitude: float
    city_name: str
    country_code: str


@dataclass(frozen=True, slots=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("start must not be after end")

    def __contains__(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True, slots=True)
class QueryFields:
    """Mutable part of a saved query: everything except id and creation time."""

    location: str
    resolved_location: ResolvedLocation
    date_range: DateRange
    samples: Sequence[WeatherSample] = ()


@dataclass(slots=True)
class SavedQuery:
    """A persisted lookup as handed out by the query store."""

    id: str
    location: str
    resolved_location: ResolvedLocation
    date_range: DateRange
    created_at: datetime
    samples: List[WeatherSample] = field(default_factory=list)


class Geocoder(Protocol):
    """Resolves free text into coordinates and a canonical place name."""

    def resolve(self, location: str) -> ResolvedLocation:
        ...


class ForecastProvider(Protocol):
    """Returns one sample per day inside the requested date range."""

    def fetch(self, latitude: float, longitude: float, start_date: date, end_date: date) -> List[WeatherSample]:
        ...


class QueryRepository(Protocol):
    """Single-record persistence for saved queries."""

    def create(self, fields: QueryFields) -> SavedQuery:
        ...

    def list(self) -> List[SavedQuery]:
        ...

    def get(self, query_id: str) -> SavedQuery:
        ...

    def update(self, query_id: str, fields: QueryFields) -> SavedQuery:
        ...

    def delete(self, query_id: str) -> None:
        ...
