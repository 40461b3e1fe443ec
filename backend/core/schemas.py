"""Pydantic schemas for inbound query payloads and OpenWeather responses."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from pydantic import field_validator, model_validator

from backend.core.errors import ValidationError

__all__ = [
    "QueryPayload",
    "GeocodeMatch",
    "ForecastEntry",
    "ForecastPayload",
    "parse_query_payload",
    "MISSING_FIELDS_MESSAGE",
    "INVALID_RANGE_MESSAGE",
]

MISSING_FIELDS_MESSAGE = "Location and date range required"
INVALID_RANGE_MESSAGE = "Invalid date range"

NOON = time(12, 0, 0)


def _ensure_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        # Browsers tend to send full ISO timestamps ("2024-01-01T00:00:00.000Z")
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def _ensure_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


# -- Inbound ---------------------------------------------------------------


class QueryPayload(BaseModel):
    """Body of a create/update request.

    ``location`` keeps the caller's raw text; only the geocoder sees it trimmed.
    """

    model_config = ConfigDict(populate_by_name=True)

    location: str = Field(..., min_length=1)
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")

    @field_validator("location", mode="before")
    @classmethod
    def _validate_location(cls, value: Any) -> Any:
        # Postal codes often arrive as JSON numbers.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _validate_dates(cls, value: Any) -> date:
        return _ensure_date(value)

    @model_validator(mode="after")
    def _check_range(self) -> "QueryPayload":
        if self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


def parse_query_payload(data: Any) -> QueryPayload:
    """Validate a request body, raising :class:`ValidationError` with the API message."""

    if not isinstance(data, Mapping):
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    for key in ("location", "startDate", "endDate"):
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(MISSING_FIELDS_MESSAGE)
    try:
        return QueryPayload.model_validate(dict(data))
    except PydanticValidationError as exc:
        if any(error["loc"][:1] == ("location",) for error in exc.errors()):
            raise ValidationError(MISSING_FIELDS_MESSAGE) from exc
        raise ValidationError(INVALID_RANGE_MESSAGE) from exc


# -- Upstream (OpenWeather) ------------------------------------------------


class GeocodeMatch(BaseModel):
    """One element of the direct geocoding response."""

    model_config = ConfigDict(extra="ignore")

    lat: float
    lon: float
    name: str = ""
    country: str = ""


class _ForecastMain(BaseModel):
    model_config = ConfigDict(extra="ignore")

    temp: float


class _ForecastCondition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = ""


class ForecastEntry(BaseModel):
    """A single 3-hour slot of the forecast feed."""

    model_config = ConfigDict(extra="ignore")

    dt_txt: datetime
    main: _ForecastMain
    weather: List[_ForecastCondition] = Field(default_factory=list)

    @field_validator("dt_txt", mode="before")
    @classmethod
    def _validate_dt_txt(cls, value: Any) -> datetime:
        return _ensure_datetime(value)

    @property
    def day(self) -> date:
        return self.dt_txt.date()

    @property
    def is_noon(self) -> bool:
        return self.dt_txt.time() == NOON

    @property
    def description(self) -> str:
        return self.weather[0].description if self.weather else ""


class ForecastPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    entries: List[ForecastEntry] = Field(..., alias="list")
