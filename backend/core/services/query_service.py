"""Service that resolves, fetches and persists weather queries."""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from backend.core.abstractions import (
    DateRange,
    ForecastProvider,
    Geocoder,
    QueryFields,
    QueryRepository,
    SavedQuery,
)
from backend.core.schemas import QueryPayload, parse_query_payload
from backend.core.services.csv_export import export_csv


logger = logging.getLogger(__name__)


class QueryService:
    """Orchestrate the geocoder, the forecast provider and the query store.

    Every create/update resolves the location and fetches the forecast anew;
    nothing is cached between requests.
    """

    def __init__(self, geocoder: Geocoder, forecast: ForecastProvider, store: QueryRepository) -> None:
        self._geocoder = geocoder
        self._forecast = forecast
        self._store = store

    # Public API ---------------------------------------------------------
    def create(self, data: Any) -> SavedQuery:
        payload = parse_query_payload(data)
        fields = self._build_fields(payload)
        return self._store.create(fields)

    def update(self, query_id: str, data: Any) -> SavedQuery:
        payload = parse_query_payload(data)
        # Unknown ids fail before any outbound call is made.
        self._store.get(query_id)
        fields = self._build_fields(payload)
        return self._store.update(query_id, fields)

    def list(self) -> List[SavedQuery]:
        return self._store.list()

    def get(self, query_id: str) -> SavedQuery:
        return self._store.get(query_id)

    def delete(self, query_id: str) -> None:
        self._store.delete(query_id)

    def export(self, query_id: Optional[str] = None) -> str:
        records: Sequence[SavedQuery]
        if query_id is None:
            records = self._store.list()
        else:
            records = [self._store.get(query_id)]
        return export_csv(records)

    # Helpers ------------------------------------------------------------
    def _build_fields(self, payload: QueryPayload) -> QueryFields:
        date_range = DateRange(start=payload.start_date, end=payload.end_date)
        resolved = self._geocoder.resolve(payload.location.strip())
        samples = self._forecast.fetch(resolved.latitude, resolved.longitude, date_range.start, date_range.end)
        logger.info(
            "Resolved %r to %s, %s with %s samples for %s..%s",
            payload.location,
            resolved.city_name,
            resolved.country_code,
            len(samples),
            date_range.start,
            date_range.end,
        )
        return QueryFields(
            location=payload.location,
            resolved_location=resolved,
            date_range=date_range,
            samples=[sample for sample in samples if sample.date in date_range],
        )


__all__ = ["QueryService"]
