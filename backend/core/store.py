"""Query store backed by the Django ORM."""
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from django.db import DatabaseError

from backend.core.abstractions import DateRange, QueryFields, ResolvedLocation, SavedQuery, WeatherSample
from backend.core.errors import QueryNotFound, StoreError
from backend.core.models import SavedQueryRecord


logger = logging.getLogger(__name__)


class QueryStore:
    """Single-record CRUD over :class:`SavedQueryRecord`.

    Ids are opaque UUID strings; anything that does not parse as one is treated
    like an unknown id. Database failures surface as :class:`StoreError`.
    """

    def create(self, fields: QueryFields) -> SavedQuery:
        record = SavedQueryRecord(**self._columns(fields))
        try:
            record.save(force_insert=True)
        except DatabaseError as exc:
            logger.error("Failed to store query for %r", fields.location, exc_info=exc)
            raise StoreError("Failed to save query") from exc
        logger.info("Stored query %s for %r", record.pk, fields.location)
        return self._to_domain(record)

    def list(self) -> List[SavedQuery]:
        try:
            records = list(SavedQueryRecord.objects.order_by("-created_at"))
        except DatabaseError as exc:
            raise StoreError("Failed to list queries") from exc
        return [self._to_domain(record) for record in records]

    def get(self, query_id: str) -> SavedQuery:
        return self._to_domain(self._load(query_id))

    def update(self, query_id: str, fields: QueryFields) -> SavedQuery:
        record = self._load(query_id)
        for column, value in self._columns(fields).items():
            setattr(record, column, value)
        try:
            record.save(force_update=True)
        except DatabaseError as exc:
            raise StoreError("Failed to update query") from exc
        logger.info("Updated query %s", record.pk)
        return self._to_domain(record)

    def delete(self, query_id: str) -> None:
        pk = self._parse_id(query_id)
        if pk is None:
            raise QueryNotFound()
        try:
            deleted, _ = SavedQueryRecord.objects.filter(pk=pk).delete()
        except DatabaseError as exc:
            raise StoreError("Failed to delete query") from exc
        if not deleted:
            raise QueryNotFound()
        logger.info("Deleted query %s", pk)

    # -- helpers ------------------------------------------------------------
    def _load(self, query_id: str) -> SavedQueryRecord:
        pk = self._parse_id(query_id)
        if pk is None:
            raise QueryNotFound()
        try:
            return SavedQueryRecord.objects.get(pk=pk)
        except SavedQueryRecord.DoesNotExist as exc:
            raise QueryNotFound() from exc
        except DatabaseError as exc:
            raise StoreError("Failed to load query") from exc

    @staticmethod
    def _parse_id(query_id: Any) -> Optional[uuid.UUID]:
        try:
            return uuid.UUID(str(query_id))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _columns(fields: QueryFields) -> Dict[str, Any]:
        resolved = fields.resolved_location
        return {
            "location": fields.location,
            "latitude": resolved.latitude,
            "longitude": resolved.longitude,
            "city_name": resolved.city_name,
            "country_code": resolved.country_code,
            "start_date": fields.date_range.start,
            "end_date": fields.date_range.end,
            "samples": [
                {
                    "date": sample.date.isoformat(),
                    "temperature": sample.temperature,
                    "description": sample.description,
                }
                for sample in fields.samples
            ],
        }

    @staticmethod
    def _to_domain(record: SavedQueryRecord) -> SavedQuery:
        return SavedQuery(
            id=str(record.pk),
            location=record.location,
            resolved_location=ResolvedLocation(
                latitude=record.latitude,
                longitude=record.longitude,
                city_name=record.city_name,
                country_code=record.country_code,
            ),
            date_range=DateRange(start=_as_date(record.start_date), end=_as_date(record.end_date)),
            created_at=record.created_at,
            samples=[
                WeatherSample(
                    date=_as_date(item["date"]),
                    temperature=item["temperature"],
                    description=item.get("description", ""),
                )
                for item in record.samples or []
            ],
        )


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


__all__ = ["QueryStore"]
