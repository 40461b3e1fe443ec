"""Flatten saved queries into CSV rows."""
from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, Iterator

from backend.core.abstractions import SavedQuery

CSV_FIELDS = ["location", "startDate", "endDate", "date", "temp", "description"]
EXPORT_ALL_FILENAME = "weather_data.csv"


def export_filename(query_id: str) -> str:
    return f"weather_query_{query_id}.csv"


def flatten_records(records: Iterable[SavedQuery]) -> Iterator[Dict[str, object]]:
    """Yield one row per (record, sample); records without samples yield nothing."""

    for record in records:
        start = record.date_range.start.isoformat()
        end = record.date_range.end.isoformat()
        for sample in record.samples:
            yield {
                "location": record.location,
                "startDate": start,
                "endDate": end,
                "date": sample.date.isoformat(),
                "temp": sample.temperature,
                "description": sample.description,
            }


def export_csv(records: Iterable[SavedQuery]) -> str:
    """Render ``records`` as CSV text; the header row is always present."""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(flatten_records(records))
    return buffer.getvalue()


__all__ = ["CSV_FIELDS", "EXPORT_ALL_FILENAME", "export_csv", "export_filename", "flatten_records"]
