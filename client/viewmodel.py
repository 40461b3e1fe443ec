"""Serializable view-model for the weather client and the pure functions that update it."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

INPUT_TYPES: tuple[str, ...] = ("city", "zip", "gps", "landmark")

INPUT_TYPE_LABELS: Dict[str, str] = {
    "city": "City/Town",
    "zip": "Zip Code/Postal Code",
    "gps": "GPS Coordinates (lat, lon)",
    "landmark": "Landmark",
}

PLACEHOLDERS: Dict[str, str] = {
    "city": "Enter city name (e.g., New York, London)",
    "zip": "Enter zip/postal code (e.g., 10001, SW1A 1AA)",
    "gps": "Enter coordinates (e.g., 40.7128,-74.0060)",
    "landmark": "Enter landmark (e.g., Statue of Liberty)",
}


@dataclass
class ViewState:
    """Everything the page needs to render; stored as a plain dict between reruns."""

    input_type: str = "city"
    location: str = ""
    start_date: str = ""  # ISO "YYYY-MM-DD" or ""
    end_date: str = ""
    rows: List[Dict[str, Any]] = field(default_factory=list)
    saved_queries: List[Dict[str, Any]] = field(default_factory=list)
    selected_id: str = ""
    error: str = ""
    notice: str = ""
    loading: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ViewState":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @property
    def selected_query(self) -> Optional[Dict[str, Any]]:
        if not self.selected_id:
            return None
        for query in self.saved_queries:
            if query.get("id") == self.selected_id:
                return query
        return None


# -- Presentation helpers ---------------------------------------------------


def placeholder_for(input_type: str) -> str:
    return PLACEHOLDERS.get(input_type, "Enter location...")


def query_dates(query: Mapping[str, Any]) -> tuple[str, str]:
    date_range = query.get("dateRange") or {}
    return date_range.get("startDate", ""), date_range.get("endDate", "")


def query_label(query: Mapping[str, Any]) -> str:
    start, end = query_dates(query)
    return f"{query.get('location', '')} ({start} to {end})"


def rows_from_samples(samples: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "date": sample.get("date", ""),
            "temperature": sample.get("temperature"),
            "description": sample.get("description", ""),
        }
        for sample in samples
    ]


# -- Validation --------------------------------------------------------------


def validate_location(state: ViewState) -> Optional[str]:
    if not state.location.strip():
        return "Please enter a location."
    return None


def validate_date_range(state: ViewState) -> Optional[str]:
    if not state.start_date or not state.end_date:
        return "Please select a valid date range."
    try:
        start = date.fromisoformat(state.start_date)
        end = date.fromisoformat(state.end_date)
    except ValueError:
        return "Please select a valid date range."
    if start > end:
        return "Start date must be before end date."
    return None


# -- Transitions -------------------------------------------------------------


def change_input_type(state: ViewState, input_type: str) -> ViewState:
    return replace(state, input_type=input_type, location="", rows=[], error="", notice="", selected_id="")


_UNSET: Any = object()


def edit_form(
    state: ViewState,
    *,
    location: Optional[str] = None,
    start_date: Optional[date] = _UNSET,
    end_date: Optional[date] = _UNSET,
) -> ViewState:
    """Fold form edits into the state; an explicit ``None`` date clears that date."""

    changes: Dict[str, Any] = {}
    if location is not None:
        changes["location"] = location
    if start_date is not _UNSET:
        changes["start_date"] = start_date.isoformat() if start_date else ""
    if end_date is not _UNSET:
        changes["end_date"] = end_date.isoformat() if end_date else ""
    return replace(state, **changes) if changes else state


def select_query(state: ViewState, query_id: str) -> ViewState:
    state = replace(state, selected_id=query_id, notice="")
    query = state.selected_query
    if not query_id:
        return replace(state, location="", start_date="", end_date="", rows=[])
    if query is None:
        return state
    start, end = query_dates(query)
    return replace(
        state,
        location=query.get("location", ""),
        start_date=start,
        end_date=end,
        error="",
        rows=rows_from_samples(query.get("samples") or []),
    )


def begin(state: ViewState) -> ViewState:
    return replace(state, loading=True, error="", notice="")


def finish(state: ViewState) -> ViewState:
    return replace(state, loading=False)


def fail(state: ViewState, message: str) -> ViewState:
    return replace(state, error=message)


def with_saved_queries(state: ViewState, queries: List[Dict[str, Any]]) -> ViewState:
    return replace(state, saved_queries=list(queries))


def after_create(state: ViewState, query: Mapping[str, Any]) -> ViewState:
    return replace(state, rows=rows_from_samples(query.get("samples") or []))


def after_update(state: ViewState, query: Mapping[str, Any]) -> ViewState:
    saved = [dict(query) if item.get("id") == state.selected_id else item for item in state.saved_queries]
    return replace(
        state,
        saved_queries=saved,
        rows=rows_from_samples(query.get("samples") or []),
        notice="Query updated successfully!",
    )


def after_delete(state: ViewState) -> ViewState:
    remaining = [item for item in state.saved_queries if item.get("id") != state.selected_id]
    return replace(
        state,
        saved_queries=remaining,
        selected_id="",
        location="",
        start_date="",
        end_date="",
        rows=[],
        notice="Query deleted successfully!",
    )


def after_direct(state: ViewState, rows: List[Dict[str, Any]]) -> ViewState:
    return replace(state, rows=list(rows))


__all__ = [
    "INPUT_TYPES",
    "INPUT_TYPE_LABELS",
    "PLACEHOLDERS",
    "ViewState",
    "after_create",
    "after_delete",
    "after_direct",
    "after_update",
    "begin",
    "change_input_type",
    "edit_form",
    "fail",
    "finish",
    "placeholder_for",
    "query_dates",
    "query_label",
    "rows_from_samples",
    "select_query",
    "validate_date_range",
    "validate_location",
    "with_saved_queries",
]
