"""Button handlers: validate, call a client, fold the result into the view-model."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from client.backend_api import BackendClient, BackendError
from client.direct_weather import DirectWeatherClient, DirectWeatherError
from client.viewmodel import (
    ViewState,
    after_create,
    after_delete,
    after_direct,
    after_update,
    begin,
    fail,
    finish,
    validate_date_range,
    validate_location,
    with_saved_queries,
)


logger = logging.getLogger(__name__)

ClientErrors = (BackendError, DirectWeatherError)


def _run(
    state: ViewState,
    call: Callable[[], Any],
    apply: Callable[[ViewState, Any], ViewState],
    fallback: str,
) -> ViewState:
    """Run ``call`` with the loading flag set; errors end up in the banner."""

    current = begin(state)
    try:
        current = apply(current, call())
    except ClientErrors as exc:
        logger.warning("%s: %s", fallback, exc)
        current = fail(current, str(exc) or fallback)
    finally:
        current = finish(current)
    return current


def _check(state: ViewState, *validators: Callable[[ViewState], Optional[str]]) -> Optional[ViewState]:
    for validator in validators:
        message = validator(state)
        if message:
            return fail(state, message)
    return None


def load_saved_queries(state: ViewState, backend: BackendClient) -> ViewState:
    try:
        return with_saved_queries(state, backend.list_queries())
    except BackendError as exc:
        logger.warning("Failed to load saved queries: %s", exc)
        return fail(state, f"Failed to load saved queries: {exc}")


def save_weather(state: ViewState, backend: BackendClient) -> ViewState:
    invalid = _check(state, validate_location, validate_date_range)
    if invalid:
        return invalid
    location = state.location.strip()

    def apply(current: ViewState, query: Any) -> ViewState:
        return load_saved_queries(after_create(current, query), backend)

    return _run(
        state,
        lambda: backend.create_query(location, state.start_date, state.end_date),
        apply,
        "Could not fetch weather from backend.",
    )


def update_selected(state: ViewState, backend: BackendClient) -> ViewState:
    if not state.selected_id:
        return fail(state, "Please select a query to update.")
    invalid = _check(state, validate_location, validate_date_range)
    if invalid:
        return invalid
    location = state.location.strip()
    return _run(
        state,
        lambda: backend.update_query(state.selected_id, location, state.start_date, state.end_date),
        after_update,
        "Failed to update query.",
    )


def delete_selected(state: ViewState, backend: BackendClient, confirmed: bool) -> ViewState:
    if not state.selected_id:
        return fail(state, "Please select a query to delete.")
    if not confirmed:
        return fail(state, "Please confirm that you want to delete this query.")
    return _run(
        state,
        lambda: backend.delete_query(state.selected_id),
        lambda current, _: after_delete(current),
        "Failed to delete query.",
    )


def export_selected(state: ViewState, backend: BackendClient) -> Tuple[ViewState, Optional[bytes]]:
    if not state.selected_id:
        return fail(state, "Please select a saved query before exporting."), None
    exported: dict[str, bytes] = {}

    def apply(current: ViewState, content: bytes) -> ViewState:
        exported["csv"] = content
        return current

    state = _run(state, lambda: backend.export_query_csv(state.selected_id), apply, "Export failed.")
    return state, exported.get("csv")


def current_weather(state: ViewState, direct: DirectWeatherClient) -> ViewState:
    invalid = _check(state, validate_location)
    if invalid:
        return invalid
    location = state.location.strip()
    return _run(state, lambda: direct.current_weather(location), after_direct, "Failed to fetch current weather.")


def five_day_forecast(state: ViewState, direct: DirectWeatherClient) -> ViewState:
    invalid = _check(state, validate_location)
    if invalid:
        return invalid
    location = state.location.strip()
    return _run(state, lambda: direct.five_day_forecast(location), after_direct, "Failed to fetch 5-day forecast.")


def export_filename(query_id: str) -> str:
    return f"weather_query_{query_id}.csv"


__all__ = [
    "current_weather",
    "delete_selected",
    "export_filename",
    "export_selected",
    "five_day_forecast",
    "load_saved_queries",
    "save_weather",
    "update_selected",
]
