"""Streamlit front end for saved weather queries.

Run with ``streamlit run client/app.py``.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import streamlit as st

from client import actions
from client.backend_api import BackendClient
from client.direct_weather import DirectWeatherClient
from client.viewmodel import (
    INPUT_TYPE_LABELS,
    INPUT_TYPES,
    ViewState,
    change_input_type,
    edit_form,
    placeholder_for,
    query_label,
    select_query,
)

STATE_KEY = "weather_view"
EXPORT_KEY = "weather_export"


def _as_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def load_state(backend: BackendClient) -> ViewState:
    """Restore the view-model from the session, loading saved queries on first visit."""

    if STATE_KEY not in st.session_state:
        state = actions.load_saved_queries(ViewState(), backend)
        st.session_state[STATE_KEY] = state.to_dict()
        return state
    return ViewState.from_dict(st.session_state[STATE_KEY])


def commit(state: ViewState, rerun: bool = False) -> None:
    st.session_state[STATE_KEY] = state.to_dict()
    if rerun:
        st.rerun()


def render_rows(rows: List[Dict[str, Any]]) -> None:
    if not rows:
        return
    st.subheader("Weather Data")
    columns = st.columns(3)
    for index, row in enumerate(rows):
        with columns[index % 3]:
            temperature = row.get("temperature")
            shown = "-" if temperature is None else f"{temperature}°F"
            st.metric(label=str(row.get("date", "")), value=shown)
            st.caption(str(row.get("description", "")).capitalize())


def render_form(state: ViewState) -> ViewState:
    """Draw the inputs and fold any edits back into the view-model."""

    input_type = st.selectbox(
        "Select input type:",
        INPUT_TYPES,
        index=INPUT_TYPES.index(state.input_type) if state.input_type in INPUT_TYPES else 0,
        format_func=lambda value: INPUT_TYPE_LABELS[value],
    )
    if input_type != state.input_type:
        state = change_input_type(state, input_type)

    location = st.text_input(
        "Location",
        value=state.location,
        placeholder=placeholder_for(state.input_type),
        disabled=state.loading,
    )
    col1, col2 = st.columns(2)
    with col1:
        start = st.date_input("Start Date:", value=_as_date(state.start_date), disabled=state.loading)
    with col2:
        end = st.date_input("End Date:", value=_as_date(state.end_date), disabled=state.loading)
    state = edit_form(state, location=location, start_date=start, end_date=end)

    options = [""] + [str(query.get("id")) for query in state.saved_queries]
    labels = {str(query.get("id")): query_label(query) for query in state.saved_queries}
    selected = st.selectbox(
        "Select saved query to update/delete:",
        options,
        index=options.index(state.selected_id) if state.selected_id in options else 0,
        format_func=lambda value: labels.get(value, "-- Select Query --"),
        disabled=state.loading,
    )
    if selected != state.selected_id:
        state = select_query(state, selected)
        commit(state, rerun=True)
    return state


def render(state: ViewState, backend: BackendClient, direct: DirectWeatherClient) -> ViewState:
    st.title("🌤️ Weather App")
    state = render_form(state)

    saved_cols = st.columns(4)
    with saved_cols[0]:
        if st.button("Get & Save Weather", disabled=state.loading):
            with st.spinner("Loading weather data..."):
                state = actions.save_weather(state, backend)
    if state.selected_id:
        with saved_cols[1]:
            if st.button("Update Selected Query", disabled=state.loading):
                with st.spinner("Loading weather data..."):
                    state = actions.update_selected(state, backend)
        with saved_cols[2]:
            confirmed = st.checkbox("Confirm delete", value=False)
            if st.button("Delete Selected Query", disabled=state.loading):
                state = actions.delete_selected(state, backend, confirmed)
                if not state.error:
                    commit(state, rerun=True)
    with saved_cols[3]:
        if st.button("Export CSV", disabled=state.loading or not state.selected_id):
            state, content = actions.export_selected(state, backend)
            if content is not None:
                st.session_state[EXPORT_KEY] = {"id": state.selected_id, "content": content}

    export = st.session_state.get(EXPORT_KEY)
    if export and export.get("id") == state.selected_id:
        st.download_button(
            "Download CSV",
            data=export["content"],
            file_name=actions.export_filename(export["id"]),
            mime="text/csv",
        )

    direct_cols = st.columns(2)
    with direct_cols[0]:
        if st.button("Get Current Weather (No Save)", disabled=state.loading):
            with st.spinner("Loading weather data..."):
                state = actions.current_weather(state, direct)
    with direct_cols[1]:
        if st.button("Get 5-Day Forecast (No Save)", disabled=state.loading):
            with st.spinner("Loading weather data..."):
                state = actions.five_day_forecast(state, direct)

    if state.error:
        st.error(state.error)
    if state.notice:
        st.success(state.notice)

    render_rows(state.rows)
    return state


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    st.set_page_config(page_title="Weather App", page_icon="🌤️")
    backend = BackendClient()
    direct = DirectWeatherClient()
    state = render(load_state(backend), backend, direct)
    commit(state)


if __name__ == "__main__":
    main()
