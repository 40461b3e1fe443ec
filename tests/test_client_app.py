from __future__ import annotations

import importlib
from contextlib import nullcontext

from client.viewmodel import ViewState

app_module = importlib.import_module("client.app")


class DummySt:
    """Minimal stand-in for the streamlit calls the page makes."""

    def __init__(self, pressed=()) -> None:
        self.session_state: dict[str, object] = {}
        self.pressed = set(pressed)
        self.errors: list[str] = []
        self.successes: list[str] = []
        self.metrics: list[tuple[str, str]] = []
        self.downloads: list[dict] = []
        self.reruns = 0

    def title(self, text):
        pass

    def subheader(self, text):
        pass

    def caption(self, text):
        pass

    def selectbox(self, label, options, index=0, format_func=str, disabled=False):
        return options[index]

    def text_input(self, label, value="", placeholder="", disabled=False):
        return value

    def date_input(self, label, value=None, disabled=False):
        return value

    def columns(self, count):
        return [nullcontext() for _ in range(count)]

    def spinner(self, text):
        return nullcontext()

    def button(self, label, disabled=False):
        return label in self.pressed and not disabled

    def checkbox(self, label, value=False):
        return label in self.pressed

    def download_button(self, label, data, file_name, mime):
        self.downloads.append({"data": data, "file_name": file_name, "mime": mime})

    def metric(self, label, value):
        self.metrics.append((label, value))

    def error(self, text):
        self.errors.append(text)

    def success(self, text):
        self.successes.append(text)

    def rerun(self):
        self.reruns += 1


class FakeBackend:
    def __init__(self) -> None:
        self.created = []

    def list_queries(self):
        return []

    def create_query(self, location, start_date, end_date):
        self.created.append(location)
        return {
            "id": "q1",
            "location": location,
            "dateRange": {"startDate": start_date, "endDate": end_date},
            "samples": [{"date": start_date, "temperature": 41.0, "description": "clear sky"}],
        }

    def export_query_csv(self, query_id):
        return b"csv"


def test_render_shows_saved_rows(monkeypatch):
    dummy_st = DummySt()
    monkeypatch.setattr(app_module, "st", dummy_st)
    state = ViewState(rows=[{"date": "2024-01-01", "temperature": 41.0, "description": "clear sky"}])

    app_module.render(state, FakeBackend(), direct=None)

    assert dummy_st.metrics == [("2024-01-01", "41.0°F")]
    assert dummy_st.errors == []


def test_save_button_creates_query(monkeypatch):
    dummy_st = DummySt(pressed={"Get & Save Weather"})
    monkeypatch.setattr(app_module, "st", dummy_st)
    backend = FakeBackend()
    state = ViewState(location="New York", start_date="2024-01-01", end_date="2024-01-02")

    state = app_module.render(state, backend, direct=None)

    assert backend.created == ["New York"]
    assert state.rows[0]["description"] == "clear sky"
    assert dummy_st.metrics == [("2024-01-01", "41.0°F")]


def test_validation_error_is_shown(monkeypatch):
    dummy_st = DummySt(pressed={"Get & Save Weather"})
    monkeypatch.setattr(app_module, "st", dummy_st)

    app_module.render(ViewState(), FakeBackend(), direct=None)

    assert dummy_st.errors == ["Please enter a location."]


def test_export_offers_download_for_selected_query(monkeypatch):
    dummy_st = DummySt(pressed={"Export CSV"})
    monkeypatch.setattr(app_module, "st", dummy_st)
    saved = [{"id": "q1", "location": "Paris", "dateRange": {}, "samples": []}]

    app_module.render(ViewState(saved_queries=saved, selected_id="q1"), FakeBackend(), direct=None)

    assert dummy_st.downloads == [{"data": b"csv", "file_name": "weather_query_q1.csv", "mime": "text/csv"}]


def test_load_state_fetches_saved_queries_once(monkeypatch):
    dummy_st = DummySt()
    monkeypatch.setattr(app_module, "st", dummy_st)

    first = app_module.load_state(FakeBackend())
    app_module.commit(ViewState(location="kept"))
    second = app_module.load_state(FakeBackend())

    assert first == ViewState()
    assert second.location == "kept"
    assert dummy_st.reruns == 0
