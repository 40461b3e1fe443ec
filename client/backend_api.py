"""HTTP client for the saved-query API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from client.config import BACKEND_URL, HTTP_TIMEOUT_S


logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """Raised when the saved-query API answers with an error."""


class BackendClient:
    def __init__(
        self,
        base_url: str = BACKEND_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT_S,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # -- Public API -----------------------------------------------------
    def create_query(self, location: str, start_date: str, end_date: str) -> Dict[str, Any]:
        body = {"location": location, "startDate": start_date, "endDate": end_date}
        response = self._send("POST", self.base_url, json=body)
        return self._json_or_raise(response, "Failed to create weather query")

    def list_queries(self) -> List[Dict[str, Any]]:
        response = self._send("GET", self.base_url)
        if not response.ok:
            raise BackendError("Failed to fetch queries")
        return response.json()

    def update_query(self, query_id: str, location: str, start_date: str, end_date: str) -> Dict[str, Any]:
        body = {"location": location, "startDate": start_date, "endDate": end_date}
        response = self._send("PUT", f"{self.base_url}/{query_id}", json=body)
        return self._json_or_raise(response, "Failed to update query")

    def delete_query(self, query_id: str) -> Dict[str, Any]:
        response = self._send("DELETE", f"{self.base_url}/{query_id}")
        return self._json_or_raise(response, "Failed to delete query")

    def export_query_csv(self, query_id: str) -> bytes:
        response = self._send(
            "GET",
            f"{self.base_url}/{query_id}/export",
            headers={"Accept": "text/csv"},
        )
        if not response.ok:
            raise BackendError(response.text or "Failed to export CSV")
        return response.content

    # -- helpers --------------------------------------------------------
    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise BackendError(f"Could not reach the weather backend: {exc}") from exc

    @staticmethod
    def _json_or_raise(response: requests.Response, fallback: str) -> Dict[str, Any]:
        if response.ok:
            return response.json()
        try:
            message = (response.json() or {}).get("error")
        except ValueError:
            message = None
        raise BackendError(message or fallback)


__all__ = ["BackendClient", "BackendError"]
