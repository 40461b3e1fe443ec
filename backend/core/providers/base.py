from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response

from backend.core.errors import UpstreamError


@dataclass
class RequestConfig:
    # No retries: a failed upstream call fails the whole request.
    timeout: float = 10.0


class OpenWeatherProvider:
    """Base class for OpenWeather HTTP adapters.

    Wraps a :class:`requests.Session`, applies the configured timeout and turns
    transport failures and error statuses into :class:`UpstreamError`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.api_key = api_key
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text[:500])
            raise UpstreamError(self._error_message(response))
        return response

    def _request(self, method: str, url: str, params: dict[str, Any]) -> Response:
        params = {**params, "appid": self.api_key}
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                timeout=self.request_config.timeout,
            )
        except requests.Timeout as exc:
            self._log.error("Request to %s timed out", url, exc_info=exc)
            raise UpstreamError("Weather service timed out") from exc
        except requests.RequestException as exc:
            self._log.error("Request to %s failed", url, exc_info=exc)
            raise UpstreamError("Weather service request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise UpstreamError("Weather service returned invalid JSON") from exc

    @staticmethod
    def _error_message(response: Response) -> str:
        # OpenWeather reports failures as {"cod": ..., "message": ...}
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return f"HTTP {response.status_code}"


__all__ = ["OpenWeatherProvider", "RequestConfig"]
