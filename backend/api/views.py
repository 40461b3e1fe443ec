"""REST API views for saved weather queries."""
from __future__ import annotations

import logging
from datetime import timezone
from functools import lru_cache
from typing import Any, Dict

from django.conf import settings
from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.core.abstractions import SavedQuery
from backend.core.errors import QueryNotFound, StoreError, ValidationError, WeatherQueryError
from backend.core.providers.base import RequestConfig
from backend.core.providers.openweather import OpenWeatherForecastProvider, OpenWeatherGeocoder
from backend.core.services.csv_export import EXPORT_ALL_FILENAME, export_filename
from backend.core.services.query_service import QueryService
from backend.core.store import QueryStore


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Query not found"


@lru_cache(maxsize=1)
def get_query_service() -> QueryService:
    request_config = RequestConfig(timeout=settings.OPENWEATHER_TIMEOUT)
    geocoder = OpenWeatherGeocoder(
        api_key=settings.OPENWEATHER_API_KEY,
        base_url=settings.OPENWEATHER_GEO_URL,
        request_config=request_config,
    )
    forecast = OpenWeatherForecastProvider(
        api_key=settings.OPENWEATHER_API_KEY,
        base_url=settings.OPENWEATHER_FORECAST_URL,
        units=settings.OPENWEATHER_UNITS,
        request_config=request_config,
    )
    return QueryService(geocoder=geocoder, forecast=forecast, store=QueryStore())


def serialize_query(query: SavedQuery) -> Dict[str, Any]:
    resolved = query.resolved_location
    return {
        "id": query.id,
        "location": query.location,
        "resolvedLocation": {
            "latitude": resolved.latitude,
            "longitude": resolved.longitude,
            "cityName": resolved.city_name,
            "countryCode": resolved.country_code,
        },
        "dateRange": {
            "startDate": query.date_range.start.isoformat(),
            "endDate": query.date_range.end.isoformat(),
        },
        "samples": [
            {
                "date": sample.date.isoformat(),
                "temperature": sample.temperature,
                "description": sample.description,
            }
            for sample in query.samples
        ],
        "createdAt": query.created_at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


def _error(message: str, code: int) -> Response:
    return Response({"error": message}, status=code)


class QueryListView(APIView):
    """List saved queries or create a new one."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        try:
            queries = get_query_service().list()
        except WeatherQueryError:
            logger.exception("Failed to list queries")
            return _error("Failed to get queries", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response([serialize_query(query) for query in queries], status=status.HTTP_200_OK)

    def post(self, request, *args, **kwargs):
        try:
            query = get_query_service().create(request.data)
        except ValidationError as exc:
            return _error(str(exc), status.HTTP_400_BAD_REQUEST)
        except WeatherQueryError as exc:
            # Location-not-found and upstream failures share the generic 500.
            logger.exception("Failed to create query")
            return _error(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(serialize_query(query), status=status.HTTP_201_CREATED)


class QueryDetailView(APIView):
    """Read, replace or remove one saved query."""

    permission_classes = [AllowAny]

    def get(self, request, query_id: str, *args, **kwargs):
        try:
            query = get_query_service().get(query_id)
        except QueryNotFound:
            return _error(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
        except StoreError:
            logger.exception("Failed to get query %s", query_id)
            return _error("Failed to get query", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(serialize_query(query), status=status.HTTP_200_OK)

    def put(self, request, query_id: str, *args, **kwargs):
        try:
            query = get_query_service().update(query_id, request.data)
        except ValidationError as exc:
            return _error(str(exc), status.HTTP_400_BAD_REQUEST)
        except QueryNotFound:
            return _error(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
        except WeatherQueryError as exc:
            logger.exception("Failed to update query %s", query_id)
            return _error(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(serialize_query(query), status=status.HTTP_200_OK)

    def delete(self, request, query_id: str, *args, **kwargs):
        try:
            get_query_service().delete(query_id)
        except QueryNotFound:
            return _error(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
        except StoreError:
            logger.exception("Failed to delete query %s", query_id)
            return _error("Failed to delete query", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"message": "Query deleted successfully"}, status=status.HTTP_200_OK)


class _CSVExportView(APIView):
    permission_classes = [AllowAny]

    def perform_content_negotiation(self, request, force=False):
        # Downloads ask for ``Accept: text/csv``; error bodies still go out as JSON.
        return super().perform_content_negotiation(request, force=True)

    @staticmethod
    def _csv_response(content: str, filename: str) -> HttpResponse:
        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


class QueryExportAllView(_CSVExportView):
    def get(self, request, *args, **kwargs):
        try:
            content = get_query_service().export()
        except WeatherQueryError:
            logger.exception("Failed to export queries")
            return _error("Failed to export data", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return self._csv_response(content, EXPORT_ALL_FILENAME)


class QueryExportView(_CSVExportView):
    def get(self, request, query_id: str, *args, **kwargs):
        try:
            content = get_query_service().export(query_id)
        except QueryNotFound:
            return _error(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
        except WeatherQueryError:
            logger.exception("Failed to export query %s", query_id)
            return _error("Failed to export query", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return self._csv_response(content, export_filename(query_id))
