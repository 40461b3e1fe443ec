"""DRF exception handler that keeps error bodies in the ``{"error": ...}`` shape."""
from __future__ import annotations

from rest_framework.exceptions import ParseError
from rest_framework.views import exception_handler

from backend.core.schemas import MISSING_FIELDS_MESSAGE


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None
    if isinstance(exc, ParseError):
        # An unreadable body carries none of the required fields.
        response.data = {"error": MISSING_FIELDS_MESSAGE}
    elif isinstance(response.data, dict) and "detail" in response.data:
        response.data = {"error": str(response.data["detail"])}
    return response


__all__ = ["api_exception_handler"]
