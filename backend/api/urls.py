"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import QueryDetailView, QueryExportAllView, QueryExportView, QueryListView

# "queries/export" must precede the id routes or it would be taken for an id.
urlpatterns = [
    path("queries", QueryListView.as_view(), name="query-list"),
    path("queries/export", QueryExportAllView.as_view(), name="query-export-all"),
    path("queries/<str:query_id>", QueryDetailView.as_view(), name="query-detail"),
    path("queries/<str:query_id>/export", QueryExportView.as_view(), name="query-export"),
]
