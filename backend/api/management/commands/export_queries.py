"""Management command to export saved queries as CSV using the same stack as the API."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api import views
from backend.core.errors import QueryNotFound, WeatherQueryError
from backend.core.services.csv_export import EXPORT_ALL_FILENAME, export_filename


class Command(BaseCommand):
    help = "Export one or all saved weather queries as CSV"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--id", dest="query_id", type=str, help="Export only this query")
        parser.add_argument(
            "--output",
            type=str,
            help="Write to this file (or directory, using the API's default file name) instead of stdout",
        )

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        query_id = options.get("query_id")
        output = options.get("output")

        try:
            content = views.get_query_service().export(query_id)
        except QueryNotFound as exc:
            raise CommandError(f"Query not found: {query_id}") from exc
        except WeatherQueryError as exc:
            raise CommandError(f"Export failed: {exc}") from exc

        if not output:
            self.stdout.write(content, ending="")
            return

        path = Path(output)
        if path.is_dir():
            path = path / (export_filename(query_id) if query_id else EXPORT_ALL_FILENAME)
        path.write_text(content, encoding="utf-8")
        self.stderr.write(f"Wrote {path}")
