"""Database model for saved weather queries."""
from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class SavedQueryRecord(models.Model):
    """One saved lookup: raw input, resolved location, range and its daily samples.

    ``samples`` is kept as a JSON document (list of ``{date, temperature,
    description}`` objects) so a query is always read and written as a unit.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    location = models.CharField(max_length=255)
    latitude = models.FloatField()
    longitude = models.FloatField()
    city_name = models.CharField(max_length=255, blank=True, default="")
    country_code = models.CharField(max_length=16, blank=True, default="")
    start_date = models.DateField()
    end_date = models.DateField()
    samples = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True, editable=False)

    class Meta:
        db_table = "saved_queries"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.location} ({self.start_date} to {self.end_date})"
