"""Initial schema for saved weather queries."""
from __future__ import annotations

import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SavedQueryRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("location", models.CharField(max_length=255)),
                ("latitude", models.FloatField()),
                ("longitude", models.FloatField()),
                ("city_name", models.CharField(blank=True, default="", max_length=255)),
                ("country_code", models.CharField(blank=True, default="", max_length=16)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("samples", models.JSONField(blank=True, default=list)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False),
                ),
            ],
            options={
                "db_table": "saved_queries",
                "ordering": ["-created_at"],
            },
        ),
    ]
