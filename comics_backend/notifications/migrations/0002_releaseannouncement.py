"""
======================================================
PATH: notifications/migrations/0002_releaseannouncement.py
======================================================
MIGRATION: CREATE ReleaseAnnouncement
"""

from __future__ import annotations

import uuid

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("comics", "0001_initial"),
        ("notifications", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReleaseAnnouncement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("recipients", models.PositiveIntegerField(default=0)),
                ("announced_at", models.DateTimeField(auto_now_add=True)),
                (
                    "comic",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="release_announcement",
                        to="comics.comic",
                    ),
                ),
            ],
            options={
                "ordering": ["-announced_at"],
            },
        ),
    ]
