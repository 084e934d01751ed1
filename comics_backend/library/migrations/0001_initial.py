"""
======================================================
PATH: library/migrations/0001_initial.py
======================================================
MIGRATION: CREATE UserLibrary, UserComicProgress, ComicBookmark
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("comics", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserLibrary",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "access_type",
                    models.CharField(
                        choices=[
                            ("free", "Free"),
                            ("purchased", "Purchased"),
                            ("subscription", "Subscription"),
                            ("reading", "Reading"),
                        ],
                        default="free",
                        max_length=20,
                    ),
                ),
                ("purchase_price", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("purchased_at", models.DateTimeField(blank=True, null=True)),
                ("access_expires_at", models.DateTimeField(blank=True, null=True)),
                ("is_favorite", models.BooleanField(default=False)),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                (
                    "review",
                    models.TextField(
                        blank=True,
                        default="",
                        validators=[django.core.validators.MaxLengthValidator(1000)],
                    ),
                ),
                ("last_accessed_at", models.DateTimeField(blank=True, null=True)),
                ("total_reading_time", models.PositiveIntegerField(default=0, help_text="Seconds.")),
                (
                    "completion_percentage",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="library_entries",
                        to="comics.comic",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="library_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "comic"), name="uniq_library_user_comic"),
                ],
                "indexes": [
                    models.Index(fields=["user", "is_favorite"], name="library_user_fav_idx"),
                    models.Index(fields=["user", "access_type"], name="library_user_access_idx"),
                    models.Index(fields=["user", "last_accessed_at"], name="library_user_accessed_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserComicProgress",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("current_page", models.PositiveIntegerField(default=1)),
                ("total_pages", models.PositiveIntegerField(default=0)),
                (
                    "progress_percentage",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5),
                ),
                ("is_completed", models.BooleanField(default=False)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("is_bookmarked", models.BooleanField(default=False)),
                ("reading_time_minutes", models.PositiveIntegerField(default=0)),
                ("first_read_at", models.DateTimeField(blank=True, null=True)),
                ("last_read_at", models.DateTimeField(blank=True, null=True)),
                ("reading_sessions", models.JSONField(blank=True, default=list)),
                ("total_reading_sessions", models.PositiveIntegerField(default=0)),
                (
                    "average_session_duration",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=8),
                ),
                (
                    "pages_per_session_avg",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=8),
                ),
                (
                    "reading_speed",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Pages per minute across ended sessions.",
                        max_digits=8,
                    ),
                ),
                ("total_time_paused_minutes", models.PositiveIntegerField(default=0)),
                ("bookmark_count", models.PositiveIntegerField(default=0)),
                ("last_bookmark_at", models.DateTimeField(blank=True, null=True)),
                ("reading_preferences", models.JSONField(blank=True, default=dict)),
                ("reading_metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="progress_records",
                        to="comics.comic",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reading_progress",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-last_read_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "comic"), name="uniq_progress_user_comic"),
                ],
                "indexes": [
                    models.Index(fields=["user", "last_read_at"], name="progress_user_last_read_idx"),
                    models.Index(fields=["user", "is_completed"], name="progress_user_done_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ComicBookmark",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("page_number", models.PositiveIntegerField()),
                (
                    "note",
                    models.TextField(
                        blank=True,
                        default="",
                        validators=[django.core.validators.MaxLengthValidator(500)],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookmarks",
                        to="comics.comic",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comic_bookmarks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["comic", "page_number"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "comic", "page_number"),
                        name="uniq_bookmark_user_comic_page",
                    ),
                ],
            },
        ),
    ]
