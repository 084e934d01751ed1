"""
======================================================
PATH: comics/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Comic catalog tables

Purpose:
- Comic (catalog entry) + ComicPage (ordered page images)
- ComicLike / ComicComment (engagement)
- ComicView (append-only view log)
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
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Comic",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=280, unique=True)),
                ("author", models.CharField(blank=True, default="", max_length=255)),
                ("genre", models.CharField(blank=True, default="", max_length=100)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("description", models.TextField(blank=True, default="")),
                ("language", models.CharField(default="en", max_length=10)),
                ("publisher", models.CharField(blank=True, default="", max_length=255)),
                ("publication_year", models.PositiveIntegerField(blank=True, null=True)),
                ("issue_number", models.PositiveIntegerField(blank=True, null=True)),
                ("series", models.CharField(blank=True, default="", max_length=255)),
                ("page_count", models.PositiveIntegerField(default=0)),
                ("is_free", models.BooleanField(default=False)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=8,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("is_visible", models.BooleanField(default=True)),
                ("has_mature_content", models.BooleanField(default=False)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("cover_image", models.CharField(blank=True, default="", max_length=500)),
                ("average_rating", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=3)),
                ("total_ratings", models.PositiveIntegerField(default=0)),
                ("total_readers", models.PositiveIntegerField(default=0)),
                ("view_count", models.PositiveIntegerField(default=0)),
                ("likes_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_visible", "created_at"], name="comics_visible_created_idx"),
                    models.Index(fields=["genre"], name="comics_genre_idx"),
                    models.Index(fields=["author"], name="comics_author_idx"),
                    models.Index(fields=["is_free"], name="comics_is_free_idx"),
                    models.Index(fields=["average_rating"], name="comics_avg_rating_idx"),
                    models.Index(fields=["published_at"], name="comics_published_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ComicPage",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("page_number", models.PositiveIntegerField()),
                ("image_url", models.CharField(blank=True, default="", max_length=500)),
                ("image_path", models.CharField(blank=True, default="", max_length=500)),
                ("width", models.PositiveIntegerField(blank=True, null=True)),
                ("height", models.PositiveIntegerField(blank=True, null=True)),
                ("file_size", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pages",
                        to="comics.comic",
                    ),
                ),
            ],
            options={
                "ordering": ["comic", "page_number"],
                "constraints": [
                    models.UniqueConstraint(fields=("comic", "page_number"), name="uniq_comic_page_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ComicLike",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="likes",
                        to="comics.comic",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comic_likes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "comic"), name="uniq_comic_like_per_user"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ComicComment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "content",
                    models.TextField(
                        validators=[
                            django.core.validators.MinLengthValidator(1),
                            django.core.validators.MaxLengthValidator(1000),
                        ]
                    ),
                ),
                ("is_spoiler", models.BooleanField(default=False)),
                ("is_approved", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comments",
                        to="comics.comic",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comic_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["comic", "is_approved", "created_at"], name="comics_comment_feed_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ComicView",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("session_key", models.CharField(blank=True, default="", max_length=64)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, default="", max_length=500)),
                ("viewed_at", models.DateTimeField(db_index=True)),
                (
                    "comic",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="views",
                        to="comics.comic",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="comic_views",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-viewed_at"],
                "indexes": [
                    models.Index(fields=["comic", "viewed_at"], name="comics_view_comic_time_idx"),
                    models.Index(fields=["user", "viewed_at"], name="comics_view_user_time_idx"),
                ],
            },
        ),
    ]
