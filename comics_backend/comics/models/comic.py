# comics/models/comic.py

"""
======================================================
PATH: comics/models/comic.py
======================================================
COMIC MODEL

Rules:
- slug is generated from the title on first save and stays unique
  (numeric suffix on collision). It is never regenerated on later saves.
- average_rating / total_ratings are denormalized aggregates. They are
  recalculated by the rating + review services, never edited by hand.
- likes_count / view_count / total_readers are counters updated with F()
  expressions so concurrent requests do not lose increments.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.files.storage import default_storage
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Avg, Count, F
from django.utils import timezone
from django.utils.text import slugify

TWOPLACES = Decimal("0.01")

# Rough per-page reading time used for estimates.
MINUTES_PER_PAGE = 2


class ComicQuerySet(models.QuerySet):
    def visible(self):
        return self.filter(is_visible=True)

    def free(self):
        return self.filter(is_free=True)

    def paid(self):
        return self.filter(is_free=False)

    def published(self):
        return self.filter(published_at__isnull=False, published_at__lte=timezone.now())


class Comic(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True, blank=True)
    author = models.CharField(max_length=255, blank=True, default="")
    genre = models.CharField(max_length=100, blank=True, default="")
    tags = models.JSONField(default=list, blank=True)
    description = models.TextField(blank=True, default="")
    language = models.CharField(max_length=10, default="en")

    publisher = models.CharField(max_length=255, blank=True, default="")
    publication_year = models.PositiveIntegerField(null=True, blank=True)
    issue_number = models.PositiveIntegerField(null=True, blank=True)
    series = models.CharField(max_length=255, blank=True, default="")

    page_count = models.PositiveIntegerField(default=0)

    is_free = models.BooleanField(default=False)
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_visible = models.BooleanField(default=True)
    has_mature_content = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)

    # URL (remote CDN) or a default_storage path.
    cover_image = models.CharField(max_length=500, blank=True, default="")

    average_rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    total_ratings = models.PositiveIntegerField(default=0)
    total_readers = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)
    likes_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ComicQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_visible", "created_at"], name="comics_visible_created_idx"),
            models.Index(fields=["genre"], name="comics_genre_idx"),
            models.Index(fields=["author"], name="comics_author_idx"),
            models.Index(fields=["is_free"], name="comics_is_free_idx"),
            models.Index(fields=["average_rating"], name="comics_avg_rating_idx"),
            models.Index(fields=["published_at"], name="comics_published_idx"),
        ]

    def __str__(self):
        return self.title

    # ---------------- SLUG ----------------
    def _build_unique_slug(self) -> str:
        base = slugify(self.title)[:250] or "comic"
        candidate = base
        i = 1
        while Comic.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
            i += 1
            candidate = f"{base}-{i}"
        return candidate

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._build_unique_slug()
        if self.is_free:
            self.price = Decimal("0.00")
        super().save(*args, **kwargs)

    # ---------------- TAGS ----------------
    def get_tags(self) -> list[str]:
        """Tags are stored as a JSON list; legacy comma strings are tolerated."""
        tags = self.tags
        if not tags:
            return []
        if isinstance(tags, str):
            tags = tags.split(",")
        return [str(t).strip() for t in tags if str(t).strip()]

    # ---------------- MEDIA ----------------
    @property
    def cover_image_url(self) -> str:
        return resolve_media_url(self.cover_image)

    def page_urls(self) -> list[str]:
        return [p.url for p in self.pages.order_by("page_number")]

    @property
    def reading_time_estimate(self) -> int:
        return (self.page_count or 0) * MINUTES_PER_PAGE

    @property
    def is_published(self) -> bool:
        return self.published_at is not None and self.published_at <= timezone.now()

    # ---------------- COUNTERS ----------------
    def increment_counter(self, field: str, by: int = 1) -> None:
        Comic.objects.filter(pk=self.pk).update(**{field: F(field) + by})
        self.refresh_from_db(fields=[field])

    def decrement_counter(self, field: str, by: int = 1) -> None:
        Comic.objects.filter(pk=self.pk, **{f"{field}__gte": by}).update(**{field: F(field) - by})
        self.refresh_from_db(fields=[field])

    # ---------------- RATINGS ----------------
    def _store_rating(self, avg, total: int) -> None:
        average = Decimal(str(avg or 0)).quantize(TWOPLACES)
        # queryset update: no slug regeneration, no updated_at churn
        Comic.objects.filter(pk=self.pk).update(average_rating=average, total_ratings=total)
        self.average_rating = average
        self.total_ratings = total

    def update_rating_from_library(self) -> None:
        """Quick star ratings left on library entries."""
        agg = self.library_entries.filter(rating__isnull=False).aggregate(
            avg=Avg("rating"), total=Count("id")
        )
        self._store_rating(agg["avg"], agg["total"])

    def update_rating_from_reviews(self) -> None:
        """Approved written reviews."""
        agg = self.reviews.filter(is_approved=True).aggregate(avg=Avg("rating"), total=Count("id"))
        self._store_rating(agg["avg"], agg["total"])


def resolve_media_url(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return ""
    if value.startswith(("http://", "https://", "/")):
        return value
    return default_storage.url(value)
