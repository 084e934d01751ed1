# library/models/library.py

"""
======================================================
PATH: library/models/library.py
======================================================
USER LIBRARY ENTRY

One row per (user, comic). The access_type decides whether the entry
unlocks a paid comic:

- free          always (only created for free comics)
- purchased     once purchased_at is set (payments.grant_access)
- subscription  until access_expires_at (open-ended when null)
- reading       never for paid comics; the comic is only being tracked
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxLengthValidator, MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

MIN_RATING = 1
MAX_RATING = 5


class UserLibrary(models.Model):
    ACCESS_FREE = "free"
    ACCESS_PURCHASED = "purchased"
    ACCESS_SUBSCRIPTION = "subscription"
    ACCESS_READING = "reading"

    ACCESS_TYPE_CHOICES = [
        (ACCESS_FREE, "Free"),
        (ACCESS_PURCHASED, "Purchased"),
        (ACCESS_SUBSCRIPTION, "Subscription"),
        (ACCESS_READING, "Reading"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="library_entries",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="library_entries",
    )

    access_type = models.CharField(max_length=20, choices=ACCESS_TYPE_CHOICES, default=ACCESS_FREE)
    purchase_price = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    purchased_at = models.DateTimeField(null=True, blank=True)
    access_expires_at = models.DateTimeField(null=True, blank=True)

    is_favorite = models.BooleanField(default=False)
    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)],
    )
    review = models.TextField(blank=True, default="", validators=[MaxLengthValidator(1000)])

    last_accessed_at = models.DateTimeField(null=True, blank=True)
    total_reading_time = models.PositiveIntegerField(default=0, help_text="Seconds.")
    completion_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "comic"], name="uniq_library_user_comic"),
        ]
        indexes = [
            models.Index(fields=["user", "is_favorite"], name="library_user_fav_idx"),
            models.Index(fields=["user", "access_type"], name="library_user_access_idx"),
            models.Index(fields=["user", "last_accessed_at"], name="library_user_accessed_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.comic_id} ({self.access_type})"

    # ---------------- ACCESS ----------------
    def has_access(self) -> bool:
        if self.access_type == self.ACCESS_FREE:
            return True
        if self.access_type == self.ACCESS_PURCHASED:
            return self.purchased_at is not None
        if self.access_type == self.ACCESS_SUBSCRIPTION:
            return self.access_expires_at is None or self.access_expires_at > timezone.now()
        # reading: tracking only
        return bool(self.comic.is_free)

    # ---------------- RATING ----------------
    @staticmethod
    def clamp_rating(value) -> int:
        return max(MIN_RATING, min(MAX_RATING, int(value)))
