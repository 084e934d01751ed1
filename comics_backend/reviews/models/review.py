# reviews/models/review.py

"""
======================================================
PATH: reviews/models/review.py
======================================================
COMIC REVIEW

Moderation state is derived from (is_approved, moderated_at):

    approved   is_approved = True
    pending    is_approved = False, moderated_at is null
    rejected   is_approved = False, moderated_at is set

helpful_votes / total_votes are recalculated from ReviewVote rows by the
review service; they are never incremented blindly.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import (
    MaxLengthValidator,
    MaxValueValidator,
    MinLengthValidator,
    MinValueValidator,
)
from django.db import models


class ComicReview(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="reviews",
    )

    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    title = models.CharField(max_length=255, blank=True, default="")
    content = models.TextField(validators=[MinLengthValidator(10), MaxLengthValidator(5000)])
    is_spoiler = models.BooleanField(default=False)

    helpful_votes = models.PositiveIntegerField(default=0)
    total_votes = models.PositiveIntegerField(default=0)

    is_approved = models.BooleanField(default=False)
    moderated_at = models.DateTimeField(null=True, blank=True)
    moderated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="moderated_reviews",
    )
    moderation_reason = models.CharField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "comic"], name="uniq_review_user_comic"),
        ]
        indexes = [
            models.Index(fields=["comic", "is_approved", "created_at"], name="reviews_comic_feed_idx"),
            models.Index(fields=["is_approved", "moderated_at"], name="reviews_moderation_idx"),
            models.Index(fields=["total_votes"], name="reviews_total_votes_idx"),
        ]

    def __str__(self):
        return f"Review<{self.user_id} on {self.comic_id}: {self.rating}>"

    @property
    def status(self) -> str:
        if self.is_approved:
            return self.STATUS_APPROVED
        if self.moderated_at is None:
            return self.STATUS_PENDING
        return self.STATUS_REJECTED

    @property
    def helpfulness_ratio(self) -> float:
        if not self.total_votes:
            return 0.0
        return round(self.helpful_votes / self.total_votes, 4)
