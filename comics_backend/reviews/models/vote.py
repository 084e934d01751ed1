# reviews/models/vote.py

import uuid

from django.conf import settings
from django.db import models


class ReviewVote(models.Model):
    """One helpful / not helpful vote per (user, review)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="review_votes",
    )
    review = models.ForeignKey(
        "reviews.ComicReview",
        on_delete=models.CASCADE,
        related_name="votes",
    )
    is_helpful = models.BooleanField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "review"], name="uniq_vote_user_review"),
        ]

    def __str__(self):
        return f"Vote<{self.user_id} {'+' if self.is_helpful else '-'} {self.review_id}>"
