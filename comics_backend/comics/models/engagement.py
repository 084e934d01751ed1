# comics/models/engagement.py

"""
ENGAGEMENT MODELS

- ComicLike: one like per (user, comic). Comic.likes_count is kept in step by
  the engagement service inside the same transaction.
- ComicComment: short public comments; is_approved gates visibility.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxLengthValidator, MinLengthValidator
from django.db import models


class ComicLike(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comic_likes",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="likes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "comic"], name="uniq_comic_like_per_user"),
        ]

    def __str__(self):
        return f"{self.user_id} ♥ {self.comic_id}"


class ComicComment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comic_comments",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    content = models.TextField(validators=[MinLengthValidator(1), MaxLengthValidator(1000)])
    is_spoiler = models.BooleanField(default=False)
    is_approved = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["comic", "is_approved", "created_at"], name="comics_comment_feed_idx"),
        ]

    def __str__(self):
        return f"Comment<{self.user_id} on {self.comic_id}>"
