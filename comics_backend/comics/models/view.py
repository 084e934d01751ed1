# comics/models/view.py

import uuid

from django.conf import settings
from django.db import models


class ComicView(models.Model):
    """
    Append-only view log.

    Deduplication (same user, else session, else IP within an hour) happens
    in comics.services.view_tracking before a row is written.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="views",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="comic_views",
    )
    session_key = models.CharField(max_length=64, blank=True, default="")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True, default="")
    viewed_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["-viewed_at"]
        indexes = [
            models.Index(fields=["comic", "viewed_at"], name="comics_view_comic_time_idx"),
            models.Index(fields=["user", "viewed_at"], name="comics_view_user_time_idx"),
        ]

    def __str__(self):
        return f"View<{self.comic_id} @ {self.viewed_at:%Y-%m-%d %H:%M}>"
