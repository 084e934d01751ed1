# library/models/bookmark.py

import uuid

from django.conf import settings
from django.core.validators import MaxLengthValidator
from django.db import models


class ComicBookmark(models.Model):
    """One bookmark per (user, comic, page). Notes are optional."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comic_bookmarks",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="bookmarks",
    )
    page_number = models.PositiveIntegerField()
    note = models.TextField(blank=True, default="", validators=[MaxLengthValidator(500)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["comic", "page_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "comic", "page_number"],
                name="uniq_bookmark_user_comic_page",
            ),
        ]

    def __str__(self):
        return f"Bookmark<{self.comic_id} p{self.page_number}>"
