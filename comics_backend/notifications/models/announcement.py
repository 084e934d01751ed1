# notifications/models/announcement.py

"""
One row per comic once its release has been announced.

Scheduled releases (published_at in the future at save time) have no save
event when they go live; the release sweep looks for released comics
without this row.
"""

from __future__ import annotations

import uuid

from django.db import models


class ReleaseAnnouncement(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    comic = models.OneToOneField(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="release_announcement",
    )
    recipients = models.PositiveIntegerField(default=0)
    announced_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-announced_at"]

    def __str__(self):
        return f"ReleaseAnnouncement<{self.comic_id} -> {self.recipients}>"
