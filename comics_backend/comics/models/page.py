# comics/models/page.py

import uuid

from django.db import models

from .comic import resolve_media_url


class ComicPage(models.Model):
    """
    One page image of a comic.

    image_url holds a remote URL when the page lives on a CDN; otherwise
    image_path is a default_storage path.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="pages",
    )
    page_number = models.PositiveIntegerField()

    image_url = models.CharField(max_length=500, blank=True, default="")
    image_path = models.CharField(max_length=500, blank=True, default="")
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    file_size = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["comic", "page_number"]
        constraints = [
            models.UniqueConstraint(fields=["comic", "page_number"], name="uniq_comic_page_number"),
        ]

    @property
    def url(self) -> str:
        return resolve_media_url(self.image_url or self.image_path)

    def __str__(self):
        return f"{self.comic_id} p{self.page_number}"
