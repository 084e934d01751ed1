# library/services/bookmarks.py

"""
BOOKMARKS

Each add/remove re-syncs the progress row's bookmark_count, last_bookmark_at
and is_bookmarked so the reader UI can read them without a second query.
"""

from __future__ import annotations

from django.db import transaction
from django.db.models import Max

from comics.models import Comic
from library.models import ComicBookmark
from library.services.exceptions import BookmarkNotFoundError, InvalidProgressError
from library.services.progress import get_or_create_progress


def _sync_progress(user, comic: Comic) -> None:
    progress = get_or_create_progress(user, comic, lock=True)
    bookmarks = ComicBookmark.objects.filter(user=user, comic=comic)
    agg = bookmarks.aggregate(last=Max("updated_at"))

    progress.bookmark_count = bookmarks.count()
    progress.is_bookmarked = progress.bookmark_count > 0
    progress.last_bookmark_at = agg["last"]
    progress.save(update_fields=["bookmark_count", "is_bookmarked", "last_bookmark_at", "updated_at"])


@transaction.atomic
def add_bookmark(*, user, comic: Comic, page_number: int, note: str = "") -> tuple[ComicBookmark, bool]:
    """Returns (bookmark, created). An existing bookmark on the page gets the new note."""
    if page_number < 1 or (comic.page_count and page_number > comic.page_count):
        raise InvalidProgressError("Page number is out of range for this comic")

    bookmark, created = ComicBookmark.objects.update_or_create(
        user=user,
        comic=comic,
        page_number=page_number,
        defaults={"note": (note or "").strip()},
    )
    _sync_progress(user, comic)
    return bookmark, created


@transaction.atomic
def remove_bookmark(*, user, comic: Comic, page_number: int) -> None:
    deleted, _ = ComicBookmark.objects.filter(user=user, comic=comic, page_number=page_number).delete()
    if not deleted:
        raise BookmarkNotFoundError("Bookmark not found")
    _sync_progress(user, comic)


def list_bookmarks(*, user, comic: Comic | None = None):
    qs = ComicBookmark.objects.filter(user=user).select_related("comic")
    if comic is not None:
        qs = qs.filter(comic=comic)
    return qs.order_by("comic__title", "page_number")
