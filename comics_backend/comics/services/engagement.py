# comics/services/engagement.py

"""
PATH: comics/services/engagement.py

ENGAGEMENT SERVICE

- toggle_like: like/unlike with likes_count kept in the same transaction
- rate_comic: star rating stored on the user's library entry, then the comic's
  average is recalculated from all library ratings
- add_comment: public comment (auto-approved)
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from comics.models import Comic, ComicComment, ComicLike

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@transaction.atomic
def toggle_like(*, user, comic: Comic) -> tuple[bool, int]:
    """Returns (is_liked, likes_count)."""
    existing = ComicLike.objects.select_for_update().filter(user=user, comic=comic).first()

    if existing:
        existing.delete()
        comic.decrement_counter("likes_count")
        return False, comic.likes_count

    try:
        with transaction.atomic():
            ComicLike.objects.create(user=user, comic=comic)
    except IntegrityError:
        # concurrent like from the same user already landed
        comic.refresh_from_db(fields=["likes_count"])
        return True, comic.likes_count

    comic.increment_counter("likes_count")
    return True, comic.likes_count


def is_liked_by(comic: Comic, user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return ComicLike.objects.filter(user=user, comic=comic).exists()


@transaction.atomic
def rate_comic(*, user, comic: Comic, rating: int) -> Comic:
    from library.models import UserLibrary

    rating = max(MIN_RATING, min(MAX_RATING, int(rating)))

    entry, created = UserLibrary.objects.get_or_create(
        user=user,
        comic=comic,
        defaults={
            "access_type": UserLibrary.ACCESS_FREE if comic.is_free else UserLibrary.ACCESS_READING,
            "rating": rating,
        },
    )
    if not created:
        entry.rating = rating
        entry.save(update_fields=["rating", "updated_at"])

    comic.update_rating_from_library()

    logger.info(
        "Comic rated",
        extra={"comic_id": str(comic.id), "user_id": str(user.id), "rating": rating},
    )
    return comic


def add_comment(*, user, comic: Comic, content: str, is_spoiler: bool = False) -> ComicComment:
    return ComicComment.objects.create(
        user=user,
        comic=comic,
        content=content.strip(),
        is_spoiler=bool(is_spoiler),
    )


def approved_comments(comic: Comic):
    return comic.comments.filter(is_approved=True).select_related("user").order_by("-created_at")
