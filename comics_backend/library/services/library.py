# library/services/library.py

"""
======================================================
PATH: library/services/library.py
======================================================
LIBRARY SERVICE

Rules:
- One entry per (user, comic); adding twice returns the existing entry.
- A paid comic may only be added for tracking (access_type=reading) unless
  the user already has access; access grants are written by payments.
- Quick ratings are clamped to 1..5 and feed Comic.average_rating.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Avg, Count, Q, Sum

from comics.models import Comic
from library.models import UserComicProgress, UserLibrary
from library.services.exceptions import LibraryAccessError, LibraryEntryNotFoundError

logger = logging.getLogger(__name__)

RECENTLY_ADDED_LIMIT = 10
ADDABLE_ACCESS_TYPES = {UserLibrary.ACCESS_FREE, UserLibrary.ACCESS_READING}


def user_library(user):
    return UserLibrary.objects.filter(user=user).select_related("comic")


def get_entry(user, comic: Comic) -> UserLibrary:
    entry = UserLibrary.objects.filter(user=user, comic=comic).select_related("comic").first()
    if entry is None:
        raise LibraryEntryNotFoundError("Comic not in library")
    return entry


# ============================================================
# ADD / REMOVE / FAVORITE
# ============================================================


@transaction.atomic
def add_to_library(*, user, comic: Comic, access_type: str | None = None) -> tuple[UserLibrary, bool]:
    """Returns (entry, created)."""
    if access_type is None:
        access_type = UserLibrary.ACCESS_FREE if comic.is_free else UserLibrary.ACCESS_READING

    if access_type not in ADDABLE_ACCESS_TYPES:
        raise LibraryAccessError(f"Unsupported access type: {access_type}")

    if (
        access_type == UserLibrary.ACCESS_FREE
        and not comic.is_free
        and not user.has_access_to_comic(comic)
    ):
        raise LibraryAccessError("This comic must be purchased before it can be added as free.")

    entry, created = UserLibrary.objects.get_or_create(
        user=user,
        comic=comic,
        defaults={"access_type": access_type},
    )
    if created:
        logger.info(
            "Comic added to library",
            extra={"user_id": str(user.id), "comic_id": str(comic.id), "access_type": access_type},
        )
    return entry, created


@transaction.atomic
def remove_from_library(*, user, comic: Comic) -> None:
    entry = get_entry(user, comic)
    had_rating = entry.rating is not None
    entry.delete()
    if had_rating:
        comic.update_rating_from_library()


@transaction.atomic
def toggle_favorite(*, user, comic: Comic) -> UserLibrary:
    entry, _ = add_to_library(user=user, comic=comic)
    entry = UserLibrary.objects.select_for_update().get(pk=entry.pk)
    entry.is_favorite = not entry.is_favorite
    entry.save(update_fields=["is_favorite", "updated_at"])
    return entry


@transaction.atomic
def set_rating(*, user, comic: Comic, rating, review: str | None = None) -> UserLibrary:
    entry = get_entry(user, comic)
    entry.rating = UserLibrary.clamp_rating(rating)
    fields = ["rating", "updated_at"]
    if review is not None:
        entry.review = review.strip()
        fields.append("review")
    entry.save(update_fields=fields)

    comic.update_rating_from_library()
    return entry


def favorites(user):
    return user_library(user).filter(is_favorite=True).order_by("-updated_at")


def recently_added(user, *, limit: int = RECENTLY_ADDED_LIMIT):
    return list(user_library(user).order_by("-created_at")[:limit])


# ============================================================
# STATISTICS
# ============================================================


def library_statistics(user) -> dict:
    entries = UserLibrary.objects.filter(user=user)

    agg = entries.aggregate(
        total=Count("id"),
        favorites=Count("id", filter=Q(is_favorite=True)),
        total_spent=Sum("purchase_price", filter=Q(access_type=UserLibrary.ACCESS_PURCHASED)),
        average_rating=Avg("rating"),
        reading_seconds=Sum("total_reading_time"),
    )

    progress = UserComicProgress.objects.filter(user=user)
    completed = progress.filter(is_completed=True).count()
    in_progress = progress.filter(is_completed=False, current_page__gt=1).count()

    average_rating = agg["average_rating"]
    return {
        "total_comics": agg["total"] or 0,
        "favorites": agg["favorites"] or 0,
        "completed": completed,
        "in_progress": in_progress,
        "total_spent": f"{(agg['total_spent'] or Decimal('0.00')):.2f}",
        "average_rating_given": round(float(average_rating), 2) if average_rating is not None else None,
        "total_reading_time": agg["reading_seconds"] or 0,
    }
